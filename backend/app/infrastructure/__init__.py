"""Infrastructure Layer: database pools, blob storage signing, logging setup.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Underlying client library errors propagate unchanged
"""

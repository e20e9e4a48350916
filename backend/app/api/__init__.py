"""API Layer: FastAPI routes and error handlers.

Invariants:
    - Routes are built from injected pools/issuers and registered by the plugin
    - Failures reach clients only as plain text 500
"""

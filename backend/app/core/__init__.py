"""Core Layer: error hierarchy and domain value types, no IO.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
"""

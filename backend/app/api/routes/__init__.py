"""Route Modules: one file per concern, each exposing build_router().

Invariants:
    - Routes never contain query or signing logic (delegate to services/infrastructure)
"""

"""DB Bridge: server extension for pooled SQL passthrough and signed blob URLs.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""

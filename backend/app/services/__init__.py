"""Services Layer: query execution over pooled backend connections.

Invariants:
    - Services receive their pools as arguments (no ambient pool state)
"""

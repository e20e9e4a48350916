"""Pydantic Schemas: request/response validation for the extension routes.

Invariants:
    - Schemas validate body shape only; SQL content is never inspected
"""

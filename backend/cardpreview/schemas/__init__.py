"""Pydantic Schemas — response contracts for API endpoints.

Invariants:
    - Schemas validate at the system boundary only

Design Decisions:
    - Separate from core types: schemas are API contracts, core types are domain values
"""

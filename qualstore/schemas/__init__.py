"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (one explicit struct per mutation input)
    - Domain types from core/ used for enum fields

Design Decisions:
    - Separate from core entities: schemas are API contracts, entities are store records
"""

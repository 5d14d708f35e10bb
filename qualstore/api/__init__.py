"""API Layer — FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses (except the XML export)

Design Decisions:
    - Thin routes delegate to the store's Mutation API
"""

"""Core Layer — coding store domain logic, no IO, no async, no network.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or schemas/
    - Analytics, export and reference checks are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell: the store is the only
      stateful object here, everything it derives is a pure function
"""

"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/ or schemas/
    - Documents, policies and rulesets are plain in-memory objects

Design Decisions:
    - Functional core separated from the orchestration shell in services/
"""

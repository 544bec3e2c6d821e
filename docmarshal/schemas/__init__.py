"""Pydantic Schemas — option parsing and schema-backed rulesets.

Invariants:
    - Schemas validate at the marshalling boundary (caller options, raw rows)
    - Domain types from core/ are reused, never redefined

Design Decisions:
    - Separate from core: pydantic is the only third-party import here
"""

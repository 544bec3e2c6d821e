"""API Layer — error handlers for FastAPI hosts that marshal request bodies.

Invariants:
    - The engine itself exposes no routes; hosts register handlers explicitly
"""

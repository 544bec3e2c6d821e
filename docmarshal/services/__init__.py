"""Services Layer — collection wiring, beforeMarshal events and the marshaller.

Invariants:
    - Services orchestrate core objects; they never persist anything
    - Every hook is dispatched synchronously, in registration order
"""

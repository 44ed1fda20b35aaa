"""Infrastructure Layer — upstream clients, local store and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/
    - Every call to an upstream or the local store goes through resilient_call

Design Decisions:
    - Resilient wrapper over raw clients (ADR: single responsibility)
"""

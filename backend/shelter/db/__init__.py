"""Database Infrastructure — SQLAlchemy declarative base for the local store.

Invariants:
    - All sessions are async (AsyncSession)
"""

"""Services Layer — orchestration of upstream calls around the pure core.

Invariants:
    - One component per file, collaborators injected through __init__
    - Services never call a collaborator except through call_with_retry

Design Decisions:
    - CatShelterService is the only entry point used by the API layer
"""

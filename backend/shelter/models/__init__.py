"""ORM Models — SQLAlchemy declarative models for the local store.

Invariants:
    - All models inherit from Base (db/base.py)
    - Only data owned by no upstream service lives here

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all / autogenerate
"""

from shelter.models.additional_cat_info import AdditionalCatInfo  # noqa: F401
from shelter.models.favourite_cats import UserFavouriteCats  # noqa: F401

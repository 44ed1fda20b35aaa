"""Favourite Ids — pure mutations of a user's favourite-cat record.

Invariants:
    - A cat id appears at most once in a record
    - Each mutation returns None when the record would not change (caller skips the write)
    - A new record starts at version 0; persisted records keep their version for CAS

Design Decisions:
    - Mutations as plain functions: the favourites manager re-applies them after a CAS conflict
"""

from typing import Callable

from shelter.core.domain_types import CatId, UserId
from shelter.core.entities import UserFavouriteCats

FavouritesMutation = Callable[[UserFavouriteCats | None], UserFavouriteCats | None]


def adding(user_id: UserId, cat_id: CatId) -> FavouritesMutation:
    """Mutation that appends cat_id, creating the record if needed."""
    def mutate(record: UserFavouriteCats | None) -> UserFavouriteCats | None:
        if record is None:
            return UserFavouriteCats(user_id=user_id, cat_ids=(cat_id,))
        if cat_id in record.cat_ids:
            return None
        return UserFavouriteCats(
            user_id=record.user_id,
            cat_ids=record.cat_ids + (cat_id,),
            version=record.version,
        )
    return mutate


def removing(cat_id: CatId) -> FavouritesMutation:
    """Mutation that drops cat_id; absent record or id is a no-op."""
    def mutate(record: UserFavouriteCats | None) -> UserFavouriteCats | None:
        if record is None or cat_id not in record.cat_ids:
            return None
        return UserFavouriteCats(
            user_id=record.user_id,
            cat_ids=tuple(c for c in record.cat_ids if c != cat_id),
            version=record.version,
        )
    return mutate


def contains(cat_id: CatId) -> Callable[[UserFavouriteCats], bool]:
    return lambda record: cat_id in record.cat_ids

"""Favourites Manager — per-user favourite cats in the local store.

Invariants:
    - Only claimed cats (with AdditionalCatInfo) can be added; others are a silent no-op
    - A cat id appears at most once per record; removing an absent id is a no-op
    - Listing drops ids that no longer resolve (NotFoundError) or resolve to an unclaimed
      cat (sold, local info deleted), without rewriting the record
    - Every write is compare-and-swap; on conflict the record is re-read and the
      mutation re-applied, up to write_attempts times, then ConcurrencyError

Design Decisions:
    - Mutations are pure functions (core/favourite_ids.py) so they can be re-applied safely
    - remove_from_all is best-effort and sequential: a failure midway leaves some stale ids,
      which the listing path tolerates
"""

import logging
from functools import partial

from shelter.core.domain_types import LOCAL_STORE, CatId, UserId
from shelter.core.entities import (
    AdditionalCatInfo, AuthenticatedUser, Cat, UserFavouriteCats,
)
from shelter.core.errors import ConcurrencyError, ErrorContext, NotFoundError
from shelter.core.favourite_ids import (
    FavouritesMutation, adding, contains, removing,
)
from shelter.core.repository_protocols import Collection
from shelter.infrastructure.resilient_call import call_with_retry
from shelter.services.cat_aggregation import CatAggregator

logger = logging.getLogger(__name__)


class FavouritesManager:
    """Owns the user → favourite cat ids records."""

    def __init__(
        self,
        favourites: Collection[UserId, UserFavouriteCats],
        additional_info: Collection[CatId, AdditionalCatInfo],
        cats: CatAggregator,
        write_attempts: int = 3,
    ):
        self._favourites = favourites
        self._additional_info = additional_info
        self._cats = cats
        self._write_attempts = write_attempts

    async def add(self, user: AuthenticatedUser, cat_id: CatId) -> None:
        info = await call_with_retry(
            partial(self._additional_info.find, cat_id), upstream=LOCAL_STORE,
        )
        if info is None:
            logger.info(
                "Ignoring favourite for unclaimed cat",
                extra={"user_id": user.user_id, "cat_id": cat_id},
            )
            return
        await self._update(user.user_id, adding(user.user_id, cat_id))

    async def favourite_cats(self, user: AuthenticatedUser) -> list[Cat]:
        record = await self._find(user.user_id)
        if record is None:
            return []

        cats: list[Cat] = []
        for cat_id in record.cat_ids:
            try:
                cat = await self._cats.get_cat(cat_id)
            except NotFoundError:
                logger.info(
                    "Skipping favourite that no longer resolves",
                    extra={"user_id": user.user_id, "cat_id": cat_id},
                )
                continue
            if not cat.is_claimed:
                # Sold: billing still knows the product, the shelter no longer does
                logger.info(
                    "Skipping favourite that is no longer in the shelter",
                    extra={"user_id": user.user_id, "cat_id": cat_id},
                )
                continue
            cats.append(cat)
        return cats

    async def remove(self, user: AuthenticatedUser, cat_id: CatId) -> None:
        await self._update(user.user_id, removing(cat_id))

    async def remove_from_all(self, cat_id: CatId) -> int:
        """Drop cat_id from every user's favourites. Returns how many records held it."""
        records = await call_with_retry(
            partial(self._favourites.find_many, contains(cat_id)),
            upstream=LOCAL_STORE,
        )
        for record in records:
            await self._update(record.user_id, removing(cat_id), record)
        return len(records)

    async def _find(self, user_id: UserId) -> UserFavouriteCats | None:
        return await call_with_retry(
            partial(self._favourites.find, user_id), upstream=LOCAL_STORE,
        )

    async def _update(
        self,
        user_id: UserId,
        mutate: FavouritesMutation,
        record: UserFavouriteCats | None = None,
    ) -> None:
        """Read-modify-write with CAS. A supplied record skips the first read."""
        fresh = record is not None
        for attempt in range(1, self._write_attempts + 1):
            if not fresh:
                record = await self._find(user_id)
            fresh = False

            changed = mutate(record)
            if changed is None:
                return
            try:
                await call_with_retry(
                    partial(self._favourites.upsert, changed), upstream=LOCAL_STORE,
                )
                return
            except ConcurrencyError:
                logger.info(
                    f"Favourites write conflict, re-reading (attempt {attempt})",
                    extra={"user_id": user_id, "attempt": attempt},
                )

        raise ConcurrencyError(
            "Favourites were modified concurrently, try again",
            ErrorContext(user_id=str(user_id)),
        )

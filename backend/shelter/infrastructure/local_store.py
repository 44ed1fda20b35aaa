"""Local Store — SQLAlchemy-backed keyed collections for shelter-owned records.

Invariants:
    - One collection per entity type; each call runs in its own short session
    - Collections return core entities, never ORM rows (rows never escape a session)
    - find_many evaluates the predicate on core entities (document-store semantics)
    - Favourites writes are compare-and-swap on version: a lost race raises ConcurrencyError

Design Decisions:
    - Template base class with _to_record/_to_row hooks: one place for session handling
    - Conditional UPDATE ... WHERE version = n over ORM version_id_col: the CAS is visible
      in one statement and works identically on PostgreSQL and SQLite
    - find_many loads the whole table and filters in Python (predicate contract). Fine for
      the favourites table at shelter scale; a large user base needs a JSON containment
      query instead
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Generic, TypeVar
from uuid import UUID

from sqlalchemy import delete, inspect, select, update
from sqlalchemy.exc import IntegrityError

from shelter.core.domain_types import CatId, UserId
from shelter.core.entities import AdditionalCatInfo, UserFavouriteCats
from shelter.core.errors import ConcurrencyError, ErrorContext
from shelter.infrastructure.database import DatabaseSessionManager
from shelter.models.additional_cat_info import (
    AdditionalCatInfo as AdditionalCatInfoModel,
)
from shelter.models.favourite_cats import (
    UserFavouriteCats as UserFavouriteCatsModel,
)

logger = logging.getLogger(__name__)

K = TypeVar("K")
R = TypeVar("R")


class SqlAlchemyCollection(Generic[K, R]):
    """Keyed collection over one ORM model. Subclasses supply the row mapping."""

    model: type[Any]

    def __init__(self, db: DatabaseSessionManager):
        self._db = db
        self._key_column = inspect(self.model).primary_key[0]

    def _to_record(self, row: Any) -> R:
        raise NotImplementedError

    def _to_row(self, record: R) -> Any:
        raise NotImplementedError

    async def find(self, key: K) -> R | None:
        async with self._db.session() as db:
            row = await db.get(self.model, key)
            return self._to_record(row) if row is not None else None

    async def find_many(self, predicate: Callable[[R], bool]) -> list[R]:
        async with self._db.session() as db:
            result = await db.execute(select(self.model))
            records = [self._to_record(row) for row in result.scalars().all()]
        return [r for r in records if predicate(r)]

    async def upsert(self, record: R) -> R:
        async with self._db.session() as db:
            await db.merge(self._to_row(record))
            await db.commit()
        return record

    async def delete(self, key: K) -> None:
        async with self._db.session() as db:
            await db.execute(delete(self.model).where(self._key_column == key))
            await db.commit()


class AdditionalCatInfoCollection(SqlAlchemyCollection[CatId, AdditionalCatInfo]):
    """Claimed-cat metadata keyed by cat id."""

    model = AdditionalCatInfoModel

    def _to_record(self, row: AdditionalCatInfoModel) -> AdditionalCatInfo:
        return AdditionalCatInfo(
            cat_id=CatId(row.id),
            added_by=UserId(row.added_by),
            name=row.name,
            photo=row.photo,
        )

    def _to_row(self, record: AdditionalCatInfo) -> AdditionalCatInfoModel:
        return AdditionalCatInfoModel(
            id=record.cat_id,
            added_by=record.added_by,
            name=record.name,
            photo=record.photo,
        )


class FavouriteCatsCollection(SqlAlchemyCollection[UserId, UserFavouriteCats]):
    """Favourites keyed by user id, written with optimistic concurrency."""

    model = UserFavouriteCatsModel

    def _to_record(self, row: UserFavouriteCatsModel) -> UserFavouriteCats:
        return UserFavouriteCats(
            user_id=UserId(row.user_id),
            cat_ids=tuple(CatId(UUID(c)) for c in row.cat_ids),
            version=row.version,
        )

    def _to_row(self, record: UserFavouriteCats) -> UserFavouriteCatsModel:
        return UserFavouriteCatsModel(
            user_id=record.user_id,
            cat_ids=[str(c) for c in record.cat_ids],
            version=1,
        )

    async def upsert(self, record: UserFavouriteCats) -> UserFavouriteCats:
        """Insert when version is 0, else update only if the stored version still matches."""
        if record.version == 0:
            return await self._insert(record)

        async with self._db.session() as db:
            result = await db.execute(
                update(UserFavouriteCatsModel)
                .where(UserFavouriteCatsModel.user_id == record.user_id)
                .where(UserFavouriteCatsModel.version == record.version)
                .values(
                    cat_ids=[str(c) for c in record.cat_ids],
                    version=record.version + 1,
                    updated_at=datetime.now(timezone.utc),
                ),
            )
            if result.rowcount == 0:
                raise _conflict(record.user_id)
            await db.commit()
        return replace(record, version=record.version + 1)

    async def _insert(self, record: UserFavouriteCats) -> UserFavouriteCats:
        async with self._db.session() as db:
            db.add(self._to_row(record))
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                raise _conflict(record.user_id)
        return replace(record, version=1)


def _conflict(user_id: UserId) -> ConcurrencyError:
    logger.info("Favourites write lost a race", extra={"user_id": user_id})
    return ConcurrencyError(
        "Favourites were modified concurrently",
        ErrorContext(user_id=str(user_id)),
    )

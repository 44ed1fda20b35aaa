"""UserFavouriteCats ORM — one row per user holding the ids of favourited cats.

Invariants:
    - user_id is the primary key: at most one record per user
    - cat_ids holds string UUIDs, no duplicates; an empty list is a valid record
    - version increments on every write; writers compare-and-swap on it

Design Decisions:
    - JSON column for cat_ids: record is read and written whole (ADR: document-style store)
    - Cat ids are weak references: no FK, cleanup is an explicit purchase step
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Integer, DateTime, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from shelter.db.base import Base


class UserFavouriteCats(Base):
    """Favourite cats of a single user."""
    __tablename__ = "user_favourite_cats"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    cat_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

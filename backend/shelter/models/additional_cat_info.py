"""AdditionalCatInfo ORM — shelter-owned metadata for a cat registered through the API.

Invariants:
    - id equals the billing product id (no FK: billing lives in another service)
    - Row presence marks the cat as claimed; absence hides it from listings
    - Written once by registration, deleted by purchase, never updated

Design Decisions:
    - LargeBinary for photo: photos are small thumbnails supplied at registration
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Text, DateTime, LargeBinary, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from shelter.db.base import Base


class AdditionalCatInfo(Base):
    """Local cat metadata not owned by any upstream service."""
    __tablename__ = "additional_cat_info"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    added_by: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    photo: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

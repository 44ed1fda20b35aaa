"""Domain Entities — records exchanged with collaborators and the local store.

Invariants:
    - Upstream-owned records (Product, Bill, BreedInfo, CatPriceHistory) are read-only here
    - AdditionalCatInfo is immutable once written; deleted only by a purchase
    - UserFavouriteCats.version == 0 means "never persisted"
    - Cat is a transient aggregate, rebuilt on every read and never stored

Design Decisions:
    - Pure dataclasses, no ORM coupling: the shell maps rows to these (ADR: functional core)
    - frozen for upstream records; favourites record is replaced, not mutated in place
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from shelter.core.domain_types import BillId, BreedId, CatId, UserId


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity established by the authorization gate, valid for one request."""
    user_id: UserId


@dataclass(frozen=True)
class AuthorizationResult:
    is_success: bool
    user_id: UserId | None = None


@dataclass(frozen=True)
class Product:
    """Billing ledger entry. Its id doubles as the cat id."""
    id: CatId
    breed_id: BreedId


@dataclass(frozen=True)
class Bill:
    id: BillId
    product_id: CatId
    price: Decimal


@dataclass(frozen=True)
class BreedInfo:
    breed_id: BreedId
    breed_name: str
    photo: bytes | None = None


@dataclass(frozen=True)
class PricePoint:
    date: datetime
    price: Decimal


@dataclass(frozen=True)
class CatPriceHistory:
    """Trades for one breed, oldest first. Empty when the breed never traded."""
    breed_id: BreedId
    prices: tuple[PricePoint, ...] = ()


@dataclass(frozen=True)
class AdditionalCatInfo:
    """Shelter-owned metadata. Its presence marks the cat as claimed."""
    cat_id: CatId
    added_by: UserId
    name: str
    photo: bytes | None = None


@dataclass(frozen=True)
class UserFavouriteCats:
    user_id: UserId
    cat_ids: tuple[CatId, ...] = ()
    version: int = 0


@dataclass(frozen=True)
class AddCatRequest:
    breed: str
    name: str
    photo: bytes | None = None


@dataclass
class Cat:
    """User-facing aggregate merged from billing, catalog, exchange and local data."""
    id: CatId
    breed_id: BreedId
    price: Decimal
    prices: list[PricePoint] = field(default_factory=list)
    breed: str | None = None
    breed_photo: bytes | None = None
    name: str | None = None
    photo: bytes | None = None
    added_by: UserId | None = None

    @property
    def is_claimed(self) -> bool:
        """True while the shelter holds AdditionalCatInfo for this cat."""
        return self.added_by is not None

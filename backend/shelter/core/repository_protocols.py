"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - Every upstream service and local collection accessed through a Protocol type
    - Implementations provided by shell via constructor injection
    - Transient failures surface as ConnectivityError, permanent ones as DomainError

Design Decisions:
    - Protocol over ABC: structural subtyping, fakes in tests need no inheritance
    - "Absent" is None, not an exception, wherever the contract allows absence
"""

from decimal import Decimal
from typing import Callable, Protocol, TypeVar

from shelter.core.domain_types import BreedId, CatId
from shelter.core.entities import (
    AuthorizationResult, Bill, BreedInfo, CatPriceHistory, Product,
)

K = TypeVar("K")
R = TypeVar("R")


class AuthorizationClient(Protocol):
    """Contract for the session authorization service."""
    async def authorize(self, session_id: str) -> AuthorizationResult: ...


class BillingClient(Protocol):
    """Contract for the billing ledger."""
    async def list_products(self, skip: int, limit: int) -> list[Product]: ...
    async def get_product(self, product_id: CatId) -> Product | None: ...
    async def add_product(self, product: Product) -> None: ...
    async def sell_product(self, product_id: CatId, price: Decimal) -> Bill: ...


class CatInfoClient(Protocol):
    """Contract for the breed catalog."""
    async def find_by_breed_name(self, breed_name: str) -> BreedInfo | None: ...
    async def find_by_breed_ids(self, breed_ids: list[BreedId]) -> list[BreedInfo]: ...


class CatExchangeClient(Protocol):
    """Contract for the price-exchange history service."""
    async def get_price_history(self, breed_id: BreedId) -> CatPriceHistory: ...
    async def get_price_histories(
        self, breed_ids: list[BreedId],
    ) -> dict[BreedId, CatPriceHistory]: ...


class Collection(Protocol[K, R]):
    """Keyed local collection, one per entity type, implemented by the shell."""
    async def find(self, key: K) -> R | None: ...
    async def find_many(self, predicate: Callable[[R], bool]) -> list[R]: ...
    async def upsert(self, record: R) -> R: ...
    async def delete(self, key: K) -> None: ...

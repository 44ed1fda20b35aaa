"""In-memory fakes for the upstream services and local collections.

Each fake records the calls it receives and can be scripted to fail:
    fake.failures["method_name"] = [ConnectivityError(...), ...]
pops one exception per call until the list is empty.
"""

import asyncio
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable
from uuid import UUID, uuid4

from shelter.core.entities import (
    AdditionalCatInfo, AuthorizationResult, Bill, BreedInfo, CatPriceHistory,
    PricePoint, Product, UserFavouriteCats,
)
from shelter.core.errors import ConcurrencyError, NotFoundError


class _Recording:
    def __init__(self):
        self.calls: list[str] = []
        self.failures: dict[str, list[Exception]] = {}

    def _record(self, name: str) -> None:
        self.calls.append(name)
        scripted = self.failures.get(name)
        if scripted:
            raise scripted.pop(0)

    def count(self, name: str) -> int:
        return self.calls.count(name)


class FakeAuthorizationClient(_Recording):
    def __init__(self):
        super().__init__()
        self.sessions: dict[str, UUID] = {}

    async def authorize(self, session_id):
        self._record("authorize")
        user_id = self.sessions.get(session_id)
        return AuthorizationResult(is_success=user_id is not None, user_id=user_id)


class FakeBillingClient(_Recording):
    def __init__(self):
        super().__init__()
        self.products: dict[UUID, Product] = {}
        self.bills: list[Bill] = []
        self.sold: set[UUID] = set()

    async def list_products(self, skip, limit):
        self._record("list_products")
        return list(self.products.values())[skip:skip + limit]

    async def get_product(self, product_id):
        self._record("get_product")
        return self.products.get(product_id)

    async def add_product(self, product):
        self._record("add_product")
        self.products[product.id] = product

    async def sell_product(self, product_id, price):
        self._record("sell_product")
        if product_id not in self.products:
            raise NotFoundError("Product", str(product_id))
        # The product stays queryable under its new owner
        self.sold.add(product_id)
        bill = Bill(id=uuid4(), product_id=product_id, price=price)
        self.bills.append(bill)
        return bill


class FakeCatInfoClient(_Recording):
    def __init__(self):
        super().__init__()
        self.breeds: dict[UUID, BreedInfo] = {}

    async def find_by_breed_name(self, breed_name):
        self._record("find_by_breed_name")
        for breed in self.breeds.values():
            if breed.breed_name == breed_name:
                return breed
        return None

    async def find_by_breed_ids(self, breed_ids):
        self._record("find_by_breed_ids")
        return [self.breeds[b] for b in breed_ids if b in self.breeds]


class FakeCatExchangeClient(_Recording):
    def __init__(self):
        super().__init__()
        self.histories: dict[UUID, CatPriceHistory] = {}

    async def get_price_history(self, breed_id):
        self._record("get_price_history")
        return self.histories.get(breed_id) or CatPriceHistory(breed_id=breed_id)

    async def get_price_histories(self, breed_ids):
        self._record("get_price_histories")
        return {b: self.histories[b] for b in breed_ids if b in self.histories}


class InMemoryCollection(_Recording):
    """Dict-backed collection. Reads yield to the loop so concurrent writers interleave."""

    def __init__(self, key_of: Callable):
        super().__init__()
        self._key_of = key_of
        self.records: dict = {}

    async def find(self, key):
        self._record("find")
        await asyncio.sleep(0)
        return self.records.get(key)

    async def find_many(self, predicate):
        self._record("find_many")
        return [r for r in self.records.values() if predicate(r)]

    async def upsert(self, record):
        self._record("upsert")
        self.records[self._key_of(record)] = record
        return record

    async def delete(self, key):
        self._record("delete")
        self.records.pop(key, None)


class InMemoryFavouritesCollection(InMemoryCollection):
    """Favourites with the same compare-and-swap contract as the SQL collection."""

    def __init__(self):
        super().__init__(lambda r: r.user_id)

    async def upsert(self, record: UserFavouriteCats) -> UserFavouriteCats:
        self._record("upsert")
        stored = self.records.get(record.user_id)
        current = stored.version if stored else 0
        if record.version != current:
            raise ConcurrencyError("Favourites were modified concurrently")
        saved = replace(record, version=current + 1)
        self.records[record.user_id] = saved
        return saved


class FakeShelter:
    """All collaborators of the shelter service plus seeding helpers."""

    def __init__(self):
        self.authorization = FakeAuthorizationClient()
        self.billing = FakeBillingClient()
        self.cat_info = FakeCatInfoClient()
        self.cat_exchange = FakeCatExchangeClient()
        self.additional_info = InMemoryCollection(lambda r: r.cat_id)
        self.favourites = InMemoryFavouritesCollection()

    def sign_in(self, session_id: str = "session-1") -> UUID:
        user_id = uuid4()
        self.authorization.sessions[session_id] = user_id
        return user_id

    def seed_breed(self, name: str = "Siamese", prices: tuple[str, ...] = ()) -> UUID:
        breed_id = uuid4()
        self.cat_info.breeds[breed_id] = BreedInfo(
            breed_id=breed_id, breed_name=name, photo=b"breed-photo",
        )
        if prices:
            start = datetime(2026, 1, 1, tzinfo=timezone.utc)
            self.cat_exchange.histories[breed_id] = CatPriceHistory(
                breed_id=breed_id,
                prices=tuple(
                    PricePoint(date=start + timedelta(days=i), price=Decimal(p))
                    for i, p in enumerate(prices)
                ),
            )
        return breed_id

    def seed_cat(
        self,
        breed_id: UUID,
        name: str = "Tom",
        *,
        claimed: bool = True,
        added_by: UUID | None = None,
    ) -> UUID:
        cat_id = uuid4()
        self.billing.products[cat_id] = Product(id=cat_id, breed_id=breed_id)
        if claimed:
            self.additional_info.records[cat_id] = AdditionalCatInfo(
                cat_id=cat_id, added_by=added_by or uuid4(), name=name, photo=b"cat-photo",
            )
        return cat_id

    def favourite_ids(self, user_id: UUID) -> tuple:
        record = self.favourites.records.get(user_id)
        return record.cat_ids if record else ()

"""Upstream HTTP Clients — httpx adapters for authorization, billing, catalog and exchange.

Invariants:
    - Transport errors, timeouts and 5xx → ConnectivityError (transient)
    - 404 → None where the contract allows absence, else NotFoundError
    - 401/403 → AuthorizationError; other 4xx → ValidationError
    - No retries here: resilient_call owns the retry policy
    - Wire format: JSON; UUIDs and decimals as strings; photos base64; dates ISO-8601

Design Decisions:
    - One httpx.AsyncClient per upstream, built by build_http_client and closed by the lifespan
    - Shared _UpstreamHttpClient base: every adapter maps failures the same way
"""

import base64
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

import httpx

from shelter.core.domain_types import (
    AUTHORIZATION, BILLING, CAT_EXCHANGE, CAT_INFO, BillId, BreedId, CatId, UserId,
)
from shelter.core.entities import (
    AuthorizationResult, Bill, BreedInfo, CatPriceHistory, PricePoint, Product,
)
from shelter.core.errors import (
    AuthorizationError, ConnectivityError, ErrorContext, NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def build_http_client(base_url: str, timeout_seconds: float) -> httpx.AsyncClient:
    """Create an httpx.AsyncClient with the shared timeout and JSON headers."""
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(timeout_seconds),
        headers={"Accept": "application/json"},
    )


class _UpstreamHttpClient:
    """Base adapter: issues one request and maps the outcome to the error hierarchy."""

    upstream: str = "upstream"

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    async def _request(
        self, method: str, url: str, *, allow_not_found: bool = False, **kwargs: Any,
    ) -> httpx.Response | None:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.TransportError as e:
            raise ConnectivityError(self.upstream, type(e).__name__)

        status = response.status_code
        if status >= 500:
            raise ConnectivityError(self.upstream, f"HTTP {status}")
        if status == 404:
            if allow_not_found:
                return None
            raise NotFoundError(self.upstream, url)
        if status in (401, 403):
            raise AuthorizationError(ErrorContext(upstream=self.upstream))
        if status >= 400:
            logger.warning(
                f"{self.upstream} rejected {method} {url}: HTTP {status}",
                extra={"upstream": self.upstream},
            )
            raise ValidationError(f"{self.upstream} rejected the request")
        return response


# ─── Wire decoding ───────────────────────────────────────────────

def _decode_photo(value: str | None) -> bytes | None:
    return base64.b64decode(value) if value else None


def _parse_product(data: dict) -> Product:
    return Product(
        id=CatId(_uuid(data["id"])), breed_id=BreedId(_uuid(data["breed_id"])),
    )


def _parse_breed(data: dict) -> BreedInfo:
    return BreedInfo(
        breed_id=BreedId(_uuid(data["breed_id"])),
        breed_name=data["breed_name"],
        photo=_decode_photo(data.get("photo")),
    )


def _parse_history(breed_id: BreedId, data: dict) -> CatPriceHistory:
    prices = tuple(
        PricePoint(
            date=datetime.fromisoformat(p["date"]),
            price=Decimal(str(p["price"])),
        )
        for p in data.get("prices") or []
    )
    return CatPriceHistory(breed_id=breed_id, prices=prices)


def _uuid(value: str) -> UUID:
    return UUID(str(value))


# ─── Adapters ────────────────────────────────────────────────────

class HttpAuthorizationClient(_UpstreamHttpClient):
    upstream = AUTHORIZATION

    async def authorize(self, session_id: str) -> AuthorizationResult:
        response = await self._request(
            "POST", "/authorize", json={"session_id": session_id},
        )
        data = response.json()
        user_id = data.get("user_id")
        return AuthorizationResult(
            is_success=bool(data.get("is_success")),
            user_id=UserId(_uuid(user_id)) if user_id else None,
        )


class HttpBillingClient(_UpstreamHttpClient):
    upstream = BILLING

    async def list_products(self, skip: int, limit: int) -> list[Product]:
        response = await self._request(
            "GET", "/products", params={"skip": skip, "limit": limit},
        )
        return [_parse_product(p) for p in response.json()]

    async def get_product(self, product_id: CatId) -> Product | None:
        response = await self._request(
            "GET", f"/products/{product_id}", allow_not_found=True,
        )
        return _parse_product(response.json()) if response is not None else None

    async def add_product(self, product: Product) -> None:
        await self._request(
            "POST", "/products",
            json={"id": str(product.id), "breed_id": str(product.breed_id)},
        )

    async def sell_product(self, product_id: CatId, price: Decimal) -> Bill:
        response = await self._request(
            "POST", f"/products/{product_id}/sell", json={"price": str(price)},
        )
        data = response.json()
        return Bill(
            id=BillId(_uuid(data["id"])),
            product_id=CatId(_uuid(data["product_id"])),
            price=Decimal(str(data["price"])),
        )


class HttpCatInfoClient(_UpstreamHttpClient):
    upstream = CAT_INFO

    async def find_by_breed_name(self, breed_name: str) -> BreedInfo | None:
        response = await self._request(
            "GET", "/breeds", params={"name": breed_name}, allow_not_found=True,
        )
        return _parse_breed(response.json()) if response is not None else None

    async def find_by_breed_ids(self, breed_ids: list[BreedId]) -> list[BreedInfo]:
        response = await self._request(
            "POST", "/breeds/search",
            json={"breed_ids": [str(b) for b in breed_ids]},
        )
        return [_parse_breed(b) for b in response.json()]


class HttpCatExchangeClient(_UpstreamHttpClient):
    upstream = CAT_EXCHANGE

    async def get_price_history(self, breed_id: BreedId) -> CatPriceHistory:
        response = await self._request(
            "GET", f"/prices/{breed_id}", allow_not_found=True,
        )
        if response is None:
            return CatPriceHistory(breed_id=breed_id)
        return _parse_history(breed_id, response.json())

    async def get_price_histories(
        self, breed_ids: list[BreedId],
    ) -> dict[BreedId, CatPriceHistory]:
        response = await self._request(
            "POST", "/prices/search",
            json={"breed_ids": [str(b) for b in breed_ids]},
        )
        histories: dict[BreedId, CatPriceHistory] = {}
        for item in response.json():
            breed_id = BreedId(_uuid(item["breed_id"]))
            histories[breed_id] = _parse_history(breed_id, item)
        return histories

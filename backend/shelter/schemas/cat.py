"""Cat Schemas — Pydantic models for the shelter's public API.

Invariants:
    - AddCatRequestBody.breed and .name: stripped, non-empty
    - Photos cross the boundary as base64 strings, never raw bytes
    - Prices serialize as decimal strings (no float rounding)

Design Decisions:
    - from_cat/from_bill classmethods keep entity → schema mapping out of the routes
"""

import base64
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import Base64Bytes, BaseModel, Field, field_validator

from shelter.core.entities import AddCatRequest, Bill, Cat


def _encode_photo(photo: bytes | None) -> str | None:
    return base64.b64encode(photo).decode("ascii") if photo else None


class AddCatRequestBody(BaseModel):
    """Cat registration; breed is resolved by name against the catalog."""
    breed: str = Field(min_length=1, max_length=200)
    name: str = Field(min_length=1, max_length=200)
    photo: Base64Bytes | None = None

    @field_validator("breed", "name")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty or whitespace")
        return v

    def to_request(self) -> AddCatRequest:
        return AddCatRequest(breed=self.breed, name=self.name, photo=self.photo)


class PricePointResponse(BaseModel):
    date: datetime
    price: Decimal


class CatResponse(BaseModel):
    """Cat as shown to users; enrichment fields are null when unavailable."""
    id: UUID
    breed_id: UUID
    price: Decimal
    prices: list[PricePointResponse] = []
    breed: str | None = None
    breed_photo: str | None = None
    name: str | None = None
    photo: str | None = None
    added_by: UUID | None = None

    @classmethod
    def from_cat(cls, cat: Cat) -> "CatResponse":
        return cls(
            id=cat.id,
            breed_id=cat.breed_id,
            price=cat.price,
            prices=[PricePointResponse(date=p.date, price=p.price) for p in cat.prices],
            breed=cat.breed,
            breed_photo=_encode_photo(cat.breed_photo),
            name=cat.name,
            photo=_encode_photo(cat.photo),
            added_by=cat.added_by,
        )


class BillResponse(BaseModel):
    id: UUID
    product_id: UUID
    price: Decimal

    @classmethod
    def from_bill(cls, bill: Bill) -> "BillResponse":
        return cls(id=bill.id, product_id=bill.product_id, price=bill.price)


class CatCreatedResponse(BaseModel):
    id: UUID

"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - CatId, UserId, BreedId wrap UUIDs; a cat id is also its billing product id
    - Prices are Decimal, never float
    - DEFAULT_CAT_PRICE applies whenever a breed has no recorded trades

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
"""

from decimal import Decimal
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

CatId = NewType("CatId", UUID)
UserId = NewType("UserId", UUID)
BreedId = NewType("BreedId", UUID)
BillId = NewType("BillId", UUID)


# ─── Constants ───────────────────────────────────────────────────

DEFAULT_CAT_PRICE = Decimal("1000")


# ─── Upstream names (logging, error context) ─────────────────────

AUTHORIZATION = "authorization"
BILLING = "billing"
CAT_INFO = "cat_info"
CAT_EXCHANGE = "cat_exchange"
LOCAL_STORE = "database"

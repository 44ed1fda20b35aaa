"""Cat Builder — pure merge of collaborator records into the Cat aggregate.

Invariants:
    - price == last entry of prices when prices is non-empty, else DEFAULT_CAT_PRICE
    - Breed fields stay None when BreedInfo is absent
    - name/photo/added_by stay None when AdditionalCatInfo is absent
    - Missing price history for a breed is treated as an empty history

Design Decisions:
    - Pure functions: no IO, trivially unit-testable (ADR: functional core)
"""

from decimal import Decimal
from typing import Iterable, Mapping

from shelter.core.domain_types import DEFAULT_CAT_PRICE, BreedId
from shelter.core.entities import (
    AdditionalCatInfo, BreedInfo, Cat, CatPriceHistory, PricePoint, Product,
)


def current_price(prices: list[PricePoint]) -> Decimal:
    """Last traded price, or the shelter default for an untraded breed."""
    if not prices:
        return DEFAULT_CAT_PRICE
    return prices[-1].price


def distinct_breed_ids(products: Iterable[Product]) -> list[BreedId]:
    """Breed ids referenced by products, first-seen order, no duplicates."""
    return list(dict.fromkeys(p.breed_id for p in products))


def history_for_breed(
    breed_id: BreedId, histories: Mapping[BreedId, CatPriceHistory],
) -> CatPriceHistory:
    return histories.get(breed_id) or CatPriceHistory(breed_id=breed_id)


def index_breeds(breeds: Iterable[BreedInfo]) -> dict[BreedId, BreedInfo]:
    # First record wins if the catalog repeats a breed
    index: dict[BreedId, BreedInfo] = {}
    for breed in breeds:
        index.setdefault(breed.breed_id, breed)
    return index


def build_cat(
    product: Product,
    breed_info: BreedInfo | None,
    additional_info: AdditionalCatInfo | None,
    price_history: CatPriceHistory | None,
) -> Cat:
    """Merge one product with its optional enrichments."""
    prices = list(price_history.prices) if price_history else []
    cat = Cat(
        id=product.id,
        breed_id=product.breed_id,
        prices=prices,
        price=current_price(prices),
    )
    if breed_info is not None:
        cat.breed = breed_info.breed_name
        cat.breed_photo = breed_info.photo
    if additional_info is not None:
        cat.name = additional_info.name
        cat.photo = additional_info.photo
        cat.added_by = additional_info.added_by
    return cat

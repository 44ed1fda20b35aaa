"""Cat Aggregation — builds Cat aggregates from billing, catalog, exchange and local records.

Invariants:
    - Listing preserves billing page order and drops products without AdditionalCatInfo
    - Breed info and price history are fetched concurrently, once per request
    - Catalog DomainError degrades to "no breed info"; every other failure propagates
    - While listing, an exchange DomainError degrades to empty histories (default prices)
    - get_cat raises NotFoundError for an unknown product; missing local info is not an error

Design Decisions:
    - Merge logic lives in core/build_cat.py; this module only orchestrates IO
    - Single-cat path batches through find_by_breed_ids([id]) so both paths degrade identically
"""

import logging
from functools import partial

from shelter.core.build_cat import (
    build_cat, distinct_breed_ids, history_for_breed, index_breeds,
)
from shelter.core.domain_types import (
    BILLING, CAT_EXCHANGE, CAT_INFO, LOCAL_STORE, BreedId, CatId,
)
from shelter.core.entities import (
    AdditionalCatInfo, BreedInfo, Cat, CatPriceHistory, Product,
)
from shelter.core.errors import DomainError, ErrorContext, NotFoundError
from shelter.core.repository_protocols import (
    BillingClient, CatExchangeClient, CatInfoClient, Collection,
)
from shelter.infrastructure.resilient_call import call_with_retry
from shelter.services.fan_out import fan_out

logger = logging.getLogger(__name__)


async def fetch_product(billing: BillingClient, cat_id: CatId) -> Product:
    """Billing product for cat_id, or NotFoundError (unknown or already sold)."""
    product = await call_with_retry(
        partial(billing.get_product, cat_id), upstream=BILLING,
    )
    if product is None:
        raise NotFoundError("Cat", str(cat_id), ErrorContext(cat_id=str(cat_id)))
    return product


class CatAggregator:
    """Read side of the shelter: paged listing and single-cat lookup."""

    def __init__(
        self,
        billing: BillingClient,
        cat_info: CatInfoClient,
        cat_exchange: CatExchangeClient,
        additional_info: Collection[CatId, AdditionalCatInfo],
    ):
        self._billing = billing
        self._cat_info = cat_info
        self._cat_exchange = cat_exchange
        self._additional_info = additional_info

    async def list_cats(self, skip: int, limit: int) -> list[Cat]:
        """One page of claimed cats, in billing order."""
        products = await call_with_retry(
            partial(self._billing.list_products, skip, limit), upstream=BILLING,
        )
        if not products:
            return []

        breed_ids = distinct_breed_ids(products)
        breeds, histories = await fan_out(
            self._find_breeds(breed_ids),
            self._find_price_histories(breed_ids),
        )
        breed_index = index_breeds(breeds)

        cats: list[Cat] = []
        for product in products:
            info = await self._find_additional_info(product.id)
            if info is None:
                continue
            cats.append(build_cat(
                product,
                breed_index.get(product.breed_id),
                info,
                history_for_breed(product.breed_id, histories),
            ))
        return cats

    async def get_cat(self, cat_id: CatId) -> Cat:
        """Single cat by id, claimed or not."""
        product = await fetch_product(self._billing, cat_id)
        breeds, history = await fan_out(
            self._find_breeds([product.breed_id]),
            call_with_retry(
                partial(self._cat_exchange.get_price_history, product.breed_id),
                upstream=CAT_EXCHANGE,
            ),
        )
        info = await self._find_additional_info(product.id)
        return build_cat(
            product, index_breeds(breeds).get(product.breed_id), info, history,
        )

    async def _find_breeds(self, breed_ids: list[BreedId]) -> list[BreedInfo]:
        try:
            return await call_with_retry(
                partial(self._cat_info.find_by_breed_ids, breed_ids),
                upstream=CAT_INFO,
            )
        except DomainError as e:
            logger.warning(
                f"Catalog rejected breed lookup, continuing without breed info: {e.message}",
                extra={"upstream": CAT_INFO, "error_code": e.code},
            )
            return []

    async def _find_price_histories(
        self, breed_ids: list[BreedId],
    ) -> dict[BreedId, CatPriceHistory]:
        try:
            return await call_with_retry(
                partial(self._cat_exchange.get_price_histories, breed_ids),
                upstream=CAT_EXCHANGE,
            )
        except DomainError as e:
            logger.warning(
                f"Exchange rejected price lookup, listing default prices: {e.message}",
                extra={"upstream": CAT_EXCHANGE, "error_code": e.code},
            )
            return {}

    async def _find_additional_info(self, cat_id: CatId) -> AdditionalCatInfo | None:
        return await call_with_retry(
            partial(self._additional_info.find, cat_id), upstream=LOCAL_STORE,
        )

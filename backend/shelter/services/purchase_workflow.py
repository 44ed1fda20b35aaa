"""Purchase Workflow — sells a cat through billing, then cleans up local references.

Invariants:
    - Steps run in order: product → price → sell → favourites cleanup → delete local info
    - Any failure aborts at that step; completed steps are never rolled back
    - Price is the last traded price of the breed, DEFAULT_CAT_PRICE if never traded
    - After success no favourites record contains the cat and it is no longer claimed

Design Decisions:
    - No compensation: read paths tolerate the leftovers of a partial run
      (stale favourites are dropped on listing, orphan info is invisible once billing moved on)
"""

import logging
from functools import partial

from shelter.core.build_cat import current_price, history_for_breed
from shelter.core.domain_types import BILLING, CAT_EXCHANGE, LOCAL_STORE, CatId
from shelter.core.entities import AdditionalCatInfo, AuthenticatedUser, Bill
from shelter.core.repository_protocols import (
    BillingClient, CatExchangeClient, Collection,
)
from shelter.infrastructure.resilient_call import call_with_retry
from shelter.services.cat_aggregation import fetch_product
from shelter.services.favourites_manager import FavouritesManager

logger = logging.getLogger(__name__)


class PurchaseWorkflow:
    """Buys a cat on behalf of an authenticated user."""

    def __init__(
        self,
        billing: BillingClient,
        cat_exchange: CatExchangeClient,
        favourites: FavouritesManager,
        additional_info: Collection[CatId, AdditionalCatInfo],
    ):
        self._billing = billing
        self._cat_exchange = cat_exchange
        self._favourites = favourites
        self._additional_info = additional_info

    async def buy(self, user: AuthenticatedUser, cat_id: CatId) -> Bill:
        product = await fetch_product(self._billing, cat_id)

        histories = await call_with_retry(
            partial(self._cat_exchange.get_price_histories, [product.breed_id]),
            upstream=CAT_EXCHANGE,
        )
        history = history_for_breed(product.breed_id, histories)
        price = current_price(list(history.prices))

        bill = await call_with_retry(
            partial(self._billing.sell_product, cat_id, price), upstream=BILLING,
        )
        logger.info(
            f"Cat sold for {price}",
            extra={"user_id": user.user_id, "cat_id": cat_id},
        )

        cleared = await self._favourites.remove_from_all(cat_id)
        await call_with_retry(
            partial(self._additional_info.delete, cat_id), upstream=LOCAL_STORE,
        )
        logger.info(
            f"Sold cat removed from shelter ({cleared} favourites cleared)",
            extra={"cat_id": cat_id},
        )
        return bill

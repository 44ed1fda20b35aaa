"""Registration Workflow — adds a new cat to billing and claims it for the shelter.

Invariants:
    - Unknown breed → ValidationError before anything is written
    - Billing product is registered before local info; the new id is returned only if both succeed
    - A local write failure after billing succeeded leaves an unlisted orphan product (logged, not undone)
"""

import logging
from functools import partial
from typing import Callable
from uuid import UUID, uuid4

from shelter.core.domain_types import BILLING, CAT_INFO, LOCAL_STORE, CatId
from shelter.core.entities import (
    AddCatRequest, AdditionalCatInfo, AuthenticatedUser, Product,
)
from shelter.core.errors import ShelterError, ValidationError
from shelter.core.repository_protocols import (
    BillingClient, CatInfoClient, Collection,
)
from shelter.infrastructure.resilient_call import call_with_retry

logger = logging.getLogger(__name__)


class RegistrationWorkflow:
    """Registers cats brought to the shelter by users."""

    def __init__(
        self,
        billing: BillingClient,
        cat_info: CatInfoClient,
        additional_info: Collection[CatId, AdditionalCatInfo],
        new_id: Callable[[], UUID] = uuid4,
    ):
        self._billing = billing
        self._cat_info = cat_info
        self._additional_info = additional_info
        self._new_id = new_id

    async def register(self, user: AuthenticatedUser, request: AddCatRequest) -> CatId:
        breed = await call_with_retry(
            partial(self._cat_info.find_by_breed_name, request.breed),
            upstream=CAT_INFO,
        )
        if breed is None:
            raise ValidationError(f"Unknown breed '{request.breed}'", field="breed")

        cat_id = CatId(self._new_id())
        await call_with_retry(
            partial(self._billing.add_product, Product(id=cat_id, breed_id=breed.breed_id)),
            upstream=BILLING,
        )

        info = AdditionalCatInfo(
            cat_id=cat_id,
            added_by=user.user_id,
            name=request.name,
            photo=request.photo,
        )
        try:
            await call_with_retry(
                partial(self._additional_info.upsert, info), upstream=LOCAL_STORE,
            )
        except ShelterError:
            logger.error(
                "Product registered in billing but local info not saved; cat stays unlisted",
                extra={"user_id": user.user_id, "cat_id": cat_id},
            )
            raise

        logger.info("Cat registered", extra={"user_id": user.user_id, "cat_id": cat_id})
        return cat_id

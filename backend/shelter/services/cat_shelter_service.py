"""Cat Shelter Service — the public operations of the shelter, each behind the authorization gate.

Invariants:
    - Every public method authorizes exactly once before any other call
    - No method performs work for a rejected session
    - Components receive their collaborators explicitly; nothing is looked up globally

Design Decisions:
    - Facade over five small components (ADR: no god objects)
    - build_cat_shelter_service is the single wiring point, used by the lifespan and tests
"""

from shelter.core.domain_types import CatId, UserId
from shelter.core.entities import (
    AddCatRequest, AdditionalCatInfo, Bill, Cat, UserFavouriteCats,
)
from shelter.core.repository_protocols import (
    AuthorizationClient, BillingClient, CatExchangeClient, CatInfoClient,
    Collection,
)
from shelter.services.authorization_gate import AuthorizationGate
from shelter.services.cat_aggregation import CatAggregator
from shelter.services.favourites_manager import FavouritesManager
from shelter.services.purchase_workflow import PurchaseWorkflow
from shelter.services.registration_workflow import RegistrationWorkflow


class CatShelterService:
    """Entry point for the API layer."""

    def __init__(
        self,
        gate: AuthorizationGate,
        cats: CatAggregator,
        favourites: FavouritesManager,
        purchases: PurchaseWorkflow,
        registrations: RegistrationWorkflow,
    ):
        self._gate = gate
        self._cats = cats
        self._favourites = favourites
        self._purchases = purchases
        self._registrations = registrations

    async def get_cats(self, session_id: str, skip: int, limit: int) -> list[Cat]:
        await self._gate.authorize(session_id)
        return await self._cats.list_cats(skip, limit)

    async def add_cat_to_favourites(self, session_id: str, cat_id: CatId) -> None:
        user = await self._gate.authorize(session_id)
        await self._favourites.add(user, cat_id)

    async def get_favourite_cats(self, session_id: str) -> list[Cat]:
        user = await self._gate.authorize(session_id)
        return await self._favourites.favourite_cats(user)

    async def delete_cat_from_favourites(self, session_id: str, cat_id: CatId) -> None:
        user = await self._gate.authorize(session_id)
        await self._favourites.remove(user, cat_id)

    async def buy_cat(self, session_id: str, cat_id: CatId) -> Bill:
        user = await self._gate.authorize(session_id)
        return await self._purchases.buy(user, cat_id)

    async def add_cat(self, session_id: str, request: AddCatRequest) -> CatId:
        user = await self._gate.authorize(session_id)
        return await self._registrations.register(user, request)


def build_cat_shelter_service(
    *,
    authorization: AuthorizationClient,
    billing: BillingClient,
    cat_info: CatInfoClient,
    cat_exchange: CatExchangeClient,
    favourites: Collection[UserId, UserFavouriteCats],
    additional_info: Collection[CatId, AdditionalCatInfo],
    favourites_write_attempts: int = 3,
) -> CatShelterService:
    """Wire the shelter components from their collaborators."""
    cats = CatAggregator(billing, cat_info, cat_exchange, additional_info)
    favourites_manager = FavouritesManager(
        favourites, additional_info, cats, favourites_write_attempts,
    )
    return CatShelterService(
        gate=AuthorizationGate(authorization),
        cats=cats,
        favourites=favourites_manager,
        purchases=PurchaseWorkflow(
            billing, cat_exchange, favourites_manager, additional_info,
        ),
        registrations=RegistrationWorkflow(billing, cat_info, additional_info),
    )

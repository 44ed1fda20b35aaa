"""Service test fixtures — in-memory collaborators wired into the real components.

Invariants:
    - Every test gets a fresh FakeShelter (no state shared between tests)
    - Components are built exactly as build_cat_shelter_service builds them

Design Decisions:
    - Fakes over mocks: the favourites CAS contract is behaviour, not call expectations
"""

import pytest

from shelter.core.entities import AuthenticatedUser
from shelter.services.cat_aggregation import CatAggregator
from shelter.services.cat_shelter_service import build_cat_shelter_service
from shelter.services.favourites_manager import FavouritesManager
from shelter.services.purchase_workflow import PurchaseWorkflow
from shelter.services.registration_workflow import RegistrationWorkflow

from tests.services.fakes import FakeShelter


@pytest.fixture
def world():
    return FakeShelter()


@pytest.fixture
def user(world):
    return AuthenticatedUser(user_id=world.sign_in("session-1"))


@pytest.fixture
def aggregator(world):
    return CatAggregator(
        world.billing, world.cat_info, world.cat_exchange, world.additional_info,
    )


@pytest.fixture
def favourites_manager(world, aggregator):
    return FavouritesManager(world.favourites, world.additional_info, aggregator)


@pytest.fixture
def purchase(world, favourites_manager):
    return PurchaseWorkflow(
        world.billing, world.cat_exchange, favourites_manager, world.additional_info,
    )


@pytest.fixture
def registration(world):
    return RegistrationWorkflow(world.billing, world.cat_info, world.additional_info)


@pytest.fixture
def service(world):
    return build_cat_shelter_service(
        authorization=world.authorization,
        billing=world.billing,
        cat_info=world.cat_info,
        cat_exchange=world.cat_exchange,
        favourites=world.favourites,
        additional_info=world.additional_info,
    )

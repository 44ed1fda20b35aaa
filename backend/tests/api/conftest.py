"""API test fixtures — FastAPI app over fake collaborators.

Invariants:
    - get_shelter_service overridden with a service wired to a fresh FakeShelter
    - app.state.db_manager points at the in-memory SQLite manager for readiness probes

Design Decisions:
    - ASGITransport does not run the lifespan: no real httpx clients or PostgreSQL engine
"""

import pytest
from httpx import ASGITransport, AsyncClient

from shelter.api.dependencies import get_shelter_service
from shelter.main import app
from shelter.services.cat_shelter_service import build_cat_shelter_service

from tests.services.fakes import FakeShelter


@pytest.fixture
def world():
    return FakeShelter()


@pytest.fixture
async def client(world, db_manager):
    service = build_cat_shelter_service(
        authorization=world.authorization,
        billing=world.billing,
        cat_info=world.cat_info,
        cat_exchange=world.cat_exchange,
        favourites=world.favourites,
        additional_info=world.additional_info,
    )
    app.dependency_overrides[get_shelter_service] = lambda: service
    app.state.db_manager = db_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    del app.state.db_manager

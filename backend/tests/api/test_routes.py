"""Integration Tests: HTTP routes — status codes, payloads and error envelopes.

Invariants:
    - Session token travels in X-Session-Id; missing header → 400, rejected → 401
    - Photos are base64 in both directions; prices are decimal strings
    - Favourites PUT/DELETE return 204 with no body
    - Unexpected exceptions answer with the INTERNAL_ERROR envelope, no detail leaked
"""

import base64
from decimal import Decimal
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from shelter.core.errors import ConnectivityError
from shelter.main import app

HEADERS = {"X-Session-Id": "session-1"}


@pytest.fixture
def user_id(world):
    return world.sign_in("session-1")


# -- Health ----------------------------------------------------------------------

async def test_liveness(client):
    response = await client.get("/api/v1/health/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_readiness_with_database(client):
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json()["checks"]["database"] == "healthy"


# -- Authorization ---------------------------------------------------------------

async def test_missing_session_header_is_validation_error(client):
    response = await client.get("/api/v1/cats")
    assert response.status_code == 400
    body = response.json()["error"]
    assert body["code"] == "VALIDATION_ERROR"
    assert body["category"] == "validation"
    assert [d["field"] for d in body["details"]] == ["header.X-Session-Id"]


async def test_rejected_session_is_401(client, world):
    response = await client.get("/api/v1/cats", headers={"X-Session-Id": "nope"})
    assert response.status_code == 401
    body = response.json()["error"]
    assert body["code"] == "AUTHORIZATION_FAILED"
    assert body["category"] == "authorization"
    assert world.billing.calls == []


# -- Cats ------------------------------------------------------------------------

async def test_list_cats(client, world, user_id):
    breed_id = world.seed_breed("Siamese", prices=("100", "150"))
    cat_id = world.seed_cat(breed_id, name="Tom")
    world.seed_cat(breed_id, claimed=False)

    response = await client.get("/api/v1/cats?skip=0&limit=10", headers=HEADERS)

    assert response.status_code == 200
    [cat] = response.json()
    assert cat["id"] == str(cat_id)
    assert cat["breed"] == "Siamese"
    assert cat["name"] == "Tom"
    assert Decimal(cat["price"]) == Decimal("150")
    assert len(cat["prices"]) == 2
    assert base64.b64decode(cat["photo"]) == b"cat-photo"
    assert base64.b64decode(cat["breed_photo"]) == b"breed-photo"


async def test_list_cats_rejects_negative_skip(client, user_id):
    response = await client.get("/api/v1/cats?skip=-1", headers=HEADERS)
    assert response.status_code == 400


async def test_list_cats_large_limit_passes_through(client, world, user_id):
    breed_id = world.seed_breed()
    seeded = [world.seed_cat(breed_id, name=f"Cat {i}") for i in range(3)]

    response = await client.get("/api/v1/cats?skip=0&limit=500", headers=HEADERS)

    assert response.status_code == 200
    assert [c["id"] for c in response.json()] == [str(c) for c in seeded]


async def test_add_cat(client, world, user_id):
    world.seed_breed("Siamese")

    response = await client.post(
        "/api/v1/cats",
        headers=HEADERS,
        json={
            "breed": "  Siamese ",
            "name": "Tom",
            "photo": base64.b64encode(b"jpeg").decode(),
        },
    )

    assert response.status_code == 201
    cat_id = response.json()["id"]
    info = next(iter(world.additional_info.records.values()))
    assert str(info.cat_id) == cat_id
    assert info.added_by == user_id
    assert info.photo == b"jpeg"


async def test_add_cat_blank_name_is_400(client, world, user_id):
    world.seed_breed("Siamese")
    response = await client.post(
        "/api/v1/cats", headers=HEADERS, json={"breed": "Siamese", "name": "   "},
    )
    assert response.status_code == 400
    assert world.billing.calls == []


async def test_add_cat_unknown_breed_is_400(client, user_id):
    response = await client.post(
        "/api/v1/cats", headers=HEADERS, json={"breed": "Dragon", "name": "Tom"},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_buy_cat(client, world, user_id):
    cat_id = world.seed_cat(world.seed_breed("Siamese", prices=("999.99",)))

    response = await client.post(f"/api/v1/cats/{cat_id}/buy", headers=HEADERS)

    assert response.status_code == 200
    bill = response.json()
    assert bill["product_id"] == str(cat_id)
    assert Decimal(bill["price"]) == Decimal("999.99")


async def test_buy_unknown_cat_is_404(client, user_id):
    response = await client.post(f"/api/v1/cats/{uuid4()}/buy", headers=HEADERS)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_upstream_outage_is_500(client, world, user_id):
    world.billing.failures["list_products"] = [
        ConnectivityError("billing", "timeout"),
        ConnectivityError("billing", "timeout"),
    ]

    response = await client.get("/api/v1/cats", headers=HEADERS)

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "INTERNAL_ERROR"


async def test_unexpected_exception_is_internal_error(client, world, user_id):
    world.billing.failures["list_products"] = [RuntimeError("secret stack detail")]
    transport = ASGITransport(app=app, raise_app_exceptions=False)

    async with AsyncClient(transport=transport, base_url="http://test") as raw:
        response = await raw.get("/api/v1/cats", headers=HEADERS)

    assert response.status_code == 500
    body = response.json()["error"]
    assert body["code"] == "INTERNAL_ERROR"
    assert body["category"] == "internal"
    assert "secret" not in response.text


# -- Favourites ------------------------------------------------------------------

async def test_favourites_lifecycle(client, world, user_id):
    cat_id = world.seed_cat(world.seed_breed())

    put = await client.put(f"/api/v1/favourites/{cat_id}", headers=HEADERS)
    assert put.status_code == 204
    assert put.content == b""

    listed = await client.get("/api/v1/favourites", headers=HEADERS)
    assert [c["id"] for c in listed.json()] == [str(cat_id)]

    deleted = await client.delete(f"/api/v1/favourites/{cat_id}", headers=HEADERS)
    assert deleted.status_code == 204

    listed = await client.get("/api/v1/favourites", headers=HEADERS)
    assert listed.json() == []


async def test_favourite_invalid_cat_id_is_400(client, user_id):
    response = await client.put("/api/v1/favourites/not-a-uuid", headers=HEADERS)
    assert response.status_code == 400

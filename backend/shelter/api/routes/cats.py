"""Cat Routes — listing, registration and purchase of shelter cats.

Invariants:
    - Every route passes the X-Session-Id header to the service unchanged
    - Routes hold no business logic; errors are mapped by the global handlers
"""

from uuid import UUID

from fastapi import APIRouter, Query, status

from shelter.api.dependencies import SessionId, ShelterService
from shelter.core.domain_types import CatId
from shelter.schemas.cat import (
    AddCatRequestBody, BillResponse, CatCreatedResponse, CatResponse,
)

router = APIRouter(prefix="/api/v1/cats", tags=["cats"])


@router.get("", response_model=list[CatResponse])
async def get_cats(
    session_id: SessionId,
    service: ShelterService,
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=0),
):
    """One page of cats available in the shelter."""
    cats = await service.get_cats(session_id, skip, limit)
    return [CatResponse.from_cat(c) for c in cats]


@router.post(
    "", response_model=CatCreatedResponse, status_code=status.HTTP_201_CREATED,
)
async def add_cat(
    body: AddCatRequestBody, session_id: SessionId, service: ShelterService,
):
    """Register a cat brought to the shelter."""
    cat_id = await service.add_cat(session_id, body.to_request())
    return CatCreatedResponse(id=cat_id)


@router.post("/{cat_id}/buy", response_model=BillResponse)
async def buy_cat(cat_id: UUID, session_id: SessionId, service: ShelterService):
    bill = await service.buy_cat(session_id, CatId(cat_id))
    return BillResponse.from_bill(bill)

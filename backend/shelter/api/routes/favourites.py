"""Favourites Routes — the caller's favourite cats.

Invariants:
    - PUT and DELETE are idempotent and return 204 with no body
    - The user is always derived from the session, never from the path
"""

from uuid import UUID

from fastapi import APIRouter, Response, status

from shelter.api.dependencies import SessionId, ShelterService
from shelter.core.domain_types import CatId
from shelter.schemas.cat import CatResponse

router = APIRouter(prefix="/api/v1/favourites", tags=["favourites"])


@router.get("", response_model=list[CatResponse])
async def get_favourite_cats(session_id: SessionId, service: ShelterService):
    cats = await service.get_favourite_cats(session_id)
    return [CatResponse.from_cat(c) for c in cats]


@router.put("/{cat_id}", status_code=status.HTTP_204_NO_CONTENT)
async def add_cat_to_favourites(
    cat_id: UUID, session_id: SessionId, service: ShelterService,
):
    await service.add_cat_to_favourites(session_id, CatId(cat_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{cat_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cat_from_favourites(
    cat_id: UUID, session_id: SessionId, service: ShelterService,
):
    await service.delete_cat_from_favourites(session_id, CatId(cat_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)

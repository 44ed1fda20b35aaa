"""API Dependencies — FastAPI dependency providers for the shelter routes.

Invariants:
    - The service instance is built once by the lifespan and read from app.state
    - Missing X-Session-Id header → 400 via RequestValidationError (never reaches the service)
"""

from typing import Annotated

from fastapi import Depends, Header, Request

from shelter.services.cat_shelter_service import CatShelterService


def get_shelter_service(request: Request) -> CatShelterService:
    return request.app.state.shelter


ShelterService = Annotated[CatShelterService, Depends(get_shelter_service)]
SessionId = Annotated[str, Header(alias="X-Session-Id", min_length=1)]

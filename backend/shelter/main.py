"""Cat Shelter API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ShelterError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database manager, upstream clients and the service are built in the lifespan
      and released on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Service stored on app.state and injected through a dependency: no module globals
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shelter.api.error_handlers import register_error_handlers
from shelter.api.routes import cats, favourites, health
from shelter.config import get_settings
from shelter.infrastructure.database import DatabaseSessionManager
from shelter.infrastructure.local_store import (
    AdditionalCatInfoCollection, FavouriteCatsCollection,
)
from shelter.infrastructure.observability import setup_logging
from shelter.infrastructure.upstream_clients import (
    HttpAuthorizationClient, HttpBillingClient, HttpCatExchangeClient,
    HttpCatInfoClient, build_http_client,
)
from shelter.services.cat_shelter_service import build_cat_shelter_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    db_manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    timeout = settings.upstream_timeout_seconds
    http_clients = {
        "authorization": build_http_client(settings.authorization_service_url, timeout),
        "billing": build_http_client(settings.billing_service_url, timeout),
        "cat_info": build_http_client(settings.cat_info_service_url, timeout),
        "cat_exchange": build_http_client(settings.cat_exchange_service_url, timeout),
    }

    app.state.db_manager = db_manager
    app.state.shelter = build_cat_shelter_service(
        authorization=HttpAuthorizationClient(http_clients["authorization"]),
        billing=HttpBillingClient(http_clients["billing"]),
        cat_info=HttpCatInfoClient(http_clients["cat_info"]),
        cat_exchange=HttpCatExchangeClient(http_clients["cat_exchange"]),
        favourites=FavouriteCatsCollection(db_manager),
        additional_info=AdditionalCatInfoCollection(db_manager),
        favourites_write_attempts=settings.favourites_write_attempts,
    )
    logger.info("Cat Shelter API started")
    try:
        yield
    finally:
        logger.info("Cat Shelter API shutting down")
        for client in http_clients.values():
            await client.aclose()
        await db_manager.dispose()


app = FastAPI(
    title="Cat Shelter API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(cats.router)
app.include_router(favourites.router)

register_error_handlers(app)

"""Error Handlers — map exceptions escaping the routes onto the shelter error envelope.

Invariants:
    - Every error response has the ShelterError.to_response() shape
    - Request validation failures reuse the VALIDATION_ERROR envelope plus field details
    - Anything unexpected answers as InternalError: no exception text reaches the client

Design Decisions:
    - Envelopes come from the error hierarchy itself, so codes and severities live in one place
    - 4xx log at warning; 5xx and unexpected exceptions log at error
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shelter.core.errors import InternalError, ShelterError, ValidationError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShelterError, handle_shelter_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


async def handle_shelter_error(request: Request, exc: ShelterError) -> JSONResponse:
    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(
        level,
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    error = ValidationError("Invalid request data")
    body = error.to_response()
    body["error"]["details"] = [_field_error(e) for e in exc.errors()]
    logger.warning(
        f"Rejected request on {request.url.path}",
        extra={"error_code": error.code, "path": request.url.path},
    )
    return JSONResponse(status_code=error.http_status, content=body)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
        exc_info=exc,
        extra={"path": request.url.path},
    )
    error = InternalError()
    return JSONResponse(status_code=error.http_status, content=error.to_response())


def _field_error(error: dict) -> dict:
    return {
        "field": ".".join(str(loc) for loc in error["loc"]),
        "message": error["msg"],
        "type": error["type"],
    }

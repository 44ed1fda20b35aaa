"""Resilient Call — retry-once-then-fallback wrapper for every upstream call.

Invariants:
    - ConnectivityError: retried exactly once; a second one becomes InternalError
    - InternalError is raised outside the except block: the original failure is not chained
    - Any other error (DomainError, ConcurrencyError, ...) propagates unchanged, never retried
    - CancelledError is never caught: a cancelled caller abandons the call, no retry
    - No backoff delay between attempts

Design Decisions:
    - Explicit two-step state machine over a policy combinator (ADR: readable failure paths)
    - Takes a zero-argument coroutine factory so each attempt issues a fresh call
"""

import logging
from typing import Awaitable, Callable, TypeVar

from shelter.core.errors import ConnectivityError, ErrorContext, InternalError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def call_with_retry(
    operation: Callable[[], Awaitable[T]], *, upstream: str,
) -> T:
    """Run operation; retry once on ConnectivityError, then fail with InternalError."""
    try:
        return await operation()
    except ConnectivityError as e:
        logger.warning(
            f"Transient failure, retrying: {e.message}",
            extra={"upstream": upstream, "attempt": 1},
        )

    try:
        return await operation()
    except ConnectivityError as e:
        logger.error(
            f"Transient failure after retry: {e.message}",
            extra={"upstream": upstream, "attempt": 2, "error_code": e.code},
        )

    raise InternalError(ErrorContext(upstream=upstream))

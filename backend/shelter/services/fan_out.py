"""Fan-out — run two independent upstream calls concurrently and join both.

Invariants:
    - Both calls start before either is awaited; each is issued exactly once
    - The first failure is re-raised as-is; the sibling is cancelled by the TaskGroup
    - Outer cancellation propagates as CancelledError
"""

import asyncio
import logging
from typing import Any, Coroutine, TypeVar

logger = logging.getLogger(__name__)

A = TypeVar("A")
B = TypeVar("B")


async def fan_out(
    first: Coroutine[Any, Any, A], second: Coroutine[Any, Any, B],
) -> tuple[A, B]:
    """Await two coroutines concurrently (structured: no task outlives this call)."""
    try:
        async with asyncio.TaskGroup() as group:
            first_task = group.create_task(first)
            second_task = group.create_task(second)
    except ExceptionGroup as failures:
        for extra in failures.exceptions[1:]:
            logger.warning(f"Concurrent call also failed: {extra!r}")
        raise failures.exceptions[0] from None
    return first_task.result(), second_task.result()

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from services.dashboard.app.errors import QueryTimeoutError
from services.dashboard.app.logging import logger
from services.dashboard.app.observability import QUERY_TIMEOUT_TOTAL
from services.dashboard.app.settings import SETTINGS

T = TypeVar("T")


async def with_timeout(aw: Awaitable[T], timeout_ms: int | None = None, *, operation: str = "query") -> T:
    """
    Race `aw` against a deadline and return its result if it finishes first.

    On expiry the awaitable is cancelled and QueryTimeoutError is raised. Cancellation
    only stops the client side: a statement already sent to the server can still
    commit there, so a timed-out write has an unknown outcome.
    """
    timeout_ms = SETTINGS.query_timeout_ms if timeout_ms is None else timeout_ms
    try:
        return await asyncio.wait_for(aw, timeout=timeout_ms / 1000.0)
    except asyncio.TimeoutError:
        QUERY_TIMEOUT_TOTAL.labels(operation).inc()
        logger.warning("query_timed_out", operation=operation, timeout_ms=timeout_ms)
        raise QueryTimeoutError(operation, timeout_ms) from None

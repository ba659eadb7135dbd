"""
Single-statement access to the store.

Every statement the layer runs goes through here so failures are handled in one
place: the driver error is logged with its traceback and callers get a
DatabaseError carrying only the operation's stable message.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import sqlalchemy as sa
from opentelemetry import trace
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from services.dashboard.app.errors import DatabaseError
from services.dashboard.app.logging import logger
from services.dashboard.app.observability import QUERY_ERROR_TOTAL, QUERY_LATENCY

# Connection refusals and resets surface as OSError before SQLAlchemy wraps them.
_DRIVER_ERRORS = (SQLAlchemyError, OSError)


@dataclass(frozen=True)
class WriteResult:
    rowcount: int
    rows: list[dict[str, Any]] = field(default_factory=list)


def _require_bypass(bypass_cache: bool) -> None:
    if not bypass_cache:
        raise ValueError("dashboard reads are never cached; bypass_cache must be True")


async def _run(
    session: AsyncSession,
    statement: sa.Executable,
    params: Mapping[str, Any] | None,
    *,
    operation: str,
    failure_message: str,
    write: bool,
) -> tuple[list[dict[str, Any]], int]:
    tracer = trace.get_tracer("dashboard.gateway")
    t0 = time.perf_counter()
    with tracer.start_as_current_span("db_query") as span:
        span.set_attribute("db.operation", operation)
        try:
            result = await session.execute(statement, dict(params or {}))
            rows = [dict(r) for r in result.mappings().all()] if result.returns_rows else []
            rowcount = result.rowcount if write else len(rows)
            if write:
                await session.commit()
        except _DRIVER_ERRORS as e:
            QUERY_ERROR_TOTAL.labels(operation).inc()
            span.record_exception(e)
            logger.exception("query_failed", operation=operation, error_type=type(e).__name__, error=str(e))
            if write:
                await _safe_rollback(session, operation)
            # Deliberately unchained: the caller only ever sees the stable message.
            raise DatabaseError(failure_message) from None
        finally:
            QUERY_LATENCY.labels(operation).observe((time.perf_counter() - t0) * 1000)
    return rows, rowcount


async def _safe_rollback(session: AsyncSession, operation: str) -> None:
    try:
        await session.rollback()
    except _DRIVER_ERRORS as e:
        logger.warning("rollback_failed", operation=operation, error=str(e))


async def fetch_all(
    session: AsyncSession,
    statement: sa.Executable,
    params: Mapping[str, Any] | None = None,
    *,
    operation: str,
    failure_message: str,
    bypass_cache: bool = True,
) -> list[dict[str, Any]]:
    _require_bypass(bypass_cache)
    rows, _ = await _run(
        session, statement, params, operation=operation, failure_message=failure_message, write=False
    )
    return rows


async def fetch_one(
    session: AsyncSession,
    statement: sa.Executable,
    params: Mapping[str, Any] | None = None,
    *,
    operation: str,
    failure_message: str,
    bypass_cache: bool = True,
) -> dict[str, Any] | None:
    rows = await fetch_all(
        session,
        statement,
        params,
        operation=operation,
        failure_message=failure_message,
        bypass_cache=bypass_cache,
    )
    return rows[0] if rows else None


async def execute_write(
    session: AsyncSession,
    statement: sa.Executable,
    params: Mapping[str, Any] | None = None,
    *,
    operation: str,
    failure_message: str,
) -> WriteResult:
    """Run one INSERT/UPDATE/DELETE and commit it on its own."""
    rows, rowcount = await _run(
        session, statement, params, operation=operation, failure_message=failure_message, write=True
    )
    return WriteResult(rowcount=rowcount, rows=rows)

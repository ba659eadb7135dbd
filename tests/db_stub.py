from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Reply:
    """One scripted response for FakeSession.execute."""

    rows: list[dict[str, Any]] | None = None
    rowcount: int | None = None
    error: BaseException | None = None
    delay_s: float = 0.0
    # Never resolve; used to exercise deadlines.
    hang: bool = False


class _Mappings:
    def __init__(self, rows: list[dict[str, Any]]) -> None:
        self._rows = rows

    def all(self) -> list[dict[str, Any]]:
        return list(self._rows)

    def first(self) -> dict[str, Any] | None:
        return self._rows[0] if self._rows else None


class FakeResult:
    def __init__(self, rows: list[dict[str, Any]] | None, rowcount: int | None) -> None:
        self._rows = rows or []
        self.returns_rows = rows is not None
        self.rowcount = rowcount if rowcount is not None else len(self._rows)

    def mappings(self) -> _Mappings:
        return _Mappings(self._rows)


@dataclass
class Call:
    sql: str
    params: dict[str, Any]


@dataclass
class FakeSession:
    """
    Test-only stand-in for AsyncSession used to keep unit tests offline.
    Replies are consumed in order; every statement and its parameters are recorded.
    """

    replies: deque[Reply] = field(default_factory=deque)
    calls: list[Call] = field(default_factory=list)
    commits: int = 0
    rollbacks: int = 0
    cancelled: int = 0

    @classmethod
    def scripted(cls, *replies: Reply) -> FakeSession:
        return cls(replies=deque(replies))

    async def execute(self, statement: Any, params: dict[str, Any] | None = None) -> FakeResult:  # noqa: ANN401
        self.calls.append(Call(sql=str(statement), params=dict(params or {})))
        if not self.replies:
            raise AssertionError(f"unexpected statement: {statement}")
        reply = self.replies.popleft()
        try:
            if reply.hang:
                await asyncio.Event().wait()
            if reply.delay_s:
                await asyncio.sleep(reply.delay_s)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        if reply.error is not None:
            raise reply.error
        return FakeResult(reply.rows, reply.rowcount)

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1

    @property
    def last(self) -> Call:
        return self.calls[-1]

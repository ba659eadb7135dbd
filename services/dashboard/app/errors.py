"""
Failure taxonomy for the dashboard data layer.

Every error carries a short, stable `message` that is safe to show to end users.
Driver and connection detail is logged where it happens and never attached here.
"""

from __future__ import annotations

from collections.abc import Mapping


class DashboardError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvoiceValidationError(DashboardError):
    def __init__(self, errors: Mapping[str, list[str]], message: str = "Invalid invoice fields."):
        super().__init__(message)
        self.errors = {field: list(msgs) for field, msgs in errors.items()}

    @property
    def fields(self) -> list[str]:
        return sorted(self.errors)


class DatabaseError(DashboardError):
    pass


class QueryTimeoutError(DashboardError, TimeoutError):
    def __init__(self, operation: str, timeout_ms: int):
        super().__init__(
            f"Request timed out after {timeout_ms} ms. "
            "The statement may still have completed on the server; treat any write as unconfirmed."
        )
        self.operation = operation
        self.timeout_ms = timeout_ms


class NotFoundError(DashboardError):
    pass


class OperationDisabledError(DashboardError):
    pass

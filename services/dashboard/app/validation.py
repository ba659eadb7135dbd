"""
Coercion of raw invoice form values into a typed draft.

`validate_invoice_form` never raises for bad input; it returns `Validated` or
`Rejected` and leaves the branching to the caller. No I/O happens here.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from services.dashboard.app.currency import to_cents
from services.dashboard.app.errors import InvoiceValidationError
from services.dashboard.app.schemas import InvoiceStatus

_FORM_FIELDS = ("customerId", "amount", "status", "date")

# invoices.amount is a 32-bit integer column of cents.
MAX_AMOUNT = Decimal("21474836.47")


class InvoiceFormInput(BaseModel):
    # Form posts can carry unrelated keys (action ids, csrf tokens); ignore them.
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    customer_id: UUID = Field(alias="customerId")
    amount: Decimal = Field(gt=0, le=MAX_AMOUNT, allow_inf_nan=False)
    status: InvoiceStatus = "pending"
    date: dt.date | None = None

    @field_validator("customer_id", "amount", mode="before")
    @classmethod
    def _strip(cls, v: Any) -> Any:  # noqa: ANN401
        return v.strip() if isinstance(v, str) else v

    @field_validator("amount")
    @classmethod
    def _at_least_one_cent(cls, v: Decimal) -> Decimal:
        # Stored as whole cents; anything that rounds to 0 would save a worthless invoice.
        if to_cents(v) < 1:
            raise ValueError("Amount must be at least 0.01.")
        return v

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, v: Any) -> Any:  # noqa: ANN401
        if v is None or (isinstance(v, str) and not v.strip()):
            return "pending"
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("date", mode="before")
    @classmethod
    def _blank_date(cls, v: Any) -> Any:  # noqa: ANN401
        if isinstance(v, str) and not v.strip():
            return None
        return v


@dataclass(frozen=True)
class InvoiceDraft:
    customer_id: UUID
    amount: Decimal
    status: InvoiceStatus
    date: dt.date | None = None


@dataclass(frozen=True)
class Validated:
    value: InvoiceDraft
    ok: Literal[True] = True


@dataclass(frozen=True)
class Rejected:
    errors: dict[str, list[str]]
    ok: Literal[False] = False


ValidationResult = Validated | Rejected


def _field_errors(exc: ValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = err.get("loc") or ("__root__",)
        errors.setdefault(str(loc[0]), []).append(err.get("msg", "invalid value"))
    return errors


def validate_invoice_form(raw: Mapping[str, Any]) -> ValidationResult:
    # Missing keys are passed as None so "required" failures name the field.
    values = {k: raw.get(k) for k in _FORM_FIELDS}
    if values["status"] is None:
        values.pop("status")
    if values["date"] is None:
        values.pop("date")
    try:
        parsed = InvoiceFormInput.model_validate(values)
    except ValidationError as e:
        return Rejected(errors=_field_errors(e))
    return Validated(
        value=InvoiceDraft(
            customer_id=parsed.customer_id,
            amount=parsed.amount,
            status=parsed.status,
            date=parsed.date,
        )
    )


def parse_invoice_id(value: Any) -> UUID:  # noqa: ANN401
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except ValueError:
        raise InvoiceValidationError({"id": ["Invalid invoice id."]}, message="Invalid invoice id.") from None

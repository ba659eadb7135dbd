from __future__ import annotations

import datetime as dt
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

InvoiceStatus = Literal["pending", "paid"]


class StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class Revenue(StrictModel):
    month: str
    revenue: int


class LatestInvoice(StrictModel):
    id: UUID
    name: str
    image_url: str
    email: str
    # Pre-formatted for display, e.g. "$1,234.56".
    amount: str


class CardData(StrictModel):
    number_of_customers: int = Field(ge=0)
    number_of_invoices: int = Field(ge=0)
    total_paid_invoices: str
    total_pending_invoices: str


class InvoicesTableRow(StrictModel):
    id: UUID
    name: str
    email: str
    image_url: str
    date: dt.date
    # Raw cents; the table renders it.
    amount: int
    status: InvoiceStatus


class InvoiceForm(StrictModel):
    id: UUID
    customer_id: UUID
    # Major units (dollars) for the edit form, not a formatted string.
    amount: float
    status: InvoiceStatus


class CustomerField(StrictModel):
    id: UUID
    name: str


class CustomersTableRow(StrictModel):
    id: UUID
    name: str
    email: str
    image_url: str
    total_invoices: int
    total_pending: str
    total_paid: str


class Effect(StrictModel):
    kind: Literal["revalidate", "redirect"]
    path: str


class MutationOutcome(StrictModel):
    message: str
    invoice_id: UUID | None = None
    effects: list[Effect] = Field(default_factory=list)


class ErrorResponse(StrictModel):
    message: str
    errors: dict[str, list[str]] | None = None

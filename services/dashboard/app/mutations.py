"""
Invoice writes.

Each handler validates, runs exactly one statement and returns a MutationOutcome.
The outcome lists the effects (revalidate/redirect) the presentation tier should
apply; nothing here talks to a web framework's cache or router.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, date, datetime
from typing import Any
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from services.dashboard.app import gateway
from services.dashboard.app.currency import to_cents
from services.dashboard.app.errors import InvoiceValidationError, NotFoundError, OperationDisabledError
from services.dashboard.app.logging import logger
from services.dashboard.app.schemas import Effect, MutationOutcome
from services.dashboard.app.settings import SETTINGS
from services.dashboard.app.timeouts import with_timeout
from services.dashboard.app.validation import InvoiceDraft, Rejected, parse_invoice_id, validate_invoice_form

_CREATE_FAILED = "Failed to create invoice. Please try again later."
_UPDATE_FAILED = "Failed to update invoice. Please try again later."
_DELETE_FAILED = "Failed to delete invoice. Please try again later."

_INSERT_INVOICE_SQL = sa.text(
    """
    INSERT INTO invoices (customer_id, amount, status, date)
    VALUES (:customer_id, :amount, :status, :date)
    RETURNING id
    """
)

_UPDATE_INVOICE_SQL = sa.text(
    """
    UPDATE invoices
    SET customer_id = :customer_id, amount = :amount, status = :status
    WHERE id = :id
    """
)

_DELETE_INVOICE_SQL = sa.text("DELETE FROM invoices WHERE id = :id")


def _today() -> date:
    return datetime.now(tz=UTC).date()


def revalidate(path: str) -> Effect:
    return Effect(kind="revalidate", path=path)


def redirect(path: str) -> Effect:
    return Effect(kind="redirect", path=path)


def _validated_draft(fields: Mapping[str, Any], *, operation: str) -> InvoiceDraft:
    result = validate_invoice_form(fields)
    if isinstance(result, Rejected):
        logger.info("invoice_validation_failed", operation=operation, fields=sorted(result.errors))
        raise InvoiceValidationError(result.errors, message="Missing or invalid fields. Failed to save invoice.")
    return result.value


async def create_invoice(
    session: AsyncSession, fields: Mapping[str, Any], *, today: date | None = None
) -> MutationOutcome:
    draft = _validated_draft(fields, operation="create_invoice")
    amount_in_cents = to_cents(draft.amount)
    result = await with_timeout(
        gateway.execute_write(
            session,
            _INSERT_INVOICE_SQL,
            {
                "customer_id": draft.customer_id,
                "amount": amount_in_cents,
                "status": draft.status,
                "date": draft.date or today or _today(),
            },
            operation="create_invoice",
            failure_message=_CREATE_FAILED,
        ),
        operation="create_invoice",
    )
    invoice_id = result.rows[0]["id"] if result.rows else None
    logger.info("invoice_created", invoice_id=str(invoice_id), amount=amount_in_cents, status=draft.status)
    return MutationOutcome(
        message="Created Invoice.",
        invoice_id=invoice_id,
        effects=[revalidate(SETTINGS.invoices_path), redirect(SETTINGS.invoices_path)],
    )


async def update_invoice(session: AsyncSession, invoice_id: str | UUID, fields: Mapping[str, Any]) -> MutationOutcome:
    parsed_id = parse_invoice_id(invoice_id)
    draft = _validated_draft(fields, operation="update_invoice")
    amount_in_cents = to_cents(draft.amount)
    result = await with_timeout(
        gateway.execute_write(
            session,
            _UPDATE_INVOICE_SQL,
            {
                "id": parsed_id,
                "customer_id": draft.customer_id,
                "amount": amount_in_cents,
                "status": draft.status,
            },
            operation="update_invoice",
            failure_message=_UPDATE_FAILED,
        ),
        operation="update_invoice",
    )
    if result.rowcount == 0:
        raise NotFoundError("Invoice not found.")
    logger.info("invoice_updated", invoice_id=str(parsed_id), amount=amount_in_cents, status=draft.status)
    return MutationOutcome(
        message="Updated Invoice.",
        invoice_id=parsed_id,
        effects=[revalidate(SETTINGS.invoices_path), redirect(SETTINGS.invoices_path)],
    )


async def delete_invoice(session: AsyncSession, invoice_id: str | UUID) -> MutationOutcome:
    if not SETTINGS.invoice_delete_enabled:
        # Deletion stays switched off; fail before the store is touched.
        logger.warning("invoice_delete_disabled", invoice_id=str(invoice_id))
        raise OperationDisabledError(_DELETE_FAILED)

    parsed_id = parse_invoice_id(invoice_id)
    result = await with_timeout(
        gateway.execute_write(
            session,
            _DELETE_INVOICE_SQL,
            {"id": parsed_id},
            operation="delete_invoice",
            failure_message=_DELETE_FAILED,
        ),
        operation="delete_invoice",
    )
    if result.rowcount == 0:
        raise NotFoundError("Invoice not found.")
    logger.info("invoice_deleted", invoice_id=str(parsed_id))
    return MutationOutcome(
        message="Deleted Invoice.",
        invoice_id=parsed_id,
        effects=[revalidate(SETTINGS.invoices_path)],
    )

"""
Read catalog for the invoices dashboard.

Each function runs one parameterized statement through the gateway under the
configured deadline and shapes the rows for its consumer. Nothing is cached:
every call re-reads the store.
"""

from __future__ import annotations

from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from services.dashboard.app import gateway
from services.dashboard.app.currency import format_currency, to_major
from services.dashboard.app.errors import InvoiceValidationError, NotFoundError
from services.dashboard.app.logging import logger
from services.dashboard.app.pagination import Page, total_pages
from services.dashboard.app.schemas import (
    CardData,
    CustomerField,
    CustomersTableRow,
    InvoiceForm,
    InvoicesTableRow,
    LatestInvoice,
    Revenue,
)
from services.dashboard.app.search import contains_pattern
from services.dashboard.app.settings import SETTINGS
from services.dashboard.app.timeouts import with_timeout
from services.dashboard.app.validation import parse_invoice_id

# Shared by the page query and the page count so the two never drift apart.
_INVOICE_SEARCH_PREDICATE = """
    c.name ILIKE :pattern OR
    c.email ILIKE :pattern OR
    i.amount::text ILIKE :pattern OR
    i.date::text ILIKE :pattern OR
    i.status ILIKE :pattern
"""

_REVENUE_SQL = sa.text("SELECT month, revenue FROM revenue")

_LATEST_INVOICES_SQL = sa.text(
    """
    SELECT invoices.amount, customers.name, customers.image_url, customers.email, invoices.id
    FROM invoices
    JOIN customers ON invoices.customer_id = customers.id
    ORDER BY invoices.date DESC
    LIMIT :limit
    """
)

_CARD_DATA_SQL = sa.text(
    """
    WITH invoice_stats AS (
        SELECT
            COUNT(*) AS invoice_count,
            SUM(CASE WHEN status = 'paid' THEN amount ELSE 0 END) AS paid_amount,
            SUM(CASE WHEN status = 'pending' THEN amount ELSE 0 END) AS pending_amount
        FROM invoices
    ),
    customer_stats AS (
        SELECT COUNT(*) AS customer_count FROM customers
    )
    SELECT
        invoice_stats.invoice_count,
        customer_stats.customer_count,
        invoice_stats.paid_amount,
        invoice_stats.pending_amount
    FROM invoice_stats, customer_stats
    """
)

_FILTERED_INVOICES_SQL = sa.text(
    f"""
    WITH filtered_invoices AS (
        SELECT i.id, i.amount, i.date, i.status, c.name, c.email, c.image_url
        FROM invoices i
        JOIN customers c ON i.customer_id = c.id
        WHERE {_INVOICE_SEARCH_PREDICATE}
    )
    SELECT id, amount, date, status, name, email, image_url
    FROM filtered_invoices
    ORDER BY date DESC, id
    LIMIT :limit OFFSET :offset
    """
)

_INVOICES_COUNT_SQL = sa.text(
    f"""
    SELECT COUNT(*) AS count
    FROM invoices i
    JOIN customers c ON i.customer_id = c.id
    WHERE {_INVOICE_SEARCH_PREDICATE}
    """
)

_INVOICE_BY_ID_SQL = sa.text(
    """
    SELECT i.id, i.customer_id, i.amount, i.status
    FROM invoices i
    WHERE i.id = :id
    """
)

_CUSTOMERS_SQL = sa.text("SELECT id, name FROM customers ORDER BY name ASC")

_FILTERED_CUSTOMERS_SQL = sa.text(
    """
    WITH customer_metrics AS (
        SELECT
            c.id,
            c.name,
            c.email,
            c.image_url,
            COUNT(i.id) AS total_invoices,
            SUM(CASE WHEN i.status = 'pending' THEN i.amount ELSE 0 END) AS total_pending,
            SUM(CASE WHEN i.status = 'paid' THEN i.amount ELSE 0 END) AS total_paid
        FROM customers c
        LEFT JOIN invoices i ON c.id = i.customer_id
        WHERE c.name ILIKE :pattern OR c.email ILIKE :pattern
        GROUP BY c.id, c.name, c.email, c.image_url
    )
    SELECT id, name, email, image_url, total_invoices, total_pending, total_paid
    FROM customer_metrics
    ORDER BY name ASC
    """
)


async def fetch_revenue(session: AsyncSession) -> list[Revenue]:
    rows = await with_timeout(
        gateway.fetch_all(
            session,
            _REVENUE_SQL,
            operation="fetch_revenue",
            failure_message="Failed to fetch revenue data. Please try again later.",
        ),
        operation="fetch_revenue",
    )
    return [Revenue.model_validate(r) for r in rows]


async def fetch_latest_invoices(session: AsyncSession) -> list[LatestInvoice]:
    rows = await with_timeout(
        gateway.fetch_all(
            session,
            _LATEST_INVOICES_SQL,
            {"limit": SETTINGS.latest_invoices_limit},
            operation="fetch_latest_invoices",
            failure_message="Failed to fetch the latest invoices. Please try again later.",
        ),
        operation="fetch_latest_invoices",
    )
    return [LatestInvoice.model_validate({**r, "amount": format_currency(r["amount"])}) for r in rows]


async def fetch_card_data(session: AsyncSession) -> CardData:
    stats = (
        await with_timeout(
            gateway.fetch_one(
                session,
                _CARD_DATA_SQL,
                operation="fetch_card_data",
                failure_message="Failed to fetch card data. Please try again later.",
            ),
            operation="fetch_card_data",
        )
        or {}
    )
    return CardData(
        number_of_customers=int(stats.get("customer_count") or 0),
        number_of_invoices=int(stats.get("invoice_count") or 0),
        total_paid_invoices=format_currency(stats.get("paid_amount") or 0),
        total_pending_invoices=format_currency(stats.get("pending_amount") or 0),
    )


async def fetch_filtered_invoices(
    session: AsyncSession, query: str, current_page: int, *, page_size: int | None = None
) -> list[InvoicesTableRow]:
    page = Page.of(current_page, page_size)
    rows = await with_timeout(
        gateway.fetch_all(
            session,
            _FILTERED_INVOICES_SQL,
            {"pattern": contains_pattern(query), "limit": page.size, "offset": page.offset},
            operation="fetch_filtered_invoices",
            failure_message="Failed to fetch invoices. Please try again later.",
        ),
        operation="fetch_filtered_invoices",
    )
    if not rows and page.number > 1:
        logger.info("page_out_of_range", operation="fetch_filtered_invoices", page=page.number)
        raise NotFoundError("No more invoices found.")
    return [InvoicesTableRow.model_validate(r) for r in rows]


async def fetch_invoices_pages(session: AsyncSession, query: str, *, page_size: int | None = None) -> int:
    row = await with_timeout(
        gateway.fetch_one(
            session,
            _INVOICES_COUNT_SQL,
            {"pattern": contains_pattern(query)},
            operation="fetch_invoices_pages",
            failure_message="Failed to fetch total number of invoices.",
        ),
        operation="fetch_invoices_pages",
    )
    return total_pages(int((row or {}).get("count") or 0), page_size)


async def fetch_invoice_by_id(session: AsyncSession, invoice_id: str | UUID) -> InvoiceForm | None:
    try:
        parsed_id = parse_invoice_id(invoice_id)
    except InvoiceValidationError:
        logger.info("invoice_lookup_malformed_id", invoice_id=str(invoice_id))
        return None

    row = await with_timeout(
        gateway.fetch_one(
            session,
            _INVOICE_BY_ID_SQL,
            {"id": parsed_id},
            operation="fetch_invoice_by_id",
            failure_message="Failed to fetch invoice. Please try again later.",
        ),
        operation="fetch_invoice_by_id",
    )
    if row is None:
        return None
    return InvoiceForm.model_validate({**row, "amount": to_major(row["amount"])})


async def fetch_customers(session: AsyncSession) -> list[CustomerField]:
    rows = await with_timeout(
        gateway.fetch_all(
            session,
            _CUSTOMERS_SQL,
            operation="fetch_customers",
            failure_message="Failed to fetch customers. Please try again later.",
        ),
        operation="fetch_customers",
    )
    return [CustomerField.model_validate(r) for r in rows]


async def fetch_filtered_customers(session: AsyncSession, query: str) -> list[CustomersTableRow]:
    rows = await with_timeout(
        gateway.fetch_all(
            session,
            _FILTERED_CUSTOMERS_SQL,
            {"pattern": contains_pattern(query)},
            operation="fetch_filtered_customers",
            failure_message="Failed to fetch customer data. Please try again later.",
        ),
        operation="fetch_filtered_customers",
    )
    return [
        CustomersTableRow.model_validate(
            {
                **r,
                "total_pending": format_currency(r.get("total_pending") or 0),
                "total_paid": format_currency(r.get("total_paid") or 0),
            }
        )
        for r in rows
    ]

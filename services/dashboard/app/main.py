from __future__ import annotations

from collections.abc import Callable
from typing import Any

import sqlalchemy as sa
import structlog
from fastapi import Body, Depends, FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from services.dashboard.app import mutations, observability, queries
from services.dashboard.app.db import ENGINE, get_session
from services.dashboard.app.errors import (
    DashboardError,
    DatabaseError,
    InvoiceValidationError,
    NotFoundError,
    OperationDisabledError,
    QueryTimeoutError,
)
from services.dashboard.app.logging import configure_logging, logger
from services.dashboard.app.schemas import (
    CardData,
    CustomerField,
    CustomersTableRow,
    ErrorResponse,
    InvoiceForm,
    InvoicesTableRow,
    LatestInvoice,
    MutationOutcome,
    Revenue,
)
from services.dashboard.app.settings import SETTINGS

_STATUS_BY_ERROR: list[tuple[type[DashboardError], int]] = [
    (InvoiceValidationError, 422),
    (NotFoundError, 404),
    (QueryTimeoutError, 504),
    (OperationDisabledError, 503),
    (DatabaseError, 500),
]


app = FastAPI(title="Invoice Dashboard Data API", version="0.1.0")
configure_logging(SETTINGS.log_level)
if SETTINGS.otel_enabled:
    observability.setup_tracing(app, service_name="dashboard")
    observability.instrument_sqlalchemy(ENGINE)
observability.add_metrics_middleware(app, service_name="dashboard")


@app.middleware("http")
async def _no_store(request: Request, call_next: Callable) -> Response:
    # Every response reflects the store as of this request; nothing downstream may cache it.
    with structlog.contextvars.bound_contextvars(method=request.method, path=request.url.path):
        resp = await call_next(request)
    resp.headers["Cache-Control"] = "no-store"
    return resp


@app.exception_handler(DashboardError)
async def _dashboard_error(request: Request, exc: DashboardError) -> JSONResponse:
    status_code = next((code for cls, code in _STATUS_BY_ERROR if isinstance(exc, cls)), 500)
    body = ErrorResponse(
        message=exc.message,
        errors=exc.errors if isinstance(exc, InvoiceValidationError) else None,
    )
    logger.info("request_failed", status_code=status_code, error_type=type(exc).__name__)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.get("/healthz")
async def healthz(session: AsyncSession = Depends(get_session)) -> dict:
    await session.execute(sa.text("SELECT 1"))
    return {"ok": True}


@app.get("/revenue", response_model=list[Revenue])
async def revenue(session: AsyncSession = Depends(get_session)) -> list[Revenue]:
    return await queries.fetch_revenue(session)


@app.get("/invoices/latest", response_model=list[LatestInvoice])
async def latest_invoices(session: AsyncSession = Depends(get_session)) -> list[LatestInvoice]:
    return await queries.fetch_latest_invoices(session)


@app.get("/cards", response_model=CardData)
async def card_data(session: AsyncSession = Depends(get_session)) -> CardData:
    return await queries.fetch_card_data(session)


@app.get("/invoices", response_model=list[InvoicesTableRow])
async def filtered_invoices(
    query: str = "",
    page: int = Query(default=1, ge=1),
    session: AsyncSession = Depends(get_session),
) -> list[InvoicesTableRow]:
    return await queries.fetch_filtered_invoices(session, query, page)


@app.get("/invoices/pages")
async def invoices_pages(query: str = "", session: AsyncSession = Depends(get_session)) -> dict:
    return {"total_pages": await queries.fetch_invoices_pages(session, query)}


@app.get("/invoices/{invoice_id}", response_model=InvoiceForm)
async def invoice_by_id(invoice_id: str, session: AsyncSession = Depends(get_session)) -> InvoiceForm:
    invoice = await queries.fetch_invoice_by_id(session, invoice_id)
    if invoice is None:
        raise NotFoundError("Invoice not found.")
    return invoice


@app.get("/customers", response_model=list[CustomerField])
async def customers(session: AsyncSession = Depends(get_session)) -> list[CustomerField]:
    return await queries.fetch_customers(session)


@app.get("/customers/table", response_model=list[CustomersTableRow])
async def filtered_customers(query: str = "", session: AsyncSession = Depends(get_session)) -> list[CustomersTableRow]:
    return await queries.fetch_filtered_customers(session, query)


@app.post("/invoices", response_model=MutationOutcome, status_code=201)
async def create_invoice(
    fields: dict[str, Any] = Body(...), session: AsyncSession = Depends(get_session)
) -> MutationOutcome:
    return await mutations.create_invoice(session, fields)


@app.put("/invoices/{invoice_id}", response_model=MutationOutcome)
async def update_invoice(
    invoice_id: str, fields: dict[str, Any] = Body(...), session: AsyncSession = Depends(get_session)
) -> MutationOutcome:
    return await mutations.update_invoice(session, invoice_id, fields)


@app.delete("/invoices/{invoice_id}", response_model=MutationOutcome)
async def delete_invoice(invoice_id: str, session: AsyncSession = Depends(get_session)) -> MutationOutcome:
    return await mutations.delete_invoice(session, invoice_id)

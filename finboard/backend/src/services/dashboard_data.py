"""Read accessors assembling dashboard data from the row stores.

Every accessor follows the same contract: build a query, run it through
:func:`execute_query`, and reshape the rows into display-ready records.
Store failures are logged with their detail and surface to callers only as a
:class:`DataFetchError` carrying a fixed message for the operation.
``get_card_summary`` is the one exception: its three sub-metrics degrade to
zero independently instead of failing the whole call.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from typing import Any, TypeVar

import structlog
from sqlalchemy import String, case, cast, func, or_, select

from finboard.backend.src.core.config import get_settings
from finboard.backend.src.core.errors import DataFetchError
from finboard.backend.src.models import INVOICE_STATUSES, Customer, Invoice
from finboard.backend.src.schemas.dashboard import (
    CardSummary,
    CustomerField,
    CustomerTableRow,
    InvoiceForm,
    InvoiceTableRow,
    LatestInvoice,
    RevenueSample,
)
from finboard.backend.src.services.currency import format_currency, to_major_units
from finboard.backend.src.services.metrics import (
    card_metric_degraded_total,
    data_fetch_failures_total,
    query_duration_seconds,
)
from finboard.backend.src.services.row_store import (
    Embed,
    Filter,
    Order,
    RowStore,
    TableQuery,
)

LOGGER = structlog.get_logger(__name__)

ITEMS_PER_PAGE = 6
LATEST_INVOICES_LIMIT = 5

T = TypeVar("T")


def execute_query(fn: Callable[[], T], error_message: str, *, operation: str) -> T:
    """Run ``fn`` and escalate any failure as ``DataFetchError(error_message)``.

    The underlying error is logged but never chained to, or echoed by, the
    raised exception.
    """

    with query_duration_seconds.labels(operation=operation).time():
        try:
            return fn()
        except Exception as exc:
            LOGGER.error(
                "data_fetch_failed",
                operation=operation,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            data_fetch_failures_total.labels(operation=operation).inc()
            raise DataFetchError(error_message) from None


def flatten_relation(value: Any) -> dict[str, Any] | None:
    """Return a to-one joined relation as a single mapping.

    Stores disagree on how an embedded to-one relation is represented: some
    return the related object, others a one-element list. Both shapes map to
    the same dict; ``None`` and an empty list map to ``None``.
    """

    if value is None:
        return None
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, (list, tuple)):
        if not value:
            return None
        if len(value) > 1:
            LOGGER.warning("relation_has_multiple_rows", rows=len(value))
        first = value[0]
        return dict(first) if isinstance(first, Mapping) else None
    raise TypeError(f"Unsupported relation shape: {type(value).__name__}")


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _contains(column, term: str):
    """Case-insensitive substring match with wildcards in ``term`` escaped."""

    return column.ilike(f"%{_escape_like(term or '')}%", escape="\\")


def invoice_search_condition(term: str):
    """Predicate shared by the invoice table and its page count."""

    return or_(
        _contains(Customer.name, term),
        _contains(Customer.email, term),
        _contains(cast(Invoice.amount, String), term),
        _contains(cast(Invoice.date, String), term),
        _contains(Invoice.status, term),
    )


def customer_search_condition(term: str):
    return or_(
        _contains(Customer.name, term),
        _contains(Customer.email, term),
    )


# --------------------------------------------------------------------------
# Structured-query accessors (store agnostic)
# --------------------------------------------------------------------------
def get_revenue_series(store: RowStore) -> list[RevenueSample]:
    """Return every revenue sample."""

    def run() -> list[RevenueSample]:
        result = store.query(TableQuery("revenue"))
        samples = [RevenueSample.model_validate(row) for row in result.rows]
        LOGGER.info(
            "revenue_fetched",
            rows=len(samples),
            data=[sample.model_dump() for sample in samples],
        )
        return samples

    return execute_query(run, "Failed to fetch revenue data.", operation="revenue")


def _to_latest_invoice(row: Mapping[str, Any]) -> LatestInvoice:
    customer = flatten_relation(row.get("customers")) or {}
    return LatestInvoice(
        id=str(row["id"]),
        customer_id=row.get("customer_id"),
        date=row.get("date"),
        name=customer.get("name"),
        email=customer.get("email"),
        image_url=customer.get("image_url"),
        amount=format_currency(row.get("amount")),
    )


def get_latest_invoices(
    store: RowStore, limit: int = LATEST_INVOICES_LIMIT
) -> list[LatestInvoice]:
    """Return the newest invoices with their customer's display fields."""

    statement = TableQuery(
        "invoices",
        columns=("amount", "id", "date", "customer_id"),
        embed=Embed("customers", ("name", "image_url", "email")),
        order=(Order("date", descending=True),),
        limit=max(int(limit), 0),
    )

    def run() -> list[LatestInvoice]:
        result = store.query(statement)
        invoices = [_to_latest_invoice(row) for row in result.rows]
        LOGGER.info(
            "latest_invoices_fetched",
            rows=len(invoices),
            data=[invoice.model_dump(mode="json") for invoice in invoices],
        )
        return invoices

    return execute_query(
        run, "Failed to fetch the latest invoices.", operation="latest_invoices"
    )


def _degrade(metric: str, fn: Callable[[], T], default: T) -> T:
    try:
        value = fn()
    except Exception as exc:
        LOGGER.error("card_metric_failed", metric=metric, error=str(exc))
        card_metric_degraded_total.labels(metric=metric).inc()
        return default
    LOGGER.info("card_metric_fetched", metric=metric, value=value)
    return value


def _count_rows(store: RowStore, table: str) -> int:
    result = store.query(TableQuery(table, columns=("id",), count=True))
    return result.count if result.count is not None else len(result.rows)


def _invoice_totals(store: RowStore) -> dict[str, Decimal]:
    result = store.query(
        TableQuery(
            "invoices",
            columns=("amount", "status"),
            filters=(Filter("status", "in", INVOICE_STATUSES),),
        )
    )
    totals = {status: Decimal(0) for status in INVOICE_STATUSES}
    for row in result.rows:
        status = row.get("status")
        if status in totals:
            totals[status] += Decimal(str(row.get("amount") or 0))
    return totals


def get_card_summary(store: RowStore) -> CardSummary:
    """Return counts and paid/pending totals for the dashboard cards.

    The three sub-queries run concurrently. A failing sub-query is logged and
    its metric falls back to zero; the remaining metrics are still reported.
    """

    def run() -> CardSummary:
        with ThreadPoolExecutor(max_workers=3, thread_name_prefix="card-summary") as executor:
            invoice_count = executor.submit(
                _degrade, "number_of_invoices", lambda: _count_rows(store, "invoices"), 0
            )
            customer_count = executor.submit(
                _degrade, "number_of_customers", lambda: _count_rows(store, "customers"), 0
            )
            totals = executor.submit(
                _degrade,
                "invoice_totals",
                lambda: _invoice_totals(store),
                {status: Decimal(0) for status in INVOICE_STATUSES},
            )

        status_totals = totals.result()
        return CardSummary(
            number_of_customers=int(customer_count.result()),
            number_of_invoices=int(invoice_count.result()),
            total_paid_invoices=format_currency(status_totals["paid"]),
            total_pending_invoices=format_currency(status_totals["pending"]),
        )

    return execute_query(run, "Failed to fetch card data.", operation="card_summary")


# --------------------------------------------------------------------------
# SQL accessors
# --------------------------------------------------------------------------
def get_filtered_invoices(
    store: RowStore, query: str, current_page: int
) -> list[InvoiceTableRow]:
    """Return one page of invoices matching ``query``, newest first."""

    page = max(int(current_page), 1)
    offset = (page - 1) * ITEMS_PER_PAGE
    statement = (
        select(
            Invoice.id,
            Invoice.amount,
            Invoice.date,
            Invoice.status,
            Customer.name,
            Customer.email,
            Customer.image_url,
        )
        .select_from(Invoice)
        .join(Customer, Invoice.customer_id == Customer.id)
        .where(invoice_search_condition(query))
        .order_by(Invoice.date.desc(), Invoice.id.asc())
        .limit(ITEMS_PER_PAGE)
        .offset(offset)
    )

    def run() -> list[InvoiceTableRow]:
        result = store.query(statement)
        return [InvoiceTableRow.model_validate(row) for row in result.rows]

    return execute_query(run, "Failed to fetch invoices.", operation="filtered_invoices")


def get_invoice_page_count(store: RowStore, query: str) -> int:
    """Return the number of ``ITEMS_PER_PAGE`` pages needed for ``query``."""

    statement = (
        select(func.count(Invoice.id).label("count"))
        .select_from(Invoice)
        .join(Customer, Invoice.customer_id == Customer.id)
        .where(invoice_search_condition(query))
    )

    def run() -> int:
        result = store.query(statement)
        total = int(result.rows[0]["count"]) if result.rows else 0
        return math.ceil(total / ITEMS_PER_PAGE)

    return execute_query(
        run, "Failed to fetch total number of invoices.", operation="invoice_pages"
    )


def get_invoice_by_id(store: RowStore, invoice_id: str) -> InvoiceForm | None:
    """Return the invoice with its amount in dollars, or ``None``."""

    statement = select(
        Invoice.id, Invoice.customer_id, Invoice.amount, Invoice.status
    ).where(Invoice.id == invoice_id)

    def run() -> InvoiceForm | None:
        result = store.query(statement)
        if not result.rows:
            LOGGER.info("invoice_not_found", invoice_id=invoice_id)
            return None
        row = result.rows[0]
        return InvoiceForm(
            id=row["id"],
            customer_id=row["customer_id"],
            amount=to_major_units(row["amount"], get_settings().currency_code),
            status=row["status"],
        )

    return execute_query(run, "Failed to fetch invoice.", operation="invoice_by_id")


def list_customers(store: RowStore) -> list[CustomerField]:
    """Return ``(id, name)`` for every customer, alphabetically."""

    statement = select(Customer.id, Customer.name).order_by(Customer.name.asc())

    def run() -> list[CustomerField]:
        result = store.query(statement)
        return [CustomerField.model_validate(row) for row in result.rows]

    return execute_query(run, "Failed to fetch all customers.", operation="customers")


def get_filtered_customers(store: RowStore, query: str) -> list[CustomerTableRow]:
    """Return matching customers with invoice counts and formatted totals."""

    pending = func.sum(case((Invoice.status == "pending", Invoice.amount), else_=0))
    paid = func.sum(case((Invoice.status == "paid", Invoice.amount), else_=0))
    statement = (
        select(
            Customer.id,
            Customer.name,
            Customer.email,
            Customer.image_url,
            func.count(Invoice.id).label("total_invoices"),
            func.coalesce(pending, 0).label("total_pending"),
            func.coalesce(paid, 0).label("total_paid"),
        )
        .select_from(Customer)
        .outerjoin(Invoice, Customer.id == Invoice.customer_id)
        .where(customer_search_condition(query))
        .group_by(Customer.id, Customer.name, Customer.email, Customer.image_url)
        .order_by(Customer.name.asc())
    )

    def run() -> list[CustomerTableRow]:
        result = store.query(statement)
        return [
            CustomerTableRow(
                id=row["id"],
                name=row["name"],
                email=row["email"],
                image_url=row["image_url"],
                total_invoices=int(row["total_invoices"] or 0),
                total_pending=format_currency(row["total_pending"]),
                total_paid=format_currency(row["total_paid"]),
            )
            for row in result.rows
        ]

    return execute_query(
        run, "Failed to fetch customer table.", operation="filtered_customers"
    )


__all__ = [
    "ITEMS_PER_PAGE",
    "LATEST_INVOICES_LIMIT",
    "customer_search_condition",
    "execute_query",
    "flatten_relation",
    "get_card_summary",
    "get_filtered_customers",
    "get_filtered_invoices",
    "get_invoice_by_id",
    "get_invoice_page_count",
    "get_latest_invoices",
    "get_revenue_series",
    "invoice_search_condition",
    "list_customers",
]

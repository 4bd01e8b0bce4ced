"""Invoice table endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from finboard.backend.src.schemas.dashboard import InvoiceForm, InvoiceTableRow
from finboard.backend.src.services import dashboard_data
from finboard.backend.src.services.row_store import RowStore, get_sql_store

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.get("", response_model=list[InvoiceTableRow])
def filtered_invoices(
    query: str = "",
    page: int = Query(1, ge=1),
    store: RowStore = Depends(get_sql_store),
) -> list[InvoiceTableRow]:
    return dashboard_data.get_filtered_invoices(store, query, page)


@router.get("/pages")
def invoice_pages(
    query: str = "", store: RowStore = Depends(get_sql_store)
) -> dict[str, int]:
    """Return the page count for the invoice table search."""

    return {"total_pages": dashboard_data.get_invoice_page_count(store, query)}


@router.get("/{invoice_id}", response_model=InvoiceForm)
def invoice_detail(
    invoice_id: str, store: RowStore = Depends(get_sql_store)
) -> InvoiceForm:
    invoice = dashboard_data.get_invoice_by_id(store, invoice_id)
    if invoice is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invoice not found",
        )
    return invoice


__all__ = ["router"]

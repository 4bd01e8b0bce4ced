"""Dashboard overview endpoints backed by the REST row store."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from finboard.backend.src.schemas.dashboard import (
    CardSummary,
    LatestInvoice,
    RevenueSample,
)
from finboard.backend.src.services import dashboard_data
from finboard.backend.src.services.row_store import RowStore, get_rest_store

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/revenue", response_model=list[RevenueSample])
def revenue(store: RowStore = Depends(get_rest_store)) -> list[RevenueSample]:
    """Return the revenue series for the chart."""

    return dashboard_data.get_revenue_series(store)


@router.get("/latest-invoices", response_model=list[LatestInvoice])
def latest_invoices(
    limit: int = Query(dashboard_data.LATEST_INVOICES_LIMIT, ge=1, le=50),
    store: RowStore = Depends(get_rest_store),
) -> list[LatestInvoice]:
    """Return the most recent invoices, newest first."""

    return dashboard_data.get_latest_invoices(store, limit=limit)


@router.get("/cards", response_model=CardSummary)
def cards(store: RowStore = Depends(get_rest_store)) -> CardSummary:
    """Return the summary card values."""

    return dashboard_data.get_card_summary(store)


__all__ = ["router"]

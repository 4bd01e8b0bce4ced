"""Customer listing endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from finboard.backend.src.schemas.dashboard import CustomerField, CustomerTableRow
from finboard.backend.src.services import dashboard_data
from finboard.backend.src.services.row_store import RowStore, get_sql_store

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=list[CustomerField])
def customers(store: RowStore = Depends(get_sql_store)) -> list[CustomerField]:
    """Return customers for selection lists."""

    return dashboard_data.list_customers(store)


@router.get("/search", response_model=list[CustomerTableRow])
def search_customers(
    query: str = "", store: RowStore = Depends(get_sql_store)
) -> list[CustomerTableRow]:
    return dashboard_data.get_filtered_customers(store, query)


__all__ = ["router"]

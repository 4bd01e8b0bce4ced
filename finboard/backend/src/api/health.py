"""Health check endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response, status
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy import literal, select

from finboard.backend.src.core.config import get_settings
from finboard.backend.src.core.errors import StoreError
from finboard.backend.src.services.row_store import RowStore, get_sql_store

LOGGER = structlog.get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health/live")
def liveness() -> dict[str, str]:
    """Return a liveness indicator."""

    return {"status": "live"}


@router.get("/health/ready")
def readiness(store: RowStore = Depends(get_sql_store)) -> dict[str, str]:
    """Return readiness once the relational store answers a trivial query."""

    try:
        store.query(select(literal(1).label("ok")))
    except StoreError as exc:
        LOGGER.warning("readiness_check_failed", error=exc.message)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        ) from exc

    rest_mode = "rest" if get_settings().rest_store_enabled else "sql"
    return {"status": "ready", "overview_store": rest_mode}


@router.get("/metrics")
def metrics() -> Response:
    """Expose Prometheus metrics."""

    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

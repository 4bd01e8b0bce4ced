"""Public API routers exposed by the FastAPI application."""

from . import (
    customers,
    dashboard,
    health,
    invoices,
)

__all__ = [
    "customers",
    "dashboard",
    "health",
    "invoices",
]

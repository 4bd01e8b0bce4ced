"""Display-ready records returned by the dashboard accessors."""

import datetime as dt
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel

InvoiceStatus = Literal["pending", "paid"]


class RevenueSample(BaseModel):
    month: str
    revenue: float


class LatestInvoice(BaseModel):
    id: str
    customer_id: str | None = None
    date: dt.date | None = None
    name: str | None = None
    email: str | None = None
    image_url: str | None = None
    amount: str


class CardSummary(BaseModel):
    """Aggregate counts and formatted totals for the dashboard cards."""

    number_of_customers: int = 0
    number_of_invoices: int = 0
    total_paid_invoices: str
    total_pending_invoices: str


class InvoiceTableRow(BaseModel):
    id: str
    amount: int
    date: dt.date
    status: InvoiceStatus
    name: str
    email: str
    image_url: str


class InvoiceForm(BaseModel):
    """Invoice prepared for editing; ``amount`` is in major units."""

    id: str
    customer_id: str
    amount: Decimal
    status: InvoiceStatus


class CustomerField(BaseModel):
    id: str
    name: str


class CustomerTableRow(BaseModel):
    id: str
    name: str
    email: str
    image_url: str
    total_invoices: int
    total_pending: str
    total_paid: str


__all__ = [
    "CardSummary",
    "CustomerField",
    "CustomerTableRow",
    "InvoiceForm",
    "InvoiceStatus",
    "InvoiceTableRow",
    "LatestInvoice",
    "RevenueSample",
]

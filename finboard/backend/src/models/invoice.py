"""Invoice model."""

from __future__ import annotations

import datetime as dt
from uuid import uuid4

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

INVOICE_STATUSES: tuple[str, ...] = ("pending", "paid")


class Invoice(Base):
    """An invoice issued to a customer; ``amount`` is stored in cents."""

    __tablename__ = "invoices"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_invoices_amount_non_negative"),
        CheckConstraint(
            "status IN ('pending','paid')", name="ck_invoices_status_valid"
        ),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid4())
    )
    customer_id: Mapped[str] = mapped_column(
        ForeignKey("customers.id"), nullable=False, index=True
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)

    customer: Mapped["Customer"] = relationship("Customer", back_populates="invoices")


__all__ = ["INVOICE_STATUSES", "Invoice"]

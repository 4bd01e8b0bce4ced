"""Shared fixtures for the dashboard data tests."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[4]))

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_finboard.db")

import pytest

from finboard.backend.src.db import get_engine, session_scope
from finboard.backend.src.models import Customer, Invoice, Revenue
from finboard.backend.src.models.base import Base


@dataclass
class SeededData:
    customer_ids: dict[str, str] = field(default_factory=dict)
    invoice_ids: list[str] = field(default_factory=list)


@pytest.fixture(autouse=True)
def setup_database():  # type: ignore[no-untyped-def]
    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def seeded() -> SeededData:
    """Four customers and thirteen invoices dated 2024-01-01 .. 2024-01-13.

    Invoice ``i`` is owned by Anna (0-4), Bob (5-9) or Carl (10-12), is
    ``paid`` for even ``i`` and ``pending`` otherwise, and has an amount of
    ``(i + 1) * 1000 + 7`` cents except the last one, which is 125000 cents.
    Dana has no invoices.
    """

    data = SeededData()
    with session_scope() as session:
        customers = {
            "anna": Customer(
                name="Anna Smith", email="anna@example.com", image_url="/customers/anna.png"
            ),
            "bob": Customer(
                name="Bob Jones", email="banner@x.com", image_url="/customers/bob.png"
            ),
            "carl": Customer(
                name="Carl Diaz", email="carl@example.com", image_url="/customers/carl.png"
            ),
            "dana": Customer(
                name="Dana Annett", email="dana@example.com", image_url="/customers/dana.png"
            ),
        }
        session.add_all(customers.values())
        session.flush()

        owners = ["anna"] * 5 + ["bob"] * 5 + ["carl"] * 3
        invoices = []
        for index, owner in enumerate(owners):
            invoices.append(
                Invoice(
                    customer_id=customers[owner].id,
                    amount=125000 if index == 12 else (index + 1) * 1000 + 7,
                    status="paid" if index % 2 == 0 else "pending",
                    date=date(2024, 1, index + 1),
                )
            )
        session.add_all(invoices)
        session.add_all(
            [Revenue(month="Jan", revenue=2000), Revenue(month="Feb", revenue=1800)]
        )
        session.flush()

        data.customer_ids = {key: customer.id for key, customer in customers.items()}
        data.invoice_ids = [invoice.id for invoice in invoices]
    return data

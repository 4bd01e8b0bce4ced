"""Utilities for seeding development data."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from sqlalchemy.orm import Session

from finboard.backend.src.models import Customer, Invoice, Revenue

PLACEHOLDER_CUSTOMERS = [
    {
        "id": "d6e15727-9fe1-4961-8c5b-ea44a9bd81aa",
        "name": "Evil Rabbit",
        "email": "evil@rabbit.com",
        "image_url": "/customers/evil-rabbit.png",
    },
    {
        "id": "3958dc9e-712f-4377-85e9-fec4b6a6442a",
        "name": "Delba de Oliveira",
        "email": "delba@oliveira.com",
        "image_url": "/customers/delba-de-oliveira.png",
    },
    {
        "id": "3958dc9e-742f-4377-85e9-fec4b6a6442a",
        "name": "Lee Robinson",
        "email": "lee@robinson.com",
        "image_url": "/customers/lee-robinson.png",
    },
    {
        "id": "76d65c26-f784-44a2-ac19-586678f7c2f2",
        "name": "Michael Novotny",
        "email": "michael@novotny.com",
        "image_url": "/customers/michael-novotny.png",
    },
    {
        "id": "cc27c14a-0acf-4f4a-a6c9-d45682c144b9",
        "name": "Amy Burns",
        "email": "amy@burns.com",
        "image_url": "/customers/amy-burns.png",
    },
    {
        "id": "13d07535-c59e-4157-a011-f8d2ef4e0cbb",
        "name": "Balazs Orban",
        "email": "balazs@orban.com",
        "image_url": "/customers/balazs-orban.png",
    },
]

# (customer index, amount in cents, status, issue date)
PLACEHOLDER_INVOICES = [
    (0, 15795, "pending", date(2022, 12, 6)),
    (1, 20348, "pending", date(2022, 11, 14)),
    (4, 3040, "paid", date(2022, 10, 29)),
    (3, 44800, "paid", date(2023, 9, 10)),
    (5, 34577, "pending", date(2023, 8, 5)),
    (2, 54246, "pending", date(2023, 7, 16)),
    (0, 666, "pending", date(2023, 6, 27)),
    (3, 32545, "paid", date(2023, 6, 9)),
    (4, 1250, "paid", date(2023, 6, 17)),
    (5, 8546, "paid", date(2023, 6, 7)),
    (1, 500, "paid", date(2023, 8, 19)),
    (5, 8945, "paid", date(2023, 6, 3)),
    (2, 1000, "paid", date(2022, 6, 5)),
]

PLACEHOLDER_REVENUE = [
    ("Jan", 2000),
    ("Feb", 1800),
    ("Mar", 2200),
    ("Apr", 2500),
    ("May", 2300),
    ("Jun", 3200),
    ("Jul", 3500),
    ("Aug", 3700),
    ("Sep", 2500),
    ("Oct", 2800),
    ("Nov", 3000),
    ("Dec", 4800),
]


@dataclass
class SeedResult:
    """Counts of the rows inserted by :func:`seed_placeholder_data`."""

    customers_created: int = 0
    invoices_created: int = 0
    revenue_created: int = 0

    @property
    def created_anything(self) -> bool:
        return bool(self.customers_created or self.invoices_created or self.revenue_created)


def seed_placeholder_data(session: Session) -> SeedResult:
    """Insert the placeholder dashboard dataset when tables are empty.

    Each table is seeded independently, so re-running is a no-op once data
    exists.
    """

    result = SeedResult()

    if session.query(Customer).first() is None:
        session.add_all(Customer(**values) for values in PLACEHOLDER_CUSTOMERS)
        session.flush()
        result.customers_created = len(PLACEHOLDER_CUSTOMERS)

    if session.query(Invoice).first() is None:
        session.add_all(
            Invoice(
                customer_id=PLACEHOLDER_CUSTOMERS[index]["id"],
                amount=amount,
                status=status,
                date=issued,
            )
            for index, amount, status, issued in PLACEHOLDER_INVOICES
        )
        result.invoices_created = len(PLACEHOLDER_INVOICES)

    if session.query(Revenue).first() is None:
        session.add_all(
            Revenue(month=month, revenue=revenue) for month, revenue in PLACEHOLDER_REVENUE
        )
        result.revenue_created = len(PLACEHOLDER_REVENUE)

    return result


__all__ = [
    "PLACEHOLDER_CUSTOMERS",
    "PLACEHOLDER_INVOICES",
    "PLACEHOLDER_REVENUE",
    "SeedResult",
    "seed_placeholder_data",
]

"""HTTP-level tests for the dashboard routers."""

from __future__ import annotations

import os
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[4]))

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_finboard.db")

import pytest
from fastapi.testclient import TestClient

from finboard.backend.src.core.errors import StoreError
from finboard.backend.src.main import app
from finboard.backend.src.services.row_store import get_rest_store, get_sql_store


class BrokenStore:
    def query(self, statement):  # type: ignore[no-untyped-def]
        raise StoreError("FATAL: too many connections for role \"dashboard\"")


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture()
def broken_stores():  # type: ignore[no-untyped-def]
    app.dependency_overrides[get_sql_store] = BrokenStore
    app.dependency_overrides[get_rest_store] = BrokenStore
    yield
    app.dependency_overrides.pop(get_sql_store, None)
    app.dependency_overrides.pop(get_rest_store, None)


def test_liveness_endpoint(client: TestClient) -> None:
    response = client.get("/api/health/live")
    assert response.status_code == 200
    assert response.json()["status"] == "live"


def test_readiness_endpoint(client: TestClient) -> None:
    response = client.get("/api/health/ready")
    assert response.status_code == 200, response.text
    assert response.json() == {"status": "ready", "overview_store": "sql"}


def test_invoice_table_endpoints(client: TestClient, seeded) -> None:
    response = client.get("/api/invoices", params={"query": "banner", "page": 1})
    assert response.status_code == 200, response.text
    rows = response.json()
    assert len(rows) == 5
    assert all(row["email"] == "banner@x.com" for row in rows)

    pages = client.get("/api/invoices/pages", params={"query": ""})
    assert pages.json() == {"total_pages": 3}


def test_invoice_detail_endpoint(client: TestClient, seeded) -> None:
    response = client.get(f"/api/invoices/{seeded.invoice_ids[12]}")
    assert response.status_code == 200, response.text
    assert response.json()["amount"] in ("1250.00", 1250.0)

    missing = client.get("/api/invoices/unknown-id")
    assert missing.status_code == 404


def test_customer_endpoints(client: TestClient, seeded) -> None:
    listing = client.get("/api/customers")
    assert [row["name"] for row in listing.json()][:2] == ["Anna Smith", "Bob Jones"]

    search = client.get("/api/customers/search", params={"query": "carl"})
    assert search.status_code == 200
    assert search.json()[0]["total_paid"] == "$1,360.07"


def test_dashboard_endpoints_fall_back_to_sql_store(client: TestClient, seeded) -> None:
    cards = client.get("/api/dashboard/cards")
    assert cards.status_code == 200, cards.text
    assert cards.json()["number_of_invoices"] == 13

    latest = client.get("/api/dashboard/latest-invoices", params={"limit": 2})
    assert [row["amount"] for row in latest.json()] == ["$1,250.00", "$120.07"]

    revenue = client.get("/api/dashboard/revenue")
    assert len(revenue.json()) == 2


@pytest.mark.parametrize(
    ("path", "message"),
    [
        ("/api/dashboard/revenue", "Failed to fetch revenue data."),
        ("/api/dashboard/latest-invoices", "Failed to fetch the latest invoices."),
        ("/api/invoices", "Failed to fetch invoices."),
        ("/api/invoices/pages", "Failed to fetch total number of invoices."),
        ("/api/invoices/abc", "Failed to fetch invoice."),
        ("/api/customers", "Failed to fetch all customers."),
        ("/api/customers/search", "Failed to fetch customer table."),
    ],
)
def test_store_failures_map_to_bad_gateway(client: TestClient, broken_stores, path, message) -> None:
    response = client.get(path)

    assert response.status_code == 502
    assert response.json() == {"detail": message}
    assert "connections" not in response.text


def test_cards_degrade_instead_of_failing(client: TestClient, broken_stores) -> None:
    response = client.get("/api/dashboard/cards")

    assert response.status_code == 200
    assert response.json()["total_paid_invoices"] == "$0.00"


def test_readiness_reports_unavailable_database(client: TestClient, broken_stores) -> None:
    response = client.get("/api/health/ready")

    assert response.status_code == 503

"""Seed the development database with placeholder dashboard data."""

from finboard.backend.src.db import get_engine, session_scope
from finboard.backend.src.models.base import Base
from finboard.backend.src.services.seed import seed_placeholder_data


def main() -> None:
    """Create tables (if needed) and load the placeholder dataset."""

    engine = get_engine()
    Base.metadata.create_all(bind=engine)

    with session_scope() as session:
        result = seed_placeholder_data(session)

    if not result.created_anything:
        print("Development data already present, nothing to do.")
        return

    print("✅ Development data ready!")
    print(f"Customers created: {result.customers_created}")
    print(f"Invoices created:  {result.invoices_created}")
    print(f"Revenue rows:      {result.revenue_created}")


if __name__ == "__main__":
    main()

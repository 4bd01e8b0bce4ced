"""SQLAlchemy declarative base for the dashboard tables."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base for the ``customers``, ``invoices`` and ``revenue`` models."""

    pass

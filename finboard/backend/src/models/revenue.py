"""Monthly revenue model."""

from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Revenue(Base):
    """Revenue total for a labelled period."""

    __tablename__ = "revenue"

    month: Mapped[str] = mapped_column(String(16), primary_key=True)
    revenue: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


__all__ = ["Revenue"]

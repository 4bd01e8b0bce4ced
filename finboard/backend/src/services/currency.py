"""Currency formatting for dashboard amounts stored in minor units."""

from __future__ import annotations

from decimal import Decimal

from babel.numbers import format_currency as _babel_format_currency
from babel.numbers import get_currency_precision

from finboard.backend.src.core.config import get_settings


def to_major_units(
    amount: int | float | Decimal | str, currency: str | None = None
) -> Decimal:
    """Convert an amount in minor units (e.g. cents) to major units.

    ``currency`` defaults to the configured ``CURRENCY_CODE``.
    """

    code = (currency or get_settings().currency_code).upper()
    precision = get_currency_precision(code)
    divisor = Decimal(10) ** precision
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return (value / divisor).quantize(Decimal(1) / divisor)


def format_currency(
    amount: int | float | Decimal | str | None,
    *,
    currency: str | None = None,
    locale: str | None = None,
) -> str:
    """Return ``amount`` (minor units) as a localized currency string.

    ``format_currency(125000)`` renders ``"$1,250.00"`` with the default
    ``en_US``/``USD`` settings. ``None`` is treated as zero.
    """

    settings = get_settings()
    currency_code = (currency or settings.currency_code).upper()
    major = to_major_units(amount if amount is not None else 0, currency_code)
    return _babel_format_currency(
        major,
        currency_code,
        locale=locale or settings.currency_locale,
    )


__all__ = ["format_currency", "to_major_units"]

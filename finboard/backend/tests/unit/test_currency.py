import os
import sys
from decimal import Decimal
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[4]))

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_finboard.db")

import pytest

from finboard.backend.src.services.currency import format_currency, to_major_units


@pytest.mark.parametrize(
    ("cents", "expected"),
    [
        (125000, "$1,250.00"),
        (0, "$0.00"),
        (None, "$0.00"),
        (666, "$6.66"),
        ("15795", "$157.95"),
        (Decimal("161042"), "$1,610.42"),
    ],
)
def test_format_currency_renders_minor_units(cents, expected) -> None:
    assert format_currency(cents) == expected


def test_format_currency_honours_explicit_locale() -> None:
    formatted = format_currency(125000, currency="EUR", locale="de_DE")
    assert formatted.startswith("1.250,00")
    assert formatted.endswith("€")


def test_to_major_units_divides_by_one_hundred() -> None:
    assert to_major_units(125000) == Decimal("1250.00")
    assert to_major_units(1) == Decimal("0.01")

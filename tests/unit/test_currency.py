from __future__ import annotations

from decimal import Decimal

import pytest


@pytest.mark.parametrize(
    ("cents", "expected"),
    [
        (0, "$0.00"),
        (5, "$0.05"),
        (4999, "$49.99"),
        (123456, "$1,234.56"),
        (100000000, "$1,000,000.00"),
        (Decimal("157795"), "$1,577.95"),
        (None, "$0.00"),
    ],
)
def test_format_currency_en_us(cents, expected: str) -> None:
    from services.dashboard.app.currency import format_currency

    assert format_currency(cents, currency="USD", locale="en_US") == expected


def test_format_currency_uses_configured_defaults() -> None:
    from services.dashboard.app.currency import format_currency

    assert format_currency(4999) == "$49.99"


def test_format_currency_honors_locale() -> None:
    from services.dashboard.app.currency import format_currency

    out = format_currency(123456, currency="EUR", locale="de_DE")
    assert "1.234,56" in out
    assert "€" in out


@pytest.mark.parametrize(
    ("major", "cents"),
    [("49.99", 4999), (49.99, 4999), (Decimal("0.01"), 1), (12, 1200), ("0.125", 13), (0.1 + 0.2, 30)],
)
def test_to_cents(major, cents: int) -> None:
    from services.dashboard.app.currency import to_cents

    assert to_cents(major) == cents


def test_to_major_is_a_fractional_number() -> None:
    from services.dashboard.app.currency import to_major

    assert to_major(4999) == 49.99
    assert isinstance(to_major(100), float)


def test_cents_round_trip() -> None:
    from services.dashboard.app.currency import to_cents, to_major

    samples = list(range(0, 20_000)) + [2**31 - 1, 999_999_999_99, 10**12 + 7]
    assert all(to_cents(to_major(x)) == x for x in samples)

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from babel.numbers import format_currency as _babel_format_currency

from services.dashboard.app.settings import SETTINGS

_CENTS_PER_UNIT = 100


def format_currency(cents: int | Decimal | None, currency: str | None = None, locale: str | None = None) -> str:
    """Render an amount in cents for display, e.g. 123456 -> "$1,234.56"."""
    amount = Decimal(cents or 0) / _CENTS_PER_UNIT
    return _babel_format_currency(amount, currency or SETTINGS.currency, locale=locale or SETTINGS.locale)


def to_cents(major: Decimal | float | int | str) -> int:
    # Floats go through str so 49.99 stays 49.99 instead of 49.989999...
    value = major if isinstance(major, Decimal) else Decimal(str(major))
    return int((value * _CENTS_PER_UNIT).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def to_major(cents: int) -> float:
    return cents / _CENTS_PER_UNIT

"""German locale formatting for quote output."""

from __future__ import annotations

from decimal import Decimal

_NBSP = "\u00a0"


def format_number(value: Decimal | float | int) -> str:
    """Format with German separators: 1234.5 -> "1.234,50"."""
    d = Decimal(str(value))
    formatted = f"{d:,.2f}"
    # US: 1,234.50 -> German: 1.234,50
    return formatted.replace(",", "X").replace(".", ",").replace("X", ".")


def format_eur(value: Decimal | float | int | None) -> str:
    """Format as EUR amount: 1234.5 -> "1.234,50 €"."""
    if value is None:
        return "-"
    return f"{format_number(value)}{_NBSP}€"


def format_percent(value: Decimal | float | int) -> str:
    """Format a 0-100 percentage: 12.5 -> "12,5 %"."""
    d = Decimal(str(value)).normalize()
    text = f"{d:f}".replace(".", ",")
    return f"{text}{_NBSP}%"

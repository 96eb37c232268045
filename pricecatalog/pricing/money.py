"""Money helpers for the fixed-or-on-request price type."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from pricecatalog.schemas.catalog import FixedPrice, Money

ZERO = Decimal("0")


def value_of(money: Money) -> Decimal:
    """Return the fixed amount, or 0 for "on request".

    On-request prices never contribute to sums; callers that display a price
    must branch on ``money.is_on_request`` instead of showing the 0.
    """
    if isinstance(money, FixedPrice):
        return money.eur
    return ZERO


def amount_or_none(money: Money) -> Decimal | None:
    """Fixed amount, or None for "on request"."""
    if isinstance(money, FixedPrice):
        return money.eur
    return None


def to_cents(value: Decimal) -> Decimal:
    """Round to 2 decimal places."""
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

"""Pricing — per-item breakdowns and quote totals with selective discount."""

from pricecatalog.pricing.calculator import cart_totals, clamp_discount, item_breakdown, labor_subtotal
from pricecatalog.pricing.money import amount_or_none, value_of

__all__ = [
    "amount_or_none",
    "cart_totals",
    "clamp_discount",
    "item_breakdown",
    "labor_subtotal",
    "value_of",
]

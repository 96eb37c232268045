"""Pydantic schemas for quote state and derived pricing results.

Pure data classes — no business logic. Line items and labor selections are
owned by the QuoteManager; breakdowns and totals are computed on demand.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from pricecatalog.schemas.catalog import LaborCost, Option, Product

# ---------------------------------------------------------------------------
# Quote state
# ---------------------------------------------------------------------------


class CartLineItem(BaseModel):
    """One product selection with its chosen options.

    ``product`` and ``selected_options`` are the last-resolved snapshots;
    ``product_id`` and ``selected_option_ids`` are kept so the item can be
    re-resolved against another language's pricelist.
    """

    model_config = ConfigDict(frozen=True)

    item_id: str
    product_id: str
    selected_option_ids: list[str]
    product: Product
    selected_options: list[Option]


class LaborSelection(BaseModel):
    """A labor line keyed by the referenced LaborCost id."""

    model_config = ConfigDict(frozen=True)

    id: str
    days: int = Field(ge=0)
    ref: LaborCost


class LaborRow(BaseModel):
    """Input row for a batch labor add. ``days`` defaults to the item's average."""

    cost: LaborCost
    days: int | None = None


# ---------------------------------------------------------------------------
# Pricing results
# ---------------------------------------------------------------------------


class OptionLine(BaseModel):
    id: str
    name: str
    amount: Decimal | None  # None = on request, distinct from a zero price


class ItemBreakdown(BaseModel):
    base: Decimal
    base_on_request: bool = False
    options: list[OptionLine]
    subtotal: Decimal


class QuoteTotals(BaseModel):
    """Aggregate cart totals. Invariant: final_total == subtotal - discount_amount."""

    subtotal_products: Decimal
    subtotal_labor: Decimal
    subtotal: Decimal
    discount_pct: Decimal
    discount_base: Decimal
    discount_amount: Decimal
    final_total: Decimal

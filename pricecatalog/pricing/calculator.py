"""Quote pricing calculator.

Pure Python, Decimal arithmetic. Implements:
- Item breakdown: base price + selected options, on-request options kept as None
- Labor subtotal: days × day rate per selection
- Cart totals with one discount percentage applied independently to the
  hardware and/or labor subtotal

Rounding: only the discount is rounded (to cents, half-up). The final total
is derived from the rounded discount, so final == subtotal - discount exactly.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from pricecatalog.pricing.money import ZERO, amount_or_none, to_cents, value_of
from pricecatalog.schemas.catalog import Option, Product
from pricecatalog.schemas.quote import (
    CartLineItem,
    ItemBreakdown,
    LaborSelection,
    OptionLine,
    QuoteTotals,
)

_HUNDRED = Decimal("100")


def clamp_discount(discount_pct: Decimal | float | int) -> Decimal:
    """Clamp a discount percentage to [0, 100]. Non-finite input counts as 0."""
    pct = Decimal(str(discount_pct))
    if not pct.is_finite():
        return ZERO
    return max(ZERO, min(_HUNDRED, pct))


def item_breakdown(product: Product, selected_options: Sequence[Option]) -> ItemBreakdown:
    """Break a product selection down into base, option lines and subtotal.

    Args:
        product: The product snapshot.
        selected_options: Options chosen for this line, in display order.

    Returns:
        ItemBreakdown where on-request options carry ``amount=None`` and add
        nothing to the subtotal.
    """
    base = value_of(product.base_price)
    lines = [
        OptionLine(id=o.id, name=o.name, amount=amount_or_none(o.price))
        for o in selected_options
    ]
    options_sum = sum((line.amount for line in lines if line.amount is not None), start=ZERO)
    return ItemBreakdown(
        base=base,
        base_on_request=product.base_price.is_on_request,
        options=lines,
        subtotal=base + options_sum,
    )


def labor_subtotal(labor: Sequence[LaborSelection]) -> Decimal:
    """Sum of days × day rate over all labor selections."""
    return sum((sel.ref.day_rate * sel.days for sel in labor), start=ZERO)


def cart_totals(
    line_items: Sequence[CartLineItem],
    labor: Sequence[LaborSelection],
    discount_pct: Decimal | float | int = 0,
    apply_to_hardware: bool = True,
    apply_to_labor: bool = False,
) -> QuoteTotals:
    """Compute quote totals with a selectively applied discount.

    Args:
        line_items: Product selections (hardware).
        labor: Labor selections.
        discount_pct: Discount percentage, clamped to [0, 100].
        apply_to_hardware: Include the product subtotal in the discount base.
        apply_to_labor: Include the labor subtotal in the discount base.

    Returns:
        QuoteTotals. An empty quote yields all zeros.
    """
    subtotal_products = sum(
        (item_breakdown(it.product, it.selected_options).subtotal for it in line_items),
        start=ZERO,
    )
    subtotal_labor = labor_subtotal(labor)
    subtotal = subtotal_products + subtotal_labor

    pct = clamp_discount(discount_pct)
    discount_base = ZERO
    if apply_to_hardware:
        discount_base += subtotal_products
    if apply_to_labor:
        discount_base += subtotal_labor

    discount_amount = to_cents(discount_base * pct / _HUNDRED)

    return QuoteTotals(
        subtotal_products=subtotal_products,
        subtotal_labor=subtotal_labor,
        subtotal=subtotal,
        discount_pct=pct,
        discount_base=discount_base,
        discount_amount=discount_amount,
        final_total=subtotal - discount_amount,
    )

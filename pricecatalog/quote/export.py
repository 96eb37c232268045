"""Quote export — structured summary and a printable plain-text rendering.

On-request prices are rendered as a localized label, never as a number, and
the totals only reflect priced positions.

Usage:
    from pricecatalog.quote.export import build_quote_summary, render_quote_text

    summary = build_quote_summary(manager)
    print(render_quote_text(summary))
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel

from pricecatalog.pricing import item_breakdown
from pricecatalog.quote.formatters import format_eur, format_percent
from pricecatalog.quote.manager import QuoteManager
from pricecatalog.schemas.catalog import Language
from pricecatalog.schemas.quote import ItemBreakdown, QuoteTotals

LABELS: dict[Language, dict[str, str]] = {
    Language.DE: {
        "title": "Angebotszusammenfassung",
        "customer": "Kunde",
        "products": "Produktkosten",
        "base_price": "Basispreis",
        "options": "Zusatzoptionen",
        "item_subtotal": "Zwischensumme (Position)",
        "no_products": "Keine Produkte hinzugefügt.",
        "labor": "Arbeitskosten",
        "days": "Tage",
        "day_rate": "Tagessatz",
        "labor_subtotal": "Zwischensumme (Arbeit)",
        "no_labor": "Keine Arbeitskosten hinzugefügt.",
        "subtotal_products": "Zwischensumme Produkte",
        "subtotal_labor": "Zwischensumme Arbeit",
        "subtotal": "Warenkorb Zwischensumme",
        "discount": "Rabatt",
        "discount_base": "Basis",
        "final": "Endpreis",
        "on_request": "auf Anfrage",
    },
    Language.EN: {
        "title": "Quote summary",
        "customer": "Customer",
        "products": "Product costs",
        "base_price": "Base price",
        "options": "Additional options",
        "item_subtotal": "Subtotal (item)",
        "no_products": "No products added.",
        "labor": "Labor costs",
        "days": "Days",
        "day_rate": "Day rate",
        "labor_subtotal": "Subtotal (labor)",
        "no_labor": "No labor costs added.",
        "subtotal_products": "Subtotal products",
        "subtotal_labor": "Subtotal labor",
        "subtotal": "Cart subtotal",
        "discount": "Discount",
        "discount_base": "base",
        "final": "Final price",
        "on_request": "on request",
    },
}


class ProductLine(BaseModel):
    item_id: str
    name: str
    category: str
    group: str
    breakdown: ItemBreakdown


class LaborLine(BaseModel):
    id: str
    title: str
    category: str
    group: str | None = None
    machine: str | None = None
    days: int
    day_rate: Decimal
    subtotal: Decimal


class QuoteSummary(BaseModel):
    language: Language
    customer_name: str
    products: list[ProductLine]
    labor: list[LaborLine]
    discount_hardware: bool
    discount_labor: bool
    totals: QuoteTotals


def build_quote_summary(manager: QuoteManager) -> QuoteSummary:
    """Snapshot the manager's quote into a serializable summary."""
    products = [
        ProductLine(
            item_id=it.item_id,
            name=it.product.name,
            category=it.product.category,
            group=it.product.group,
            breakdown=item_breakdown(it.product, it.selected_options),
        )
        for it in manager.items
    ]
    labor = [
        LaborLine(
            id=sel.id,
            title=sel.ref.title,
            category=sel.ref.category,
            group=sel.ref.group,
            machine=sel.ref.machine,
            days=sel.days,
            day_rate=sel.ref.day_rate,
            subtotal=sel.ref.day_rate * sel.days,
        )
        for sel in manager.labor
    ]
    return QuoteSummary(
        language=manager.language,
        customer_name=manager.customer_name,
        products=products,
        labor=labor,
        discount_hardware=manager.discount_hardware,
        discount_labor=manager.discount_labor,
        totals=manager.totals,
    )


def _row(label: str, value: str, width: int = 48) -> str:
    gap = max(1, width - len(label) - len(value))
    return f"{label}{' ' * gap}{value}"


def render_quote_text(summary: QuoteSummary) -> str:
    """Render a summary as printable text in the summary's language."""
    t = LABELS[summary.language]
    out = [t["title"], f"{t['customer']}: {summary.customer_name or '—'}", "", t["products"]]

    for line in summary.products:
        bd = line.breakdown
        out.append(f"* {line.name} ({line.category} · {line.group})")
        out.append(_row(f"  {t['base_price']}", t["on_request"] if bd.base_on_request else format_eur(bd.base)))
        if bd.options:
            out.append(f"  {t['options']}")
            for opt in bd.options:
                price = t["on_request"] if opt.amount is None else format_eur(opt.amount)
                out.append(_row(f"  – {opt.name}", price))
        out.append(_row(f"  {t['item_subtotal']}", format_eur(bd.subtotal)))
    if not summary.products:
        out.append(t["no_products"])

    out += ["", t["labor"]]
    for lab in summary.labor:
        meta = " · ".join(part for part in (lab.category, lab.group, lab.machine) if part)
        out.append(f"* {lab.title} ({meta})")
        out.append(_row(f"  {t['days']} × {t['day_rate']}", f"{lab.days} × {format_eur(lab.day_rate)}"))
        out.append(_row(f"  {t['labor_subtotal']}", format_eur(lab.subtotal)))
    if not summary.labor:
        out.append(t["no_labor"])

    totals = summary.totals
    out += [
        "",
        _row(t["subtotal_products"], format_eur(totals.subtotal_products)),
        _row(t["subtotal_labor"], format_eur(totals.subtotal_labor)),
        _row(t["subtotal"], format_eur(totals.subtotal)),
        _row(
            f"{t['discount']} {format_percent(totals.discount_pct)} "
            f"({t['discount_base']} {format_eur(totals.discount_base)})",
            format_eur(totals.discount_amount),
        ),
        _row(t["final"], format_eur(totals.final_total)),
    ]
    return "\n".join(out) + "\n"

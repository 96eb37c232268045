"""Tests for quote export and German currency formatting."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

from pricecatalog.quote.export import build_quote_summary, render_quote_text
from pricecatalog.quote.formatters import format_eur, format_number, format_percent
from pricecatalog.quote.manager import QuoteManager
from pricecatalog.schemas.catalog import LaborCost, Language, PriceList
from pricecatalog.schemas.quote import LaborRow

NBSP = "\u00a0"

# ── Helpers ──────────────────────────────────────────────────────────


def _manager(language: Language = Language.DE) -> QuoteManager:
    pricelist = PriceList.model_validate({
        "currency": "EUR",
        "updated": "2026-10-01",
        "products": [{
            "id": "m1", "typ": "Fräsmaschine", "name": "VF-2", "group": "Vertikal", "category": "Fräsen",
            "basePrice": {"type": "value", "eur": 1000},
            "options": [
                {"id": "o1", "name": "Späneförderer", "price": {"type": "value", "eur": 200}},
                {"id": "o2", "name": "4. Achse", "price": {"type": "on_request"}},
            ],
        }],
    })
    manager = QuoteManager(MagicMock(), language=language)
    product = pricelist.products[0]
    manager.add_product_selection(product, product.options)
    manager.add_or_update_labor_selections([
        LaborRow(
            cost=LaborCost(
                id="l1", title="Inbetriebnahme", category="Service", machine="VF-2",
                average_days=2, day_rate=Decimal("950"),
            ),
        ),
    ])
    manager.set_discount(10)
    manager.set_customer_name("Muster GmbH")
    return manager


# ── Formatters ───────────────────────────────────────────────────────


class TestFormatters:
    def test_number(self):
        assert format_number(Decimal("1234567.891")) == "1.234.567,89"

    def test_eur(self):
        assert format_eur(1200) == f"1.200,00{NBSP}€"

    def test_eur_none(self):
        assert format_eur(None) == "-"

    def test_percent(self):
        assert format_percent(Decimal("12.50")) == f"12,5{NBSP}%"
        assert format_percent(Decimal("100")) == f"100{NBSP}%"


# ── Summary ──────────────────────────────────────────────────────────


class TestBuildSummary:
    def test_structure(self):
        summary = build_quote_summary(_manager())
        assert summary.customer_name == "Muster GmbH"
        assert summary.products[0].breakdown.subtotal == Decimal("1200")
        assert summary.products[0].breakdown.options[1].amount is None
        assert summary.labor[0].subtotal == Decimal("1900")
        assert summary.totals.discount_amount == Decimal("120.00")
        assert summary.totals.final_total == Decimal("2980.00")

    def test_json_serializable(self):
        data = build_quote_summary(_manager()).model_dump(mode="json")
        assert data["language"] == "de"
        assert data["products"][0]["breakdown"]["options"][1]["amount"] is None


class TestRenderText:
    def test_german_labels_and_on_request(self):
        text = render_quote_text(build_quote_summary(_manager()))
        assert "Angebotszusammenfassung" in text
        assert "Kunde: Muster GmbH" in text
        assert "auf Anfrage" in text
        assert f"2.980,00{NBSP}€" in text
        assert text.endswith("\n")

    def test_english_labels(self):
        text = render_quote_text(build_quote_summary(_manager(Language.EN)))
        assert "Quote summary" in text
        assert "on request" in text

    def test_empty_quote(self):
        manager = QuoteManager(MagicMock(), language=Language.EN)
        text = render_quote_text(build_quote_summary(manager))
        assert "No products added." in text
        assert "No labor costs added." in text
        assert "Customer: —" in text

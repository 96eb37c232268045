"""Quote composition — state container, reconciliation and export."""

from pricecatalog.quote.manager import QuoteManager, reconcile_items, reconcile_labor

__all__ = [
    "QuoteManager",
    "reconcile_items",
    "reconcile_labor",
]

"""Quote state container — product line items, labor selections, quote settings.

One QuoteManager owns the whole quote. Consumers receive the instance and go
through its mutation API; listeners are called once per completed mutation.

Language switching re-resolves every held product, option and labor reference
against the new language's documents. Only the latest switch may apply its
results: each switch takes a generation number and results from superseded
generations are discarded.

Usage:
    manager = QuoteManager(loader)
    manager.add_product_selection(product, [option])
    await manager.switch_language(Language.EN)
    manager.totals.final_total
"""

from __future__ import annotations

import asyncio
import logging
import math
import uuid
from collections.abc import Callable, Iterable, Sequence
from decimal import Decimal

from pricecatalog.catalog.loader import CatalogLoader
from pricecatalog.config import settings
from pricecatalog.errors import CatalogError
from pricecatalog.pricing import cart_totals, clamp_discount
from pricecatalog.schemas.catalog import LaborData, Language, Option, PriceList, Product
from pricecatalog.schemas.quote import CartLineItem, LaborRow, LaborSelection, QuoteTotals

logger = logging.getLogger(__name__)

QuoteListener = Callable[["QuoteManager"], None]


def _new_item_id() -> str:
    return f"item-{uuid.uuid4().hex}"


def clamp_days(days: float | int) -> int:
    """Floor to a non-negative integer. Non-finite input becomes 0."""
    if not math.isfinite(days):
        return 0
    return max(0, math.floor(days))


# ── Reconciliation ───────────────────────────────────────────────────


def reconcile_items(items: Sequence[CartLineItem], pricelist: PriceList) -> list[CartLineItem]:
    """Re-resolve line items against a freshly loaded pricelist.

    Items whose product id is gone keep their old snapshot untouched. For
    found products, options are re-resolved by id and unresolvable ones are
    dropped from the snapshot; ``selected_option_ids`` is never changed.
    """
    by_product = {p.id: p for p in pricelist.products}
    result = []
    for item in items:
        product = by_product.get(item.product_id)
        if product is None:
            result.append(item)
            continue
        options = product.option_map()
        selected = [options[oid] for oid in item.selected_option_ids if oid in options]
        result.append(item.model_copy(update={"product": product, "selected_options": selected}))
    return result


def reconcile_labor(labor: Sequence[LaborSelection], labor_data: LaborData) -> list[LaborSelection]:
    """Replace each labor ref found in ``labor_data``; keep the rest as they are."""
    by_id = {c.id: c for c in labor_data.items}
    return [
        sel.model_copy(update={"ref": by_id[sel.id]}) if sel.id in by_id else sel
        for sel in labor
    ]


# ── State container ──────────────────────────────────────────────────


class QuoteManager:
    """Owns the quote: selections, discount settings and customer name."""

    def __init__(self, loader: CatalogLoader, language: Language | None = None) -> None:
        self._loader = loader
        self._language = language or Language(settings.catalog.default_language)
        self._items: list[CartLineItem] = []
        self._labor: dict[str, LaborSelection] = {}
        self._discount_pct = Decimal("0")
        self._discount_hardware = True
        self._discount_labor = False
        self._customer_name = ""
        self._listeners: list[QuoteListener] = []
        self._generation = 0

    # -- read access --------------------------------------------------

    @property
    def language(self) -> Language:
        return self._language

    @property
    def items(self) -> tuple[CartLineItem, ...]:
        return tuple(self._items)

    @property
    def labor(self) -> tuple[LaborSelection, ...]:
        return tuple(self._labor.values())

    @property
    def discount_pct(self) -> Decimal:
        return self._discount_pct

    @property
    def discount_hardware(self) -> bool:
        return self._discount_hardware

    @property
    def discount_labor(self) -> bool:
        return self._discount_labor

    @property
    def customer_name(self) -> str:
        return self._customer_name

    @property
    def totals(self) -> QuoteTotals:
        return cart_totals(
            self._items,
            list(self._labor.values()),
            self._discount_pct,
            apply_to_hardware=self._discount_hardware,
            apply_to_labor=self._discount_labor,
        )

    # -- listeners ----------------------------------------------------

    def subscribe(self, listener: QuoteListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: QuoteListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Quote listener %r failed", listener)

    # -- product line items -------------------------------------------

    def add_product_selection(self, product: Product, chosen_options: Sequence[Option]) -> CartLineItem:
        """Append a new line item. Identical selections are never merged."""
        item = CartLineItem(
            item_id=_new_item_id(),
            product_id=product.id,
            selected_option_ids=[o.id for o in chosen_options],
            product=product,
            selected_options=list(chosen_options),
        )
        self._items.append(item)
        self._notify()
        return item

    def remove_product_selection(self, item_id: str) -> None:
        """Remove a line item by id. Unknown ids are ignored."""
        remaining = [it for it in self._items if it.item_id != item_id]
        if len(remaining) == len(self._items):
            return
        self._items = remaining
        self._notify()

    # -- labor ----------------------------------------------------------

    def add_or_update_labor_selections(self, rows: Iterable[LaborRow]) -> None:
        """Insert or overwrite labor selections keyed by cost id, as one batch.

        An empty batch changes nothing and notifies no one.
        """
        rows = list(rows)
        if not rows:
            return
        updated = dict(self._labor)
        for row in rows:
            days = row.cost.average_days if row.days is None else clamp_days(row.days)
            updated[row.cost.id] = LaborSelection(id=row.cost.id, days=days, ref=row.cost)
        self._labor = updated
        self._notify()

    def update_labor_days(self, labor_id: str, days: float | int) -> None:
        current = self._labor.get(labor_id)
        if current is None:
            return
        self._labor[labor_id] = current.model_copy(update={"days": clamp_days(days)})
        self._notify()

    def remove_labor_selection(self, labor_id: str) -> None:
        if self._labor.pop(labor_id, None) is not None:
            self._notify()

    # -- quote settings -----------------------------------------------

    def set_discount(self, discount_pct: Decimal | float | int) -> None:
        self._discount_pct = clamp_discount(discount_pct)
        self._notify()

    def set_discount_hardware(self, enabled: bool) -> None:
        self._discount_hardware = enabled
        self._notify()

    def set_discount_labor(self, enabled: bool) -> None:
        self._discount_labor = enabled
        self._notify()

    def set_customer_name(self, name: str) -> None:
        self._customer_name = name
        self._notify()

    # -- language -------------------------------------------------------

    async def switch_language(self, language: Language) -> bool:
        """Make ``language`` active and re-resolve all held references.

        Returns True if this call's results were applied. False means the
        fetch failed (state kept as it was) or a newer switch superseded it.
        """
        self._generation += 1
        generation = self._generation
        self._language = language

        fetches = [
            asyncio.create_task(self._loader.fetch_pricelist(language)),
            asyncio.create_task(self._loader.fetch_labor(language)),
        ]
        try:
            pricelist, labor_data = await asyncio.gather(*fetches)
        except CatalogError:
            logger.warning("Language switch to %s: catalog unavailable, keeping current quote", language.value)
            return False
        finally:
            # A failed fetch must not leave its sibling running
            pending = [task for task in fetches if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        if generation != self._generation:
            logger.debug("Discarding stale reconciliation for %s (generation %d)", language.value, generation)
            return False

        self._items = reconcile_items(self._items, pricelist)
        self._labor = {sel.id: sel for sel in reconcile_labor(list(self._labor.values()), labor_data)}
        self._notify()
        return True

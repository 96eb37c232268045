"""Catalog browsing helpers: free-text filter, category/group facets, sorting.

``None`` for a category or group filter means "all".
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from enum import Enum

from pricecatalog.schemas.catalog import FixedPrice, GroupInfoData, GroupInfoEntry, LaborCost, Product


class SortKey(str, Enum):
    NAME = "name"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    GROUP = "group"
    GROUP_NAME = "group_name"


def _base_value(product: Product) -> float:
    # On-request products sort after every priced one
    if isinstance(product.base_price, FixedPrice):
        return float(product.base_price.eur)
    return math.inf


def _fold(text: str) -> str:
    return text.casefold()


def _search_text(product: Product) -> str:
    parts = [
        product.type_label,
        product.name,
        product.group,
        product.category,
        *(product.tags or []),
        product.short_description or "",
    ]
    return _fold(" ".join(parts))


def filter_products(
    products: Iterable[Product],
    query: str = "",
    category: str | None = None,
    group: str | None = None,
) -> list[Product]:
    """Filter by category, group and a case-insensitive substring query."""
    needle = _fold(query.strip())
    result = []
    for p in products:
        if category is not None and p.category != category:
            continue
        if group is not None and p.group != group:
            continue
        if needle and needle not in _search_text(p):
            continue
        result.append(p)
    return result


def sort_products(products: Sequence[Product], key: SortKey | str) -> list[Product]:
    """Return a sorted copy. Unknown keys keep the input order."""
    items = list(products)
    try:
        key = SortKey(key)
    except ValueError:
        return items
    if key is SortKey.NAME:
        return sorted(items, key=lambda p: _fold(p.name))
    if key is SortKey.PRICE_ASC:
        return sorted(items, key=_base_value)
    if key is SortKey.PRICE_DESC:
        return sorted(items, key=_base_value, reverse=True)
    if key is SortKey.GROUP:
        return sorted(items, key=lambda p: (_fold(p.group), _fold(p.name)))
    return sorted(items, key=lambda p: (_fold(p.category), _fold(p.group), _fold(p.name)))


def list_categories(products: Iterable[Product]) -> list[str]:
    return sorted({p.category for p in products})


def list_groups(products: Iterable[Product], category: str | None = None) -> list[str]:
    return sorted({p.group for p in products if category is None or p.category == category})


def filter_labor(items: Iterable[LaborCost], category: str | None = None) -> list[LaborCost]:
    return [it for it in items if category is None or it.category == category]


def find_group_info(
    data: GroupInfoData | None,
    category: str | None,
    group: str | None,
) -> GroupInfoEntry | None:
    """Resolve the description for a group.

    With a category, only that category is consulted. Without one, every
    category is searched and the first match wins. Missing entries are not an
    error.
    """
    if data is None or not group:
        return None
    if category:
        entry = data.categories.get(category)
        return entry.groups.get(group) if entry else None
    for entry in data.categories.values():
        if group in entry.groups:
            return entry.groups[group]
    return None

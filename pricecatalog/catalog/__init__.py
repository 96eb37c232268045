"""Catalog access — language-scoped document loading and browsing helpers."""

from pricecatalog.catalog.loader import CatalogLoader
from pricecatalog.catalog.search import (
    SortKey,
    filter_labor,
    filter_products,
    find_group_info,
    list_categories,
    list_groups,
    sort_products,
)

__all__ = [
    "CatalogLoader",
    "SortKey",
    "filter_labor",
    "filter_products",
    "find_group_info",
    "list_categories",
    "list_groups",
    "sort_products",
]

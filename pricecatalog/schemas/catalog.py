"""Pydantic schemas for the per-language catalog documents.

One declarative model per stored document (pricelist, groupinfo, labor).
The same models back the catalog loader, the quote manager, and the admin
validation gate, so client-side parsing and server-side checks never drift.

Stored JSON keeps the deployed key names (``typ``, ``avgDays``,
``dayRateEur`` ...); attributes use descriptive names via aliases.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Language(str, Enum):
    """Supported catalog languages."""

    DE = "de"
    EN = "en"


class DocumentName(str, Enum):
    """Logical names of the editable documents."""

    PRICELIST = "pricelist"
    GROUPINFO = "groupinfo"
    LABOR = "labor"

    def file_name(self, language: Language) -> str:
        return f"{self.value}.{language.value}.json"


NonEmptyStr = Annotated[str, Field(min_length=1)]


def _require_number(v: Any) -> Any:
    # bool is an int subclass but never an amount
    if isinstance(v, bool) or not isinstance(v, int | float | Decimal):
        msg = "Input should be a number"
        raise ValueError(msg)
    return v


# Stored numbers must be JSON numbers: "950" or true are rejected, not coerced.
Amount = Annotated[Decimal, BeforeValidator(_require_number), Field(ge=0)]
DayCount = Annotated[int, Field(ge=0, strict=True)]


class _CatalogModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


def _reject_duplicate_ids(entries: list, kind: str) -> list:
    seen: set[str] = set()
    for entry in entries:
        if entry.id in seen:
            msg = f"Duplicate {kind} id '{entry.id}'"
            raise ValueError(msg)
        seen.add(entry.id)
    return entries


# ---------------------------------------------------------------------------
# Money
# ---------------------------------------------------------------------------


class FixedPrice(_CatalogModel):
    """A fixed, non-negative EUR amount."""

    type: Literal["value"] = "value"
    eur: Amount

    @property
    def is_on_request(self) -> bool:
        return False


class OnRequest(_CatalogModel):
    """Price on request — no amount until manually quoted."""

    type: Literal["on_request"] = "on_request"

    @property
    def is_on_request(self) -> bool:
        return True


Money = Annotated[Union[FixedPrice, OnRequest], Field(discriminator="type")]


# ---------------------------------------------------------------------------
# Pricelist
# ---------------------------------------------------------------------------


class Option(_CatalogModel):
    id: NonEmptyStr
    name: NonEmptyStr
    price: Money


class Product(_CatalogModel):
    """A machine product with its orderable options."""

    id: NonEmptyStr
    type_label: NonEmptyStr = Field(alias="typ")
    name: NonEmptyStr
    group: NonEmptyStr
    category: NonEmptyStr
    base_price: Money = Field(alias="basePrice")
    options: list[Option]
    sku: str | None = None
    short_description: str | None = Field(default=None, alias="short")
    specs: dict[str, str] | None = None
    tags: list[str] | None = None
    images: list[str] | None = None

    @field_validator("options")
    @classmethod
    def unique_option_ids(cls, v: list[Option]) -> list[Option]:
        return _reject_duplicate_ids(v, "option")

    def option_map(self) -> dict[str, Option]:
        return {o.id: o for o in self.options}


class PriceList(_CatalogModel):
    currency: Literal["EUR"]
    updated: Annotated[str, Field(min_length=4)]
    products: list[Product]

    @field_validator("products")
    @classmethod
    def unique_product_ids(cls, v: list[Product]) -> list[Product]:
        return _reject_duplicate_ids(v, "product")


# ---------------------------------------------------------------------------
# Group descriptions
# ---------------------------------------------------------------------------


class GroupInfoSection(_CatalogModel):
    title: NonEmptyStr
    bullets: list[str]


class GroupInfoEntry(_CatalogModel):
    title: NonEmptyStr
    sections: list[GroupInfoSection]


class CategoryGroups(_CatalogModel):
    groups: dict[str, GroupInfoEntry]


class GroupInfoData(_CatalogModel):
    """Optional enrichment text keyed by category, then group."""

    categories: dict[str, CategoryGroups]


# ---------------------------------------------------------------------------
# Labor
# ---------------------------------------------------------------------------


class LaborCost(_CatalogModel):
    """A labor line item priced per day."""

    id: NonEmptyStr
    title: NonEmptyStr
    category: NonEmptyStr
    group: str | None = None
    machine: str | None = None
    average_days: DayCount = Field(alias="avgDays")
    day_rate: Amount = Field(alias="dayRateEur")


class LaborData(_CatalogModel):
    currency: Literal["EUR"]
    updated: Annotated[str, Field(min_length=4)]
    items: list[LaborCost]

    @field_validator("items")
    @classmethod
    def unique_labor_ids(cls, v: list[LaborCost]) -> list[LaborCost]:
        return _reject_duplicate_ids(v, "labor")


DOCUMENT_SCHEMAS: dict[DocumentName, type[BaseModel]] = {
    DocumentName.PRICELIST: PriceList,
    DocumentName.GROUPINFO: GroupInfoData,
    DocumentName.LABOR: LaborData,
}

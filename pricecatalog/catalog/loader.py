"""Async httpx loader for language-scoped catalog documents.

Each resource is published once per language (``pricelist.de.json``,
``pricelist.en.json``) with an optional language-neutral ``pricelist.json``.
A lookup tries the requested language, then the fallback language, then the
neutral file, and returns the first candidate that downloads and parses.

Usage:
    async with CatalogLoader() as loader:
        pricelist = await loader.fetch_pricelist(Language.EN)
"""

from __future__ import annotations

import logging
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from pricecatalog.config import settings
from pricecatalog.errors import CatalogNotFoundError
from pricecatalog.schemas.catalog import (
    DocumentName,
    GroupInfoData,
    LaborData,
    Language,
    PriceList,
)

logger = logging.getLogger(__name__)

DocumentT = TypeVar("DocumentT", bound=BaseModel)


class CatalogLoader:
    """Fetches catalog documents with a language fallback search order."""

    def __init__(
        self,
        base_url: str | None = None,
        fallback_language: Language | str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.catalog.catalog_base_url).rstrip("/")
        self._fallback = Language(fallback_language or settings.catalog.fallback_language)
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout or settings.catalog.fetch_timeout),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> CatalogLoader:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    def candidates(self, resource: str, language: Language) -> list[str]:
        """URLs to try, in order, without duplicates."""
        urls = [
            f"{self._base_url}/{resource}.{language.value}.json",
            f"{self._base_url}/{resource}.{self._fallback.value}.json",
            f"{self._base_url}/{resource}.json",
        ]
        return list(dict.fromkeys(urls))

    async def fetch_localized_document(
        self,
        resource: str,
        language: Language,
        model: type[DocumentT],
    ) -> DocumentT:
        """Return the first candidate that downloads and parses into ``model``.

        Network errors, non-success statuses and unparseable bodies count as a
        miss. Raises CatalogNotFoundError, chained from the last failure, once
        every candidate has missed.
        """
        urls = self.candidates(resource, language)
        last_error: Exception | None = None

        for url in urls:
            try:
                response = await self._client.get(url)
                response.raise_for_status()
                document = model.model_validate_json(response.content)
            except (httpx.HTTPError, ValidationError) as exc:
                logger.debug("Catalog candidate missed: %s (%s)", url, type(exc).__name__)
                last_error = exc
                continue
            logger.debug("Catalog document loaded from %s", url)
            return document

        logger.warning("No catalog candidate for %s/%s could be loaded", resource, language.value)
        raise CatalogNotFoundError(urls) from last_error

    async def fetch_pricelist(self, language: Language) -> PriceList:
        return await self.fetch_localized_document(DocumentName.PRICELIST.value, language, PriceList)

    async def fetch_labor(self, language: Language) -> LaborData:
        return await self.fetch_localized_document(DocumentName.LABOR.value, language, LaborData)

    async def fetch_groupinfo(self, language: Language) -> GroupInfoData:
        return await self.fetch_localized_document(DocumentName.GROUPINFO.value, language, GroupInfoData)

"""Tests for the language-fallback catalog loader.

Covers:
- Requested language found first
- Fallback to the fallback language, then to the language-neutral file
- Non-success status, network error and unparseable body count as misses
- CatalogNotFoundError lists every attempted URL
"""

from __future__ import annotations

import json

import httpx
import pytest

from pricecatalog.catalog.loader import CatalogLoader
from pricecatalog.errors import CatalogNotFoundError
from pricecatalog.schemas.catalog import Language

BASE = "http://catalog.test/data"

# ── Helpers ──────────────────────────────────────────────────────────


def _labor_doc(title: str) -> dict:
    return {
        "currency": "EUR",
        "updated": "2026-10-01",
        "items": [{"id": "l1", "title": title, "category": "Service", "avgDays": 2, "dayRateEur": 950}],
    }


def _loader(files: dict[str, object], requested: list[str] | None = None, fail: set[str] | None = None):
    """Build a loader whose transport serves ``files`` by path name."""

    def handler(request: httpx.Request) -> httpx.Response:
        name = request.url.path.rsplit("/", 1)[-1]
        if requested is not None:
            requested.append(name)
        if fail and name in fail:
            raise httpx.ConnectError("connection refused", request=request)
        if name not in files:
            return httpx.Response(404, json={"error": "not found"})
        body = files[name]
        content = body if isinstance(body, bytes) else json.dumps(body).encode()
        return httpx.Response(200, content=content, headers={"Content-Type": "application/json"})

    return CatalogLoader(base_url=BASE, fallback_language=Language.DE, transport=httpx.MockTransport(handler))


# ── Candidate order ──────────────────────────────────────────────────


class TestCandidates:
    @pytest.mark.asyncio()
    async def test_order(self):
        async with _loader({}) as loader:
            assert loader.candidates("labor", Language.EN) == [
                f"{BASE}/labor.en.json",
                f"{BASE}/labor.de.json",
                f"{BASE}/labor.json",
            ]

    @pytest.mark.asyncio()
    async def test_deduplicated_for_fallback_language(self):
        async with _loader({}) as loader:
            assert loader.candidates("labor", Language.DE) == [f"{BASE}/labor.de.json", f"{BASE}/labor.json"]


# ── Fetching ─────────────────────────────────────────────────────────


class TestFetchLocalized:
    @pytest.mark.asyncio()
    async def test_requested_language_first(self):
        requested: list[str] = []
        files = {"labor.en.json": _labor_doc("Commissioning"), "labor.de.json": _labor_doc("Inbetriebnahme")}
        async with _loader(files, requested) as loader:
            doc = await loader.fetch_labor(Language.EN)
        assert doc.items[0].title == "Commissioning"
        assert requested == ["labor.en.json"]

    @pytest.mark.asyncio()
    async def test_falls_back_to_fallback_language(self):
        async with _loader({"labor.de.json": _labor_doc("Inbetriebnahme")}) as loader:
            doc = await loader.fetch_labor(Language.EN)
        assert doc.items[0].title == "Inbetriebnahme"

    @pytest.mark.asyncio()
    async def test_falls_back_to_neutral(self):
        async with _loader({"labor.json": _labor_doc("Neutral")}) as loader:
            doc = await loader.fetch_labor(Language.EN)
        assert doc.items[0].title == "Neutral"

    @pytest.mark.asyncio()
    async def test_network_error_is_a_miss(self):
        files = {"labor.en.json": _labor_doc("Commissioning"), "labor.de.json": _labor_doc("Inbetriebnahme")}
        async with _loader(files, fail={"labor.en.json"}) as loader:
            doc = await loader.fetch_labor(Language.EN)
        assert doc.items[0].title == "Inbetriebnahme"

    @pytest.mark.asyncio()
    async def test_unparseable_body_is_a_miss(self):
        files = {"labor.en.json": b"{not json", "labor.de.json": _labor_doc("Inbetriebnahme")}
        async with _loader(files) as loader:
            doc = await loader.fetch_labor(Language.EN)
        assert doc.items[0].title == "Inbetriebnahme"

    @pytest.mark.asyncio()
    async def test_all_missing_raises_with_candidates(self):
        async with _loader({}, fail={"labor.json"}) as loader:
            with pytest.raises(CatalogNotFoundError) as exc_info:
                await loader.fetch_labor(Language.EN)
        err = exc_info.value
        assert err.candidates == [f"{BASE}/labor.en.json", f"{BASE}/labor.de.json", f"{BASE}/labor.json"]
        assert "labor.json" in str(err)
        assert isinstance(err.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio()
    async def test_pricelist(self):
        pricelist = {
            "currency": "EUR",
            "updated": "2026-10-01",
            "products": [{
                "id": "m1", "typ": "Lathe", "name": "ST-10", "group": "Turning", "category": "Turning",
                "basePrice": {"type": "on_request"}, "options": [],
            }],
        }
        async with _loader({"pricelist.en.json": pricelist}) as loader:
            doc = await loader.fetch_pricelist(Language.EN)
        assert doc.products[0].base_price.is_on_request

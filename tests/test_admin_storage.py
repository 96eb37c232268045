"""Tests for the flat-file document store.

Covers:
- Pretty-printed write and raw read round trip
- Backup of the previous version on every overwrite, none for a new file
- Best-effort backups: a failing copy never blocks the write
- Serialized writes per (name, lang)
"""

from __future__ import annotations

import asyncio
import json
from datetime import UTC, datetime
from unittest.mock import patch

import pytest

from pricecatalog.admin.storage import DocumentStore, backup_timestamp, serialize_document
from pricecatalog.errors import DocumentNotFoundError
from pricecatalog.schemas.catalog import DocumentName, Language

# ── Helpers ──────────────────────────────────────────────────────────


@pytest.fixture()
def store(tmp_path) -> DocumentStore:
    return DocumentStore(tmp_path / "data", tmp_path / "backups")


def _backups(store: DocumentStore) -> list[str]:
    if not store.backup_dir.exists():
        return []
    return sorted(p.name for p in store.backup_dir.iterdir())


# ── Serialization ────────────────────────────────────────────────────


class TestSerialize:
    def test_two_space_indent_and_newline(self):
        assert serialize_document({"a": [1]}) == '{\n  "a": [\n    1\n  ]\n}\n'

    def test_keeps_unicode(self):
        assert "Fräsen" in serialize_document({"category": "Fräsen"})

    def test_timestamp_has_no_colons(self):
        ts = backup_timestamp(datetime(2026, 10, 19, 15, 4, 5, 123456, tzinfo=UTC))
        assert ts == "2026-10-19T15-04-05.123456Z"

    def test_rejects_nan(self):
        with pytest.raises(ValueError):
            serialize_document({"note": float("nan")})


# ── Read / write ─────────────────────────────────────────────────────


class TestReadWrite:
    @pytest.mark.asyncio()
    async def test_round_trip(self, store):
        body = {"currency": "EUR", "updated": "2026-10-01", "items": []}
        path = await store.write(DocumentName.LABOR, Language.DE, body)

        assert path.name == "labor.de.json"
        raw = await store.read_text(DocumentName.LABOR, Language.DE)
        assert raw == serialize_document(body)
        assert serialize_document(json.loads(raw)) == raw

    @pytest.mark.asyncio()
    async def test_languages_are_separate_files(self, store):
        await store.write(DocumentName.LABOR, Language.DE, {"lang": "de"})
        await store.write(DocumentName.LABOR, Language.EN, {"lang": "en"})
        assert json.loads(await store.read_text(DocumentName.LABOR, Language.DE)) == {"lang": "de"}
        assert json.loads(await store.read_text(DocumentName.LABOR, Language.EN)) == {"lang": "en"}

    @pytest.mark.asyncio()
    async def test_missing_file(self, store):
        with pytest.raises(DocumentNotFoundError) as exc_info:
            await store.read_text(DocumentName.PRICELIST, Language.EN)
        assert exc_info.value.file == "pricelist.en.json"

    @pytest.mark.asyncio()
    async def test_non_utf8_bytes_replaced(self, store, caplog):
        path = store.path_for(DocumentName.LABOR, Language.DE)
        path.parent.mkdir(parents=True)
        path.write_bytes(b'{"x":"\xff"}')

        assert await store.read_text(DocumentName.LABOR, Language.DE) == '{"x":"\ufffd"}'
        assert "not valid UTF-8" in caplog.text

    @pytest.mark.asyncio()
    async def test_no_temp_files_left(self, store):
        await store.write(DocumentName.LABOR, Language.DE, {"v": 1})
        assert [p.name for p in store.data_dir.iterdir()] == ["labor.de.json"]


# ── Backups ──────────────────────────────────────────────────────────


class TestBackups:
    @pytest.mark.asyncio()
    async def test_first_write_has_no_backup(self, store):
        await store.write(DocumentName.PRICELIST, Language.DE, {"v": 1})
        assert _backups(store) == []

    @pytest.mark.asyncio()
    async def test_two_overwrites_two_backups(self, store):
        path = store.path_for(DocumentName.PRICELIST, Language.DE)
        path.parent.mkdir(parents=True)
        path.write_text('{"v": 0}', encoding="utf-8")

        await store.write(DocumentName.PRICELIST, Language.DE, {"v": 1})
        await store.write(DocumentName.PRICELIST, Language.DE, {"v": 2})

        backups = _backups(store)
        assert len(backups) == 2
        assert all(name.startswith("pricelist.de-") and name.endswith(".json") for name in backups)
        contents = {(store.backup_dir / name).read_text(encoding="utf-8") for name in backups}
        assert contents == {'{"v": 0}', serialize_document({"v": 1})}
        assert json.loads(path.read_text(encoding="utf-8")) == {"v": 2}

    @pytest.mark.asyncio()
    async def test_backup_keeps_exact_bytes(self, store):
        path = store.path_for(DocumentName.GROUPINFO, Language.EN)
        path.parent.mkdir(parents=True)
        original = b'{ "categories" :{}}  \r\n'
        path.write_bytes(original)

        await store.write(DocumentName.GROUPINFO, Language.EN, {"categories": {}})

        [backup] = _backups(store)
        assert (store.backup_dir / backup).read_bytes() == original

    @pytest.mark.asyncio()
    async def test_same_timestamp_gets_suffix(self, store):
        path = store.path_for(DocumentName.LABOR, Language.DE)
        path.parent.mkdir(parents=True)
        path.write_text("{}", encoding="utf-8")

        with patch("pricecatalog.admin.storage.backup_timestamp", return_value="T"):
            await store.write(DocumentName.LABOR, Language.DE, {"v": 1})
            await store.write(DocumentName.LABOR, Language.DE, {"v": 2})

        assert _backups(store) == ["labor.de-T-1.json", "labor.de-T.json"]

    @pytest.mark.asyncio()
    async def test_backup_failure_does_not_block_write(self, store):
        path = store.path_for(DocumentName.LABOR, Language.DE)
        path.parent.mkdir(parents=True)
        path.write_text("{}", encoding="utf-8")

        with patch("pricecatalog.admin.storage.shutil.copyfile", side_effect=OSError("disk full")):
            await store.write(DocumentName.LABOR, Language.DE, {"v": 1})

        assert json.loads(path.read_text(encoding="utf-8")) == {"v": 1}


class TestConcurrentWrites:
    @pytest.mark.asyncio()
    async def test_same_file_writes_are_serialized(self, store):
        path = store.path_for(DocumentName.PRICELIST, Language.DE)
        path.parent.mkdir(parents=True)
        path.write_text('{"v": 0}', encoding="utf-8")

        await asyncio.gather(*[
            store.write(DocumentName.PRICELIST, Language.DE, {"v": i}) for i in range(1, 5)
        ])

        backups = _backups(store)
        assert len(backups) == 4
        snapshots = sorted(json.loads((store.backup_dir / b).read_text(encoding="utf-8"))["v"] for b in backups)
        final = json.loads(path.read_text(encoding="utf-8"))["v"]
        # Each write saw a distinct predecessor: v0 plus every write except the last one
        assert sorted([*snapshots, final]) == [0, 1, 2, 3, 4]

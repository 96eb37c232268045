"""Flat-file store for the per-language JSON documents.

Layout:
    {data_dir}/{name}.{lang}.json            live documents
    {backup_dir}/{name}.{lang}-{timestamp}.json  pre-write snapshots (archive only)

A write snapshots the current file (best effort), then atomically replaces it
with pretty-printed JSON. Writes to the same (name, lang) are serialized;
different files proceed independently.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import shutil
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pricecatalog.errors import DocumentNotFoundError
from pricecatalog.schemas.catalog import DocumentName, Language

logger = logging.getLogger(__name__)


def serialize_document(body: Any) -> str:
    """Stable 2-space indented JSON with a trailing newline.

    Raises ValueError for NaN or infinite floats, which have no JSON form.
    """
    return json.dumps(body, indent=2, ensure_ascii=False, allow_nan=False) + "\n"


def backup_timestamp(now: datetime | None = None) -> str:
    """Filesystem-safe UTC timestamp (colons replaced)."""
    now = now or datetime.now(UTC)
    return now.isoformat(timespec="microseconds").replace(":", "-").replace("+00-00", "Z")


class DocumentStore:
    """Reads and writes ``{name}.{lang}.json`` files with backup-on-write."""

    def __init__(self, data_dir: Path, backup_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        self.backup_dir = Path(backup_dir)
        self._locks: dict[tuple[DocumentName, Language], asyncio.Lock] = {}

    def path_for(self, name: DocumentName, language: Language) -> Path:
        return self.data_dir / name.file_name(language)

    def _lock_for(self, name: DocumentName, language: Language) -> asyncio.Lock:
        return self._locks.setdefault((name, language), asyncio.Lock())

    async def read_text(self, name: DocumentName, language: Language) -> str:
        """Return the raw file content. Raises DocumentNotFoundError if absent.

        Bytes that are not UTF-8 are replaced with U+FFFD so a damaged file
        can still be fetched and repaired.
        """
        path = self.path_for(name, language)
        try:
            data = await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as exc:
            raise DocumentNotFoundError(path.name) from exc
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Stored document %s is not valid UTF-8", path.name)
            return data.decode("utf-8", errors="replace")

    async def write(self, name: DocumentName, language: Language, body: Any) -> Path:
        """Back up the current file, then replace it with ``body``."""
        path = self.path_for(name, language)
        payload = serialize_document(body)
        async with self._lock_for(name, language):
            await asyncio.to_thread(self._backup, path, name, language)
            await asyncio.to_thread(self._replace, path, payload)
        return path

    def _backup(self, path: Path, name: DocumentName, language: Language) -> Path | None:
        if not path.exists():
            return None
        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            stem = f"{name.value}.{language.value}-{backup_timestamp()}"
            target = self.backup_dir / f"{stem}.json"
            counter = 1
            while target.exists():
                target = self.backup_dir / f"{stem}-{counter}.json"
                counter += 1
            shutil.copyfile(path, target)
        except OSError:
            logger.warning("Backup of %s failed, continuing with write", path.name, exc_info=True)
            return None
        logger.info("Backup created: %s", target.name)
        return target

    def _replace(self, path: Path, payload: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

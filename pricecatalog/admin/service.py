"""Admin data service — credential-gated read/write of catalog documents.

Every operation names its document explicitly as (logical name, language);
there is no default language, so a request can never land in the wrong file.

Usage:
    from pricecatalog.admin.service import admin_service

    raw = await admin_service.read_raw("labor", "de", credential)
    await admin_service.write("labor", "de", credential, body)
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel

from pricecatalog.admin.auth import verify_credential
from pricecatalog.admin.storage import DocumentStore
from pricecatalog.admin.validation import soft_check, validate_document
from pricecatalog.config import settings
from pricecatalog.errors import InvalidBodyError, InvalidJsonError, InvalidLanguageError, InvalidNameError
from pricecatalog.schemas.catalog import DocumentName, Language

logger = logging.getLogger(__name__)


class WriteResult(BaseModel):
    ok: bool = True
    file: str


def resolve_document(name: str, language: str | None) -> tuple[DocumentName, Language]:
    """Map request parameters to a document identity.

    Raises InvalidLanguageError for a missing/unknown language and
    InvalidNameError for an unknown logical name.
    """
    try:
        lang = Language(language or "")
    except ValueError as exc:
        raise InvalidLanguageError(language) from exc
    try:
        doc = DocumentName(name)
    except ValueError as exc:
        raise InvalidNameError(name) from exc
    return doc, lang


def _reject_constant(name: str) -> Any:
    msg = f"{name} is not valid JSON"
    raise ValueError(msg)


def decode_body(raw: bytes | str) -> Any:
    """Parse a request body as strict JSON.

    Raises InvalidJsonError on a syntax error, on undecodable bytes and on
    the NaN/Infinity literals the stdlib parser would otherwise accept.
    """
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError as exc:
        raise InvalidJsonError(str(exc)) from exc


class AdminDataService:
    """Read (soft-checked) and write (hard-validated) access to the documents."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    @property
    def store(self) -> DocumentStore:
        return self._store

    async def read_raw(self, name: str, language: str | None, credential: str | None) -> str:
        """Return the stored JSON text unchanged."""
        verify_credential(credential)
        doc, lang = resolve_document(name, language)
        text = await self._store.read_text(doc, lang)
        file = doc.file_name(lang)
        logger.info("Admin read %s", file)

        try:
            soft_check(doc, json.loads(text), file)
        except json.JSONDecodeError:
            logger.warning("Stored document %s is not valid JSON", file)
        return text

    async def read(self, name: str, language: str | None, credential: str | None) -> Any:
        """Return the stored document parsed, without modification."""
        return json.loads(await self.read_raw(name, language, credential))

    async def write(self, name: str, language: str | None, credential: str | None, body: Any) -> WriteResult:
        """Validate ``body`` and replace the stored document.

        Raises UnauthorizedError, InvalidLanguageError, InvalidNameError,
        InvalidBodyError or SchemaValidationError before touching the disk.
        """
        verify_credential(credential)
        doc, lang = resolve_document(name, language)
        if not isinstance(body, dict | list):
            raise InvalidBodyError()
        validate_document(doc, body)

        path = await self._store.write(doc, lang, body)
        logger.info("Admin write %s", path.name)
        return WriteResult(file=path.name)

    async def write_raw(
        self, name: str, language: str | None, credential: str | None, raw: bytes | str
    ) -> WriteResult:
        """Like ``write`` but parses the body; auth and identity are checked first."""
        verify_credential(credential)
        resolve_document(name, language)
        return await self.write(name, language, credential, decode_body(raw))


# Module-level singleton
admin_service = AdminDataService(
    DocumentStore(settings.storage.data_dir, settings.storage.backup_dir),
)


def get_admin_service() -> AdminDataService:
    """FastAPI dependency — overridable in tests."""
    return admin_service

"""Schema checks for admin documents.

Both paths use the same pydantic models from ``schemas.catalog``:
- ``validate_document`` is the write gate and raises on any issue.
- ``soft_check`` is used on read; it only logs, so stale or legacy
  documents stay readable for recovery.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from pricecatalog.errors import SchemaValidationError, ValidationIssue
from pricecatalog.schemas.catalog import DOCUMENT_SCHEMAS, DocumentName

logger = logging.getLogger(__name__)


def collect_issues(name: DocumentName, body: Any) -> list[ValidationIssue]:
    """Validate ``body`` against the schema for ``name`` and list every issue."""
    schema = DOCUMENT_SCHEMAS[name]
    try:
        schema.model_validate(body)
    except ValidationError as exc:
        return [
            ValidationIssue(path=list(err["loc"]), message=err["msg"])
            for err in exc.errors(include_url=False)
        ]
    return []


def validate_document(name: DocumentName, body: Any) -> None:
    """Raise SchemaValidationError carrying all issues if ``body`` is invalid."""
    issues = collect_issues(name, body)
    if issues:
        raise SchemaValidationError(issues)


def soft_check(name: DocumentName, body: Any, file: str) -> list[ValidationIssue]:
    """Log a warning for an invalid stored document without blocking."""
    issues = collect_issues(name, body)
    if issues:
        logger.warning(
            "Stored document %s does not match the %s schema (%d issues, first: %s: %s)",
            file,
            name.value,
            len(issues),
            issues[0].dotted_path(),
            issues[0].message,
        )
    return issues

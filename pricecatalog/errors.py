"""Exception hierarchy for catalog loading and the admin data service.

The HTTP layer maps each class to a status code; nothing below imports FastAPI.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel


class ValidationIssue(BaseModel):
    """One schema violation: where it is and what is wrong."""

    path: list[str | int]
    message: str

    def dotted_path(self) -> str:
        return ".".join(str(p) for p in self.path) or "(root)"


class CatalogError(Exception):
    """Base class for all domain errors."""


class UnauthorizedError(CatalogError):
    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class InvalidRequestError(CatalogError):
    """Malformed request: bad name, language, or body."""


class InvalidNameError(InvalidRequestError):
    def __init__(self, name: str) -> None:
        super().__init__("invalid name")
        self.name = name


class InvalidLanguageError(InvalidRequestError):
    def __init__(self, language: str | None) -> None:
        super().__init__("missing or invalid lang. use ?lang=de|en")
        self.language = language


class InvalidJsonError(InvalidRequestError):
    def __init__(self, detail: str) -> None:
        super().__init__("invalid json")
        self.detail = detail


class InvalidBodyError(InvalidRequestError):
    def __init__(self, message: str = "body must be a JSON object or array") -> None:
        super().__init__(message)


class SchemaValidationError(CatalogError):
    """Body failed schema validation. Carries every issue, not just the first."""

    def __init__(self, issues: Sequence[ValidationIssue]) -> None:
        super().__init__("schema validation failed")
        self.issues = list(issues)


class DocumentNotFoundError(CatalogError):
    def __init__(self, file: str) -> None:
        super().__init__("file not found")
        self.file = file


class CatalogNotFoundError(CatalogError):
    """No language candidate of a catalog resource could be loaded."""

    def __init__(self, candidates: Sequence[str]) -> None:
        self.candidates = list(candidates)
        super().__init__(f"None of the resources could be loaded: {', '.join(self.candidates)}")

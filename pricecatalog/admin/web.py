"""Admin data API — FastAPI router for reading and writing catalog documents.

Endpoints:
    GET /api/health                      credential check
    GET /api/file/{name}?lang=de|en      raw stored JSON
    PUT /api/file/{name}?lang=de|en      validated replace with backup

All routes require ``Authorization: Bearer <ADMIN_PASSWORD>``. Errors use
the shape ``{"error": ..., ...}`` rather than FastAPI's ``detail``.
"""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, Response

from pricecatalog.admin.auth import bearer_credential, verify_credential
from pricecatalog.admin.service import AdminDataService, get_admin_service
from pricecatalog.errors import (
    CatalogError,
    DocumentNotFoundError,
    InvalidJsonError,
    InvalidRequestError,
    SchemaValidationError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["admin"])


def _error_response(exc: CatalogError) -> JSONResponse:
    """Map a domain error to its HTTP status and JSON body."""
    if isinstance(exc, UnauthorizedError):
        return JSONResponse({"error": str(exc)}, status_code=401)
    if isinstance(exc, SchemaValidationError):
        return JSONResponse(
            {"error": str(exc), "details": [issue.model_dump() for issue in exc.issues]},
            status_code=400,
        )
    if isinstance(exc, InvalidJsonError):
        return JSONResponse({"error": str(exc), "detail": exc.detail}, status_code=400)
    if isinstance(exc, InvalidRequestError):
        return JSONResponse({"error": str(exc)}, status_code=400)
    if isinstance(exc, DocumentNotFoundError):
        return JSONResponse({"error": str(exc), "file": exc.file}, status_code=404)
    logger.error("Unmapped catalog error: %s", exc)
    return JSONResponse({"error": str(exc)}, status_code=500)


@router.get("/health")
async def health(credential: str | None = Depends(bearer_credential)) -> JSONResponse:
    """Credential check used by the editor's login."""
    try:
        verify_credential(credential)
    except UnauthorizedError as exc:
        return _error_response(exc)
    return JSONResponse({"ok": True})


@router.get("/file/{name}")
async def read_file(
    name: str,
    lang: str | None = Query(None),
    credential: str | None = Depends(bearer_credential),
    service: AdminDataService = Depends(get_admin_service),
) -> Response:
    """Return the stored document text as-is."""
    try:
        raw = await service.read_raw(name, lang, credential)
    except CatalogError as exc:
        return _error_response(exc)
    except OSError as exc:
        logger.exception("Reading %s (%s) failed", name, lang)
        return JSONResponse({"error": str(exc)}, status_code=500)
    return Response(content=raw, media_type="application/json")


@router.put("/file/{name}")
async def write_file(
    request: Request,
    name: str,
    lang: str | None = Query(None),
    credential: str | None = Depends(bearer_credential),
    service: AdminDataService = Depends(get_admin_service),
) -> JSONResponse:
    """Validate the body and replace the stored document."""
    raw = await request.body()
    try:
        result = await service.write_raw(name, lang, credential, raw)
    except CatalogError as exc:
        return _error_response(exc)
    except OSError as exc:
        logger.exception("Writing %s (%s) failed", name, lang)
        return JSONResponse({"error": str(exc)}, status_code=500)
    return JSONResponse(result.model_dump())

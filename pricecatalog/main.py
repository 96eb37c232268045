"""FastAPI application entry point — admin data API plus static catalog files.

Usage:
    python -m pricecatalog.main

Serves /api/* for the admin editor and, if enabled, the data directory under
/data so browsers and the catalog loader can fetch pricelist.de.json etc.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from pricecatalog.admin.web import router as admin_router
from pricecatalog.config import settings

# ── Logging setup ────────────────────────────────────────────────────

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    stream=sys.stdout,
)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = logging.getLogger(__name__)

# ── FastAPI lifespan ─────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle."""
    logger.info("Starting price catalog (env=%s)", settings.environment)
    logger.info("Data dir: %s", settings.storage.data_dir.resolve())
    logger.info("Backup dir: %s", settings.storage.backup_dir.resolve())

    # Never log the password itself
    source = "default" if settings.admin.uses_default_password else "environment"
    logger.info(
        "ADMIN_PASSWORD source: %s (length %d)",
        source,
        len(settings.admin.admin_password),
    )
    if settings.admin.uses_default_password:
        logger.warning("ADMIN_PASSWORD is the default placeholder — set it for any non-development deployment")
        if settings.is_production:
            logger.error("Running in production with the default admin password")

    yield

    logger.info("Price catalog shutdown complete")


# ── FastAPI app ──────────────────────────────────────────────────────


def create_app() -> FastAPI:
    """Build the application with the admin router and optional static data."""
    app = FastAPI(
        title="Price Catalog API",
        description="Machine and labor price catalog with a JSON admin API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "PUT"],
        allow_headers=["Authorization", "Content-Type"],
    )
    app.include_router(admin_router)

    if settings.catalog.serve_catalog_files:
        app.mount(
            "/data",
            StaticFiles(directory=settings.storage.data_dir, check_dir=False),
            name="data",
        )
    return app


app = create_app()


# ── Entry point ──────────────────────────────────────────────────────

if __name__ == "__main__":
    uvicorn.run(
        "pricecatalog.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )

"""Application configuration via pydantic-settings.

Values are loaded from environment variables (.env file).
Settings are organized into logical groups and composed into a single Settings object.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Known weak placeholder. Any non-development deployment must override it.
DEFAULT_ADMIN_PASSWORD = "admin"


class AdminSettings(BaseSettings):
    """Shared admin credential for the data-editing API."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    admin_password: str = Field(
        default=DEFAULT_ADMIN_PASSWORD,
        description="Bearer secret for /api/* (ADMIN_PASSWORD)",
    )

    @property
    def uses_default_password(self) -> bool:
        return self.admin_password == DEFAULT_ADMIN_PASSWORD


class StorageSettings(BaseSettings):
    """Where the per-language JSON documents and their backups live."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    data_dir: Path = Field(default=Path("public/data"), description="Directory holding {name}.{lang}.json")
    backup_dir: Path = Field(default=Path("backups"), description="Archive for pre-write snapshots")


class CatalogSettings(BaseSettings):
    """Catalog loader settings (language-scoped JSON resources over HTTP)."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    catalog_base_url: str = Field(
        default="http://localhost:5174/data",
        description="Base URL the catalog resources are fetched from",
    )
    default_language: str = Field(default="de")
    fallback_language: str = Field(default="de")
    fetch_timeout: float = Field(default=10.0, description="Catalog fetch timeout in seconds")
    serve_catalog_files: bool = Field(
        default=True,
        description="Mount the data directory read-only under /data",
    )


class Settings(BaseSettings):
    """Root settings composing all sub-settings.

    Usage:
        settings = Settings()
        settings.admin.admin_password
        settings.storage.data_dir
        settings.catalog.fallback_language
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5174)
    cors_origins: list[str] = Field(default=["*"], description="Origins allowed to call /api/*")

    # Composed settings (loaded from same .env)
    admin: AdminSettings = Field(default_factory=AdminSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            msg = f"Invalid log level: {v}. Must be one of {valid}"
            raise ValueError(msg)
        return upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


# Module-level singleton, import this wherever settings are needed.
settings = Settings()

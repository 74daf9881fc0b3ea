"""Application configuration using Pydantic Settings."""

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


DEFAULT_ALLOWED_LOGO_TYPES = [
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str
    """PostgreSQL connection URL (asyncpg driver)."""

    database_auto_create: bool = False
    """Create missing tables at startup instead of relying on Alembic."""

    # Redis
    redis_url: str = "redis://localhost:6379/0"
    """Redis connection URL for the client snapshot cache."""

    client_cache_prefix: str = "client:"
    """Key prefix for cached client snapshots."""

    client_cache_ttl_seconds: int | None = None
    """Expiry for cached client snapshots. Unset keeps entries until evicted."""

    # Logo storage
    s3_bucket: str | None = None
    """S3 bucket for client logos. Takes precedence over logo_storage_url."""

    logo_storage_url: str = "/tmp/client-logos"
    """Storage URL for client logos (file://, s3://, gs://, or local)."""

    logo_public_base_url: str | None = None
    """Public base URL that logo keys are appended to (CDN or custom domain)."""

    max_logo_bytes: int = 5 * 1024 * 1024
    """Maximum logo upload size in bytes."""

    # NoDecode prevents pydantic-settings from forcing JSON parsing at the
    # env-source layer, so we can accept either JSON arrays or CSV strings.
    allowed_logo_types: Annotated[list[str], NoDecode] = DEFAULT_ALLOWED_LOGO_TYPES
    """Allowed content types for logo uploads."""

    # Error Tracking
    sentry_dsn: str | None = None
    """Sentry DSN for error tracking. Optional."""

    # Environment
    environment: str = "development"
    """Current environment (development, staging, production)."""

    debug: bool = False
    """Enable debug mode."""

    log_format: str | None = None
    """Logging format override (json or console). Defaults by environment."""

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    @property
    def logo_base_url(self) -> str:
        """Storage URL logos are written under."""
        if self.s3_bucket:
            return f"s3://{self.s3_bucket}"
        return self.logo_storage_url

    @field_validator("allowed_logo_types", mode="before")
    @classmethod
    def parse_allowed_logo_types(cls, value: object) -> list[str]:
        """Parse allowed logo types from JSON array, CSV, or list."""
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return DEFAULT_ALLOWED_LOGO_TYPES.copy()

            try:
                decoded = json.loads(text)
            except json.JSONDecodeError:
                decoded = None

            if isinstance(decoded, list):
                return _normalize_content_types(decoded)
            if isinstance(decoded, str):
                text = decoded
            elif decoded is not None:
                raise ValueError(
                    "ALLOWED_LOGO_TYPES must be a JSON array or comma-separated string."
                )

            # Fallback: comma-separated values
            parsed = [item.strip() for item in text.split(",")]
            return _normalize_content_types(parsed)

        if isinstance(value, (list, tuple, set)):
            return _normalize_content_types(value)

        raise ValueError("ALLOWED_LOGO_TYPES must be a string, list, tuple, or set.")

    @field_validator("client_cache_ttl_seconds")
    @classmethod
    def check_cache_ttl(cls, value: int | None) -> int | None:
        """Reject non-positive TTLs; use None for no expiry."""
        if value is not None and value <= 0:
            raise ValueError("CLIENT_CACHE_TTL_SECONDS must be positive when set.")
        return value


def _normalize_content_types(values: Iterable[object]) -> list[str]:
    """Normalize and dedupe content types while preserving declaration order."""
    normalized: list[str] = []
    seen: set[str] = set()
    for raw_item in values:
        item = str(raw_item).strip().strip("'").strip('"')
        if not item:
            continue
        item = item.lower()
        if item in seen:
            continue
        normalized.append(item)
        seen.add(item)

    if not normalized:
        return DEFAULT_ALLOWED_LOGO_TYPES.copy()
    return normalized


try:
    settings = Settings()
except Exception as exc:
    env_file = Path(".env")
    root_error = str(exc)
    suggestions = [
        "Ensure DATABASE_URL is set.",
        "Allowed values for ALLOWED_LOGO_TYPES are:",
        '  1) ["image/jpeg","image/png"]',
        "  2) image/jpeg,image/png",
    ]

    raise RuntimeError(
        "Failed to initialize application settings. "
        f"Check environment variables in {env_file.resolve() if env_file.exists() else '.env'}.\n"
        + f"Error: {root_error}\n"
        + "\n".join(suggestions)
    ) from exc

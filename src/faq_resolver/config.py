"""Centralized configuration for faq-resolver using Pydantic Settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``FAQ_``-prefixed environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FAQ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Storage
    database_path: Path = Field(default=Path("faq.sqlite"), description="SQLite database holding FAQ entries")
    busy_timeout_ms: int = Field(default=30000, ge=0, description="SQLite busy timeout in milliseconds")

    # Resolution
    fuzzy_threshold: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Similarity a fuzzy candidate must strictly exceed to be accepted",
    )
    lookup_separator: str = Field(
        default="|",
        description="Only the text before the first occurrence of this token is used as the lookup key",
    )
    suggestion_limit: int = Field(default=25, ge=1, description="Maximum autocomplete suggestions returned")

    # Cache
    cache_lock_timeout: float = Field(
        default=5.0,
        gt=0.0,
        description="Seconds to wait for the title index guard before raising CacheUnavailableError",
    )

    # Logging / tracing
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")
    tracing_enabled: bool = Field(default=False, description="Install an OpenTelemetry tracer provider")
    service_name: str = Field(default="faq-resolver", description="Service name reported in traces")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in {"debug", "info", "warning", "error", "critical"}:
            raise ValueError(f"Unsupported log level: {value!r}")
        return normalized

"""Centralized configuration for filesearch using Pydantic Settings."""

import codecs
import os
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


MIB = 1024 * 1024


def _host_parallelism() -> int:
    return os.cpu_count() or 1


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``FILESEARCH_*`` environment variables.

    These are the knobs that stay fixed for a whole run; the per-call inputs
    (root, term, worker count, case mode) live on ``SearchConfiguration``.
    """

    model_config = SettingsConfigDict(
        env_prefix="FILESEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Scanning
    max_file_size_bytes: int = Field(
        default=200 * MIB, ge=0, description="Files larger than this are skipped without being reported"
    )
    encoding: str = Field(default="utf-8", description="Text encoding used to decode every scanned file")

    # Worker pool
    default_workers: int = Field(
        default_factory=_host_parallelism, ge=1, description="Worker threads used when the caller gives none"
    )
    shutdown_grace_seconds: float = Field(
        default=60.0, gt=0, description="Seconds to wait for pool teardown before forcing shutdown"
    )
    join_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Optional bound on waiting for all scan tasks; unset waits for every task",
    )

    # Progress and presentation
    progress_interval: int = Field(default=50, ge=1, description="Emit a progress line every N completed files")
    display_limit: int = Field(default=200, ge=0, description="Maximum match lines printed by the CLI")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=False, description="Emit structured JSON log lines")

    # Telemetry
    service_name: str = Field(default="filesearch", description="OpenTelemetry service.name resource attribute")
    trace_console: bool = Field(default=False, description="Export finished spans to stderr")
    metrics_file: Path | None = Field(
        default=None, description="Write the Prometheus exposition of this run to this file on exit"
    )

    @field_validator("encoding")
    @classmethod
    def _check_encoding(cls, value: str) -> str:
        try:
            return codecs.lookup(value).name
        except LookupError as exc:
            raise ValueError(f"Unknown text encoding: {value!r}") from exc

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        if value.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value!r}")
        return value.lower()

    @property
    def max_file_size_mib(self) -> float:
        return self.max_file_size_bytes / MIB


def get_settings() -> Settings:
    """Load settings from the current environment."""
    return Settings()  # type: ignore[call-arg]

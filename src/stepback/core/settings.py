"""Environment-driven settings for stepback.

Every knob the command line exposes can also come from ``STEPBACK_*``
environment variables or a ``.env`` file, so CI jobs can configure runs
without long command lines.

Examples:
    >>> from stepback.core.settings import StepbackSettings
    >>> settings = StepbackSettings(rollback_on_failure=False)
    >>> settings.rollback_on_failure
    False

Tags:
    settings, configuration, pydantic, environment, stepback

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class StepbackSettings(BaseSettings):
    """Settings for migration runs.

    Fields
    ──────
    rollback_on_failure : Undo already-applied steps when one fails
    migrations_dir      : Directory relative migration file names resolve against
    catalog             : ``module:attribute`` import string of the method catalog
    log_level           : Structlog log level
    json_logs           : Force JSON (True) or console (False) logs; None auto-detects
    channel_maxsize     : Progress channel capacity; 0 means unbounded
    """

    model_config = SettingsConfigDict(
        env_prefix="STEPBACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Execution ────────────────────────────────────────────────
    rollback_on_failure: bool = False
    migrations_dir: Path = Field(
        default_factory=lambda: Path("migrations"),
        description="Directory holding migration files",
    )
    catalog: str | None = None

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None
    channel_maxsize: int = Field(default=0, ge=0)

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @field_validator("catalog")
    @classmethod
    def _check_catalog_reference(cls, value: str | None) -> str | None:
        if value is not None and ":" not in value:
            raise ValueError("catalog must look like 'package.module:attribute'")
        return value

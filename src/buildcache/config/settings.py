# src/buildcache/config/settings.py - v1
"""Typed configuration loaded from the environment and .env via pydantic-settings.

Single source of truth for the cache location, build mode, graph provider
and logging options. The cache directory honours the classic ``CACHE``
variable as well as ``CACHE_DIR``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CACHE_DIR = Path("~/buildcache")


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_ignore_empty=True,
    )

    # === Cache ===
    cache_dir: Path = Field(
        default=DEFAULT_CACHE_DIR,
        validation_alias=AliasChoices("cache_dir", "CACHE"),
    )

    # === Fingerprinting ===
    build_mode: Literal["default", "race"] = "default"
    fingerprint_algorithm: Literal["sha1", "sha256"] = "sha1"

    # === Unit graph provider ===
    graph_provider: Literal["go", "manifest"] = "go"
    go_binary: str = "go"
    manifest_path: Path | None = None
    include_tests: bool = True

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("cache_dir", mode="before")
    @classmethod
    def default_empty_cache_dir(cls, v: object) -> object:  # noqa: N805
        """An empty cache directory means unset, as for an exported empty CACHE."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_CACHE_DIR
        return v

    @field_validator("log_retention")
    @classmethod
    def validate_log_retention(cls, v: int) -> int:  # noqa: N805
        """Rotated log backups must be non-negative."""
        if v < 0:
            raise ValueError("log_retention must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        if self.graph_provider == "manifest" and self.manifest_path is None:
            raise ConfigurationError(
                "GRAPH_PROVIDER=manifest requires MANIFEST_PATH"
            )
        return self

    # --- Helpers ---

    @property
    def resolved_cache_dir(self) -> Path:
        """Cache directory with ``~`` expanded."""
        return self.cache_dir.expanduser()


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment with optional overrides.

    Args:
        **overrides: Field-level overrides (CLI flags or tests).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]

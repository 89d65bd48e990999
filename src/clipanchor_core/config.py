"""
Configuration Management for ClipAnchor.

Provides centralized, type-safe configuration loading using Pydantic Settings.
Supports environment variables, .env files, and sensible defaults for zero-config operation.

Copyright (c) 2025 Goncharenko Anton aka alienxs2
License: MIT
"""

from pathlib import Path
from typing import Any, Dict

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClipAnchorSettings(BaseSettings):
    """
    Centralized configuration for the ClipAnchor system.

    Configuration is loaded with the following priority (highest to lowest):
    1. System environment variables (prefixed with CLIPANCHOR_)
    2. .env file in the working directory
    3. Hardcoded default values

    The continuity thresholds are policy constants chosen empirically; they are
    exposed here so deployments with unusually short or long blocks can tune them.

    Example:
        ```python
        from clipanchor_core.config import settings

        print(settings.prefix_length)  # 32
        print(settings.continuity_min_ratio)  # 0.6
        ```
    """

    # ========================================
    # ANCHOR CONFIGURATION
    # ========================================

    prefix_length: int = Field(
        default=32, ge=4, le=256, description="Normalized characters kept as passage prefix"
    )

    min_passage_length: int = Field(
        default=3, ge=1, le=100, description="Shortest passage that produces a snippet"
    )

    max_passage_length: int = Field(
        default=10_000,
        ge=100,
        le=1_000_000,
        description="Passages longer than this are truncated at capture time",
    )

    # ========================================
    # CONTINUITY CONFIGURATION
    # ========================================

    continuity_min_shared: int = Field(
        default=3, ge=1, le=100, description="Minimum fingerprints shared by both snapshots"
    )

    continuity_min_ratio: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Minimum shared fraction of the smaller snapshot",
    )

    continuity_sample_size: int = Field(
        default=10, ge=1, le=1000, description="Blocks sampled from each snapshot"
    )

    # ========================================
    # POLLING CONFIGURATION
    # ========================================

    poll_interval_seconds: float = Field(
        default=0.5, gt=0.0, le=60.0, description="Delay between resolve attempts"
    )

    poll_max_attempts: int = Field(
        default=20, ge=1, le=1000, description="Resolve attempts before giving up"
    )

    # ========================================
    # STORAGE CONFIGURATION
    # ========================================

    store_path: Path = Field(
        default=Path("./data/snippets.json"), description="JSON key-value store location"
    )

    # ========================================
    # LOGGING CONFIGURATION
    # ========================================

    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_format: str = Field(default="json", description="Log format (json, console)")

    # ========================================
    # VALIDATORS
    # ========================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Validate log level is one of allowed values.

        Raises:
            ValueError: If log level not in allowed values
        """
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of {allowed}, got '{v}'")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """
        Validate log format is one of allowed values.

        Raises:
            ValueError: If log format not in allowed values
        """
        allowed = ["json", "console"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"log_format must be one of {allowed}, got '{v}'")
        return v_lower

    # ========================================
    # COMPUTED PROPERTIES
    # ========================================

    @property
    def is_development(self) -> bool:
        """True if log_level is DEBUG."""
        return self.log_level == "DEBUG"

    model_config = SettingsConfigDict(
        env_prefix="CLIPANCHOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_assignment=True,
        extra="forbid",
    )


def get_config_summary(settings: ClipAnchorSettings) -> Dict[str, Any]:
    """
    Get configuration summary for logging/debugging.

    Args:
        settings: ClipAnchorSettings instance

    Returns:
        Configuration summary grouped by category
    """
    return {
        "anchors": {
            "prefix_length": settings.prefix_length,
            "min_passage_length": settings.min_passage_length,
            "max_passage_length": settings.max_passage_length,
        },
        "continuity": {
            "min_shared": settings.continuity_min_shared,
            "min_ratio": settings.continuity_min_ratio,
            "sample_size": settings.continuity_sample_size,
        },
        "polling": {
            "interval_seconds": settings.poll_interval_seconds,
            "max_attempts": settings.poll_max_attempts,
        },
        "storage": {
            "store_path": str(settings.store_path),
        },
        "logging": {
            "level": settings.log_level,
            "format": settings.log_format,
        },
    }


# Singleton instance - instantiated once at module import
settings = ClipAnchorSettings()

"""Configuration management for the statcraft rules engine.

This module provides centralized configuration management using
pydantic-settings, supporting environment variables, .env files, and
runtime overrides. Settings are turned into an immutable RuleSet by
``statcraft.engine.rules.RuleSet.from_settings``.

Example:
    >>> from statcraft.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.rules.grouping_scale
    0.25

Environment Variables:
    STATCRAFT_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    STATCRAFT_JSON_LOGS: Emit JSON log lines instead of console output
    STATCRAFT_RULES_FATIGUE_RULE: 'ignore' (current) or 'subtract_dice' (legacy)
    STATCRAFT_RULES_GROUPING_SCALE: Constant term of the grouping fold
    STATCRAFT_RULES_PLAUSIBILITY_TOLERANCE: Accepted gap for precomputed values
    STATCRAFT_RULES_MAX_CHAIN_LENGTH: Hard stop for trigger chains
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from statcraft.core.constants import (
    DEFAULT_GROUPING_SCALE,
    DEFAULT_MAX_CHAIN_LENGTH,
    DEFAULT_PLAUSIBILITY_TOLERANCE,
)
from statcraft.core.exceptions import ConfigurationError


class RuleSettings(BaseSettings):
    """Tunable parameters of the rule set.

    Attributes:
        fatigue_rule: Whether fatigue is ignored or subtracted from dice attributes.
        grouping_scale: Constant term of the grouping fold.
        plausibility_tolerance: Accepted gap between precomputed and local values.
        max_chain_length: Hard stop for trigger chains.
    """

    model_config = SettingsConfigDict(
        env_prefix="STATCRAFT_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    fatigue_rule: Literal["ignore", "subtract_dice"] = Field(
        default="ignore",
        description="Fatigue rule version",
    )
    grouping_scale: float = Field(
        default=DEFAULT_GROUPING_SCALE,
        gt=0,
        le=1,
        description="Constant term of the grouping fold",
    )
    plausibility_tolerance: float = Field(
        default=DEFAULT_PLAUSIBILITY_TOLERANCE,
        ge=0,
        description="Accepted gap between a precomputed and a local grouped value",
    )
    max_chain_length: int = Field(
        default=DEFAULT_MAX_CHAIN_LENGTH,
        ge=1,
        le=256,
        description="Maximum number of actions in one trigger chain",
    )


class Settings(BaseSettings):
    """Main application settings.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        json_logs: Emit JSON log lines.
        rules: Rule set parameters.
    """

    model_config = SettingsConfigDict(
        env_prefix="STATCRAFT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="statcraft",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Emit JSON log lines",
    )

    rules: RuleSettings = Field(default_factory=RuleSettings)

    @model_validator(mode="after")
    def validate_debug_logging(self) -> "Settings":
        """Debug mode must not silence warnings.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If debug is on but the log level hides warnings.
        """
        if self.debug and self.log_level in ("ERROR", "CRITICAL"):
            raise ConfigurationError(
                f"debug mode requires log_level WARNING or lower, got {self.log_level}",
                config_key="log_level",
            )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production mode.

        Returns:
            True if not in debug mode.
        """
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "RuleSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]

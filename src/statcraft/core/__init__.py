"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        StatcraftError: Base exception for all application errors.
        ConfigurationError: Configuration-related errors.
        ValidationError: Structurally invalid input.

    Configuration:
        Settings: Main application settings class.
        RuleSettings: Tunable rule-set parameters.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
        action_context: Tag the entries of one action test.
"""

from __future__ import annotations

from statcraft.core.config import (
    RuleSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from statcraft.core.exceptions import (
    ActionTestError,
    CatalogLoadError,
    ConfigurationError,
    DiceRollError,
    EngineError,
    RecordNotFoundError,
    ResolutionError,
    StatcraftError,
    StorageError,
    ValidationError,
)
from statcraft.core.logging import (
    action_context,
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "StatcraftError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Engine exceptions
    "EngineError",
    "ResolutionError",
    "ActionTestError",
    "DiceRollError",
    # Storage exceptions
    "StorageError",
    "RecordNotFoundError",
    "CatalogLoadError",
    # Configuration
    "Settings",
    "RuleSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
    "action_context",
]

"""Custom exception hierarchy for the statcraft rules engine.

All exceptions inherit from StatcraftError, enabling unified error handling
at the application boundary while preserving domain-specific context.

The engine fails open on classification and lookup problems (unknown
attributes, missing records, malformed dice) and only raises for
structurally invalid input or configuration.

Example:
    >>> from statcraft.core.exceptions import ResolutionError
    >>> raise ResolutionError("Attribute name is empty", entity_id="char-1")
"""

from __future__ import annotations

from typing import Any


class StatcraftError(Exception):
    """Base exception for all statcraft errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(StatcraftError):
    """Raised when settings or a rule set are invalid.

    This includes duplicate attribute definitions, an empty or unsorted
    difficulty band table, or out-of-range tuning constants.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(StatcraftError):
    """Raised when call input is structurally invalid."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


# =============================================================================
# Engine Domain Exceptions
# =============================================================================


class EngineError(StatcraftError):
    """Base exception for stat resolution and action test errors."""


class ResolutionError(EngineError):
    """Raised when an attribute resolution request cannot be interpreted."""

    def __init__(
        self,
        message: str,
        *,
        attribute_name: str | None = None,
        entity_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize resolution error with attribute context.

        Args:
            message: Human-readable error description.
            attribute_name: The attribute being resolved.
            entity_id: Identifier of the character or object involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if attribute_name:
            combined_details["attribute_name"] = attribute_name
        if entity_id:
            combined_details["entity_id"] = entity_id
        super().__init__(message, details=combined_details)


class ActionTestError(EngineError):
    """Raised when an action test is requested with unusable participants."""

    def __init__(
        self,
        message: str,
        *,
        action_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize action test error with action context.

        Args:
            message: Human-readable error description.
            action_id: Identifier of the action under test.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if action_id:
            combined_details["action_id"] = action_id
        super().__init__(message, details=combined_details)


class DiceRollError(EngineError):
    """Raised when a dice expression cannot be parsed or rolled."""

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


# =============================================================================
# Storage Domain Exceptions
# =============================================================================


class StorageError(StatcraftError):
    """Base exception for record catalog errors."""


class RecordNotFoundError(StorageError):
    """Raised when a record that must exist is missing from the catalog.

    Batch lookups never raise this; only the explicit ``require_*``
    accessors do.
    """

    def __init__(
        self,
        message: str,
        *,
        record_type: str | None = None,
        record_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize not-found error with record context.

        Args:
            message: Human-readable error description.
            record_type: Kind of record (character, item, condition, action).
            record_id: The identifier that was not found.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if record_type:
            combined_details["record_type"] = record_type
        if record_id:
            combined_details["record_id"] = record_id
        super().__init__(message, details=combined_details)


class CatalogLoadError(StorageError):
    """Raised when a record catalog file cannot be read or parsed."""

    def __init__(
        self,
        message: str,
        *,
        source_file: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize catalog load error with source file context.

        Args:
            message: Human-readable error description.
            source_file: Path to the file that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if source_file:
            combined_details["source_file"] = source_file
        super().__init__(message, details=combined_details)


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
]

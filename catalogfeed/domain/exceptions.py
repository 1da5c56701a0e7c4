"""Domain exceptions.

Errors raised while configuring or producing a catalog feed. Pre-flight
validation errors carry the code, message and hint that are sent back to
the caller in place of the feed body.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# State Machine Errors
# ============================================================================


class InvalidStateTransitionError(DomainError):
    """Raised when an invalid state transition is attempted."""

    def __init__(
        self,
        entity_type: str,
        current_state: str,
        target_state: str,
        allowed_transitions: list[str] | None = None,
    ) -> None:
        """Initialize invalid state transition error.

        Args:
            entity_type: Type of entity (e.g., "FeedWriter").
            current_state: Current state of the entity.
            target_state: Attempted target state.
            allowed_transitions: List of allowed target states from current state.
        """
        allowed = allowed_transitions or []
        message = (
            f"Cannot transition {entity_type} "
            f"from '{current_state}' to '{target_state}'. "
            f"Allowed transitions: {allowed}"
        )
        super().__init__(
            message,
            details={
                "entity_type": entity_type,
                "current_state": current_state,
                "target_state": target_state,
                "allowed_transitions": allowed,
            },
        )


# ============================================================================
# Feed Validation Errors
# ============================================================================


class FeedValidationError(DomainError):
    """Base class for pre-flight errors reported instead of a feed.

    Attributes:
        code: Machine-readable error code.
        hint: Help text listing the accepted values.
    """

    code = "ERR_UNKNOWN"

    def __init__(self, message: str, hint: str = "", details: dict[str, Any] | None = None) -> None:
        """Initialize feed validation error.

        Args:
            message: Human-readable error message.
            hint: Help text for the caller.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message, details=details)
        self.hint = hint

    def to_payload(self) -> dict[str, str]:
        """Build the error payload sent in place of the feed.

        Returns:
            Dict with error code, message and hint.
        """
        return {"error": self.code, "message": self.message, "hint": self.hint}


class InvalidCurrencyError(FeedValidationError):
    """Raised when the requested currency is not available in the store."""

    code = "ERR_CURRENCY"

    def __init__(self, currency: str, available: list[str]) -> None:
        """Initialize invalid currency error.

        Args:
            currency: Requested currency code.
            available: Currency codes the store accepts.
        """
        super().__init__(
            "Currency is not valid.",
            hint="Valid values are: " + ", ".join(available),
            details={"currency": currency, "available": available},
        )


class InvalidLanguageError(FeedValidationError):
    """Raised when the requested language is not available in the store."""

    code = "ERR_LANGUAGE"

    def __init__(self, language: str, available: list[str]) -> None:
        """Initialize invalid language error.

        Args:
            language: Requested language code.
            available: Accepted languages formatted as "code (name)".
        """
        super().__init__(
            "Language is not valid.",
            hint="Valid values are: " + ", ".join(available),
            details={"language": language, "available": available},
        )


# ============================================================================
# Configuration Errors
# ============================================================================


class InvalidFeedConfigError(DomainError):
    """Raised when a feed configuration value is out of range."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        """Initialize invalid feed config error.

        Args:
            field: Name of the offending field.
            value: The rejected value.
            reason: Explanation of why the value is invalid.
        """
        super().__init__(
            f"Invalid {field} {value!r}: {reason}",
            details={"field": field, "value": value, "reason": reason},
        )


# ============================================================================
# Category Errors
# ============================================================================


class CyclicCategoryGraphError(DomainError):
    """Raised when category parents form a loop."""

    def __init__(self, cycle: list[int]) -> None:
        """Initialize cyclic category graph error.

        Args:
            cycle: Category IDs along the loop, starting and ending at the same ID.
        """
        super().__init__(
            "Category parents form a cycle: " + " -> ".join(str(c) for c in cycle),
            details={"cycle": cycle},
        )

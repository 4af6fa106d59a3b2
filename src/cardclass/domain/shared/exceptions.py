"""Shared domain exceptions and error codes.

This module defines the base exception hierarchy and error codes for the
entire domain layer. All domain exceptions should inherit from DomainException
so callers (CLI, batch wrapper, an eventual HTTP layer) can report them
uniformly.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable error codes for API clients.

    These codes are part of the public contract. Should not be changed.
    """

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INVALID_CONFIDENCE = "INVALID_CONFIDENCE"
    INVALID_RULE = "INVALID_RULE"

    # Configuration Errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    NO_ACCOUNTS = "NO_ACCOUNTS"
    NO_CONFIRMED_EXAMPLES = "NO_CONFIRMED_EXAMPLES"
    UNKNOWN_MODEL = "UNKNOWN_MODEL"
    MISSING_CREDENTIALS = "MISSING_CREDENTIALS"

    # AI Classification Errors
    AI_TRANSPORT_FAILED = "AI_TRANSPORT_FAILED"
    AI_RESPONSE_UNPARSEABLE = "AI_RESPONSE_UNPARSEABLE"
    AI_ACCOUNT_UNRESOLVED = "AI_ACCOUNT_UNRESOLVED"

    # General Errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class DomainException(Exception):  # NOQA: N818
    """Base exception for all domain-related errors.

    Attributes
    ----------
    message
        Human-readable error message (safe for end users)
    code
        Stable error code for programmatic handling
    details
        Optional additional context for diagnostics
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code.value!r}, "
            f"details={self.details!r})"
        )


class ValidationError(DomainException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)

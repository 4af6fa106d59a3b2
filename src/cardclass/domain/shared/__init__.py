"""Shared domain building blocks."""

from cardclass.domain.shared.exceptions import (
    DomainException,
    ErrorCode,
    ValidationError,
)

__all__ = [
    "DomainException",
    "ErrorCode",
    "ValidationError",
]

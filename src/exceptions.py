# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Typed errors raised by the vacation engine.

Errors are grouped by category rather than by exception class. The HTTP layer
maps a category to a status code; callers that need finer control switch on
the error code.
"""

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error category enumeration."""

    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    INTERNAL = "internal"


class ErrorCode(str, Enum):
    """Error codes surfaced to callers."""

    # Validation
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    DATE_IN_PAST = "DATE_IN_PAST"

    # Business rules
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    REQUEST_ALREADY_PROCESSED = "REQUEST_ALREADY_PROCESSED"
    CANNOT_CANCEL_APPROVED = "CANNOT_CANCEL_APPROVED"
    CANNOT_CANCEL_REJECTED = "CANNOT_CANCEL_REJECTED"
    OVERLAPPING_REQUEST = "OVERLAPPING_REQUEST"

    # Resources
    REQUEST_NOT_FOUND = "REQUEST_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # Authorization
    FORBIDDEN = "FORBIDDEN"

    # Storage
    INTERNAL_ERROR = "INTERNAL_ERROR"


ERROR_CATEGORIES: dict[ErrorCode, ErrorCategory] = {
    ErrorCode.VALIDATION_ERROR: ErrorCategory.VALIDATION,
    ErrorCode.INVALID_DATE_RANGE: ErrorCategory.VALIDATION,
    ErrorCode.DATE_IN_PAST: ErrorCategory.VALIDATION,
    ErrorCode.INSUFFICIENT_BALANCE: ErrorCategory.BUSINESS_RULE,
    ErrorCode.REQUEST_ALREADY_PROCESSED: ErrorCategory.BUSINESS_RULE,
    ErrorCode.CANNOT_CANCEL_APPROVED: ErrorCategory.BUSINESS_RULE,
    ErrorCode.CANNOT_CANCEL_REJECTED: ErrorCategory.BUSINESS_RULE,
    ErrorCode.OVERLAPPING_REQUEST: ErrorCategory.BUSINESS_RULE,
    ErrorCode.REQUEST_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ErrorCode.FORBIDDEN: ErrorCategory.FORBIDDEN,
    ErrorCode.INTERNAL_ERROR: ErrorCategory.INTERNAL,
}


class VacationServiceError(Exception):
    """Base exception for vacation engine errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    @property
    def category(self) -> ErrorCategory:
        """Category of this error."""
        return ERROR_CATEGORIES[self.code]

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class StorageError(VacationServiceError):
    """A persistence-layer failure, surfaced as an opaque internal error."""

    def __init__(self, message: str = "An internal error occurred") -> None:
        super().__init__(ErrorCode.INTERNAL_ERROR, message)


def validation_error(message: str) -> VacationServiceError:
    return VacationServiceError(ErrorCode.VALIDATION_ERROR, message)


def insufficient_balance_error(requested: int, available: int) -> VacationServiceError:
    return VacationServiceError(
        ErrorCode.INSUFFICIENT_BALANCE,
        (
            f"Insufficient vacation balance: requested {requested} days, "
            f"available {available} days"
        ),
        {"requested": requested, "available": available},
    )

"""Typed failures raised by the analysis and matching core.

Every error carries a kind (which HTTP status class it belongs to), a stable
machine-readable code and a human message.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    PRECONDITION_FAILED = "PRECONDITION_FAILED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    ACCESS_DENIED = "ACCESS_DENIED"
    PAYMENT_REQUIRED = "PAYMENT_REQUIRED"
    STORAGE_ERROR = "STORAGE_ERROR"


HTTP_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.PRECONDITION_FAILED: 409,
    ErrorKind.VALIDATION_ERROR: 400,
    ErrorKind.ACCESS_DENIED: 403,
    ErrorKind.PAYMENT_REQUIRED: 402,
    ErrorKind.STORAGE_ERROR: 503,
}


class ComplianceError(Exception):
    """Base class for all business-rule and storage failures."""

    kind: ErrorKind = ErrorKind.PRECONDITION_FAILED
    code: str = "COMPLIANCE_ERROR"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]

    def to_detail(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "code": self.code, "message": self.message}


# Not found

class AssessmentNotFound(ComplianceError):
    kind = ErrorKind.NOT_FOUND
    code = "ASSESSMENT_NOT_FOUND"


class GapNotFound(ComplianceError):
    kind = ErrorKind.NOT_FOUND
    code = "GAP_NOT_FOUND"


class VendorNotFound(ComplianceError):
    kind = ErrorKind.NOT_FOUND
    code = "VENDOR_NOT_FOUND"


# Precondition failed

class NoGapsFound(ComplianceError):
    kind = ErrorKind.PRECONDITION_FAILED
    code = "NO_GAPS_FOUND"


class AssessmentAlreadyCompleted(ComplianceError):
    kind = ErrorKind.PRECONDITION_FAILED
    code = "ASSESSMENT_COMPLETED"


class InvalidVendorCount(ComplianceError):
    kind = ErrorKind.PRECONDITION_FAILED
    code = "INVALID_VENDOR_COUNT"


# Validation

class ValidationError(ComplianceError):
    kind = ErrorKind.VALIDATION_ERROR
    code = "VALIDATION_ERROR"


# Access

class AccessDenied(ComplianceError):
    kind = ErrorKind.ACCESS_DENIED
    code = "ACCESS_DENIED"


# Payment required

class InsufficientCredits(ComplianceError):
    kind = ErrorKind.PAYMENT_REQUIRED
    code = "INSUFFICIENT_CREDITS"


class SubscriptionRequired(ComplianceError):
    kind = ErrorKind.PAYMENT_REQUIRED
    code = "SUBSCRIPTION_REQUIRED"


# Storage

class StorageError(ComplianceError):
    """Raised by repositories when the backing store fails."""

    kind = ErrorKind.STORAGE_ERROR
    code = "STORAGE_ERROR"

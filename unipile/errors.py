"""
Error taxonomy for Unipile API calls.

Every failed call surfaces as a single :class:`UnipileError` tagged with an
:class:`~unipile.enums.ErrorCategory`. Handlers branch on ``error.category``
instead of on exception subclasses. Retryability is fixed per category, only
``UNKNOWN`` errors decide it per instance (server errors retry, client errors
do not).
"""

import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from .enums import ErrorCategory
from .models import ErrorContext, ValidationErrorDetail

FIXED_RETRYABILITY = {
    ErrorCategory.TIMEOUT: True,
    ErrorCategory.CONNECTION: True,
    ErrorCategory.RATE_LIMIT: True,
    ErrorCategory.AUTH: False,
    ErrorCategory.VALIDATION: False,
    ErrorCategory.NOT_FOUND: False,
}


class UnipileError(Exception):
    """
    Categorized failure of a Unipile API call.

    Attributes:
        message: Human readable description
        category: The error category
        retryable: Whether the dispatcher may retry the call
        context: Diagnostic details (status code, URL, method, attempt, body, ...)
        resource_type: Resource kind for NOT_FOUND errors, if known
        resource_id: Resource identifier for NOT_FOUND errors, if known
        errors: Per-field details for VALIDATION errors
        reset_at: Server supplied reset deadline for RATE_LIMIT errors
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        context: Optional[ErrorContext] = None,
        retryable: bool = False,
        *,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        errors: Optional[List[ValidationErrorDetail]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = ErrorCategory(category)
        self.context = context or ErrorContext()
        self.retryable = FIXED_RETRYABILITY.get(self.category, retryable)
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.errors: List[ValidationErrorDetail] = list(errors or [])
        self.reset_at: Optional[datetime] = (
            self.context.rate_limit_reset_at if self.category == ErrorCategory.RATE_LIMIT else None
        )

    # Named constructors, one per category

    @classmethod
    def timeout(cls, message: str, context: Optional[ErrorContext] = None) -> "UnipileError":
        return cls(message, ErrorCategory.TIMEOUT, context)

    @classmethod
    def connection(cls, message: str, context: Optional[ErrorContext] = None) -> "UnipileError":
        return cls(message, ErrorCategory.CONNECTION, context)

    @classmethod
    def rate_limit(cls, message: str, context: Optional[ErrorContext] = None) -> "UnipileError":
        return cls(message, ErrorCategory.RATE_LIMIT, context)

    @classmethod
    def auth(cls, message: str, context: Optional[ErrorContext] = None) -> "UnipileError":
        return cls(message, ErrorCategory.AUTH, context)

    @classmethod
    def validation(
        cls,
        message: str,
        errors: Optional[List[ValidationErrorDetail]] = None,
        context: Optional[ErrorContext] = None,
    ) -> "UnipileError":
        return cls(message, ErrorCategory.VALIDATION, context, errors=errors)

    @classmethod
    def not_found(
        cls,
        message: str,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        context: Optional[ErrorContext] = None,
    ) -> "UnipileError":
        return cls(
            message,
            ErrorCategory.NOT_FOUND,
            context,
            resource_type=resource_type,
            resource_id=resource_id,
        )

    @classmethod
    def unknown(
        cls, message: str, context: Optional[ErrorContext] = None, retryable: bool = False
    ) -> "UnipileError":
        return cls(message, ErrorCategory.UNKNOWN, context, retryable)

    @property
    def account_id(self) -> Optional[str]:
        return self.context.account_id

    @property
    def status_code(self) -> Optional[int]:
        return self.context.status_code

    @property
    def retry_after_ms(self) -> float:
        """Milliseconds until the rate limit resets, 0 if passed or unknown"""
        if self.reset_at is None:
            return 0
        return max(0.0, (self.reset_at.timestamp() - time.time()) * 1000)

    def to_dict(self) -> Dict[str, Any]:
        """JSON friendly representation including category specific fields"""
        data: Dict[str, Any] = {
            "category": self.category.value,
            "message": self.message,
            "retryable": self.retryable,
            "context": self.context.model_dump(exclude_none=True, exclude={"cause"}),
        }
        if self.category == ErrorCategory.NOT_FOUND:
            data["resource_type"] = self.resource_type
            data["resource_id"] = self.resource_id
        elif self.category == ErrorCategory.VALIDATION:
            data["errors"] = [detail.model_dump() for detail in self.errors]
        elif self.category == ErrorCategory.RATE_LIMIT:
            data["reset_at"] = self.reset_at.isoformat() if self.reset_at else None
        return data

    def __repr__(self) -> str:
        return f"UnipileError(category={self.category.value!r}, message={self.message!r}, retryable={self.retryable})"

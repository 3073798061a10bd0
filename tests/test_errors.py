from datetime import datetime, timedelta, timezone

import pytest

from unipile.enums import ErrorCategory
from unipile.errors import UnipileError
from unipile.models import ErrorContext, ValidationErrorDetail


@pytest.mark.parametrize(
    "factory, category, retryable",
    [
        (UnipileError.timeout, ErrorCategory.TIMEOUT, True),
        (UnipileError.connection, ErrorCategory.CONNECTION, True),
        (UnipileError.rate_limit, ErrorCategory.RATE_LIMIT, True),
        (UnipileError.auth, ErrorCategory.AUTH, False),
        (UnipileError.validation, ErrorCategory.VALIDATION, False),
        (UnipileError.not_found, ErrorCategory.NOT_FOUND, False),
        (UnipileError.unknown, ErrorCategory.UNKNOWN, False),
    ],
)
def test_category_retryability(factory, category, retryable):
    error = factory("boom")

    assert isinstance(error, Exception)
    assert error.category == category
    assert error.retryable is retryable
    assert error.message == "boom"
    assert str(error) == "boom"


def test_unknown_errors_choose_retryability():
    assert UnipileError.unknown("Server error", retryable=True).retryable is True
    assert UnipileError.unknown("Request failed", retryable=False).retryable is False


def test_fixed_categories_ignore_retryable_argument():
    assert UnipileError("denied", ErrorCategory.AUTH, retryable=True).retryable is False
    assert UnipileError("slow", ErrorCategory.TIMEOUT, retryable=False).retryable is True


def test_context_defaults_and_accessors():
    error = UnipileError.auth("denied", ErrorContext(status_code=401, account_id="acc-1"))

    assert error.status_code == 401
    assert error.account_id == "acc-1"
    assert UnipileError.timeout("slow").context == ErrorContext()


def test_rate_limit_retry_after():
    future = datetime.now(timezone.utc) + timedelta(seconds=30)
    error = UnipileError.rate_limit("slow down", ErrorContext(rate_limit_reset_at=future))

    assert error.reset_at == future
    assert 0 < error.retry_after_ms <= 30000


def test_rate_limit_retry_after_is_zero_when_passed_or_unset():
    past = datetime.now(timezone.utc) - timedelta(seconds=5)

    assert UnipileError.rate_limit("slow down", ErrorContext(rate_limit_reset_at=past)).retry_after_ms == 0
    assert UnipileError.rate_limit("slow down").retry_after_ms == 0


def test_reset_at_only_for_rate_limit_errors():
    future = datetime.now(timezone.utc) + timedelta(seconds=30)
    error = UnipileError.timeout("slow", ErrorContext(rate_limit_reset_at=future))

    assert error.reset_at is None
    assert error.retry_after_ms == 0


def test_not_found_details():
    error = UnipileError.not_found("Resource not found", resource_type="chat", resource_id="chat-1")

    assert error.resource_type == "chat"
    assert error.resource_id == "chat-1"
    assert error.to_dict()["resource_type"] == "chat"
    assert error.to_dict()["resource_id"] == "chat-1"


def test_validation_details():
    assert UnipileError.validation("Validation failed").errors == []

    detail = ValidationErrorDetail(field="subject", message="required")
    error = UnipileError.validation("Validation failed", [detail])

    assert error.errors == [detail]
    assert error.to_dict()["errors"] == [{"field": "subject", "message": "required", "value": None}]


def test_to_dict():
    cause = RuntimeError("socket closed")
    error = UnipileError.connection(
        "Connection failed",
        ErrorContext(url="https://api.test/api/v1/chats", method="GET", retry_attempt=2, cause=cause),
    )

    assert error.to_dict() == {
        "category": "connection",
        "message": "Connection failed",
        "retryable": True,
        "context": {"url": "https://api.test/api/v1/chats", "method": "GET", "retry_attempt": 2},
    }

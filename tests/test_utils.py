from unipile.enums import AccountProvider, ErrorCategory
from unipile.errors import UnipileError
from unipile.utils import build_query, compact, is_rate_limit_error, is_retryable_error, serialize_query_value


def test_compact_drops_only_none():
    """Test that compact keeps falsy values other than None."""
    assert compact(account_id="acc-1", cursor=None, limit=0, unread=False, text="") == {
        "account_id": "acc-1",
        "limit": 0,
        "unread": False,
        "text": "",
    }
    assert compact() == {}


def test_serialize_query_value():
    assert serialize_query_value(True) == "true"
    assert serialize_query_value(False) == "false"
    assert serialize_query_value(25) == "25"
    assert serialize_query_value(AccountProvider.LINKEDIN) == AccountProvider.LINKEDIN.value


def test_build_query_keeps_order_and_skips_none():
    params = {"limit": 10, "cursor": None, "account_id": "acc-1", "unread": True}

    assert build_query(params) == [("limit", "10"), ("account_id", "acc-1"), ("unread", "true")]
    assert build_query(None) == []
    assert build_query({}) == []


def test_is_rate_limit_error():
    """Test that is_rate_limit_error correctly identifies rate limit errors."""
    assert is_rate_limit_error(UnipileError.rate_limit("Rate limit exceeded")) is True
    assert is_rate_limit_error(UnipileError("slow down", ErrorCategory.RATE_LIMIT)) is True

    # Other categories are not rate limits, whatever the message says
    assert is_rate_limit_error(UnipileError.unknown("Rate limit exceeded")) is False
    assert is_rate_limit_error(UnipileError.timeout("Request timed out")) is False

    # Test with HTTP 429 status code directly
    class HTTP429Error(Exception):
        status_code = 429
    assert is_rate_limit_error(HTTP429Error()) is True

    # Test with HTTP 429 status code in response
    class Response:
        def __init__(self):
            self.status_code = 429
    class ErrorWithResponse(Exception):
        def __init__(self):
            self.response = Response()
    assert is_rate_limit_error(ErrorWithResponse()) is True

    # Test with non-rate-limit exceptions
    assert is_rate_limit_error(Exception("Too many requests")) is False
    assert is_rate_limit_error(ValueError()) is False
    assert is_rate_limit_error(RuntimeError()) is False


def test_is_retryable_error():
    assert is_retryable_error(UnipileError.connection("Connection failed")) is True
    assert is_retryable_error(UnipileError.unknown("Server error", retryable=True)) is True
    assert is_retryable_error(UnipileError.validation("Validation failed")) is False
    assert is_retryable_error(ConnectionError("refused")) is False

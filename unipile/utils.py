"""
Request building helpers (optional field compaction, query serialization) and
predicates for classifying errors raised by API calls.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .enums import ErrorCategory
from .errors import UnipileError


def compact(**fields: Any) -> Dict[str, Any]:
    """
    Build a request body or query mapping from keyword arguments, keeping only
    the entries whose value is not None.

    Falsy values other than None (``False``, ``0``, ``""``, ``[]``) are kept.

    Examples:
        ```python
        compact(account_id="acc-1", cursor=None, limit=0)
        # {'account_id': 'acc-1', 'limit': 0}
        ```
    """
    body: Dict[str, Any] = {}
    for key, value in fields.items():
        if value is not None:
            body[key] = value
    return body


def serialize_query_value(value: Any) -> str:
    """Render a query value the way the API expects (booleans as true/false)"""
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query(params: Optional[Mapping[str, Any]]) -> List[Tuple[str, str]]:
    """
    Turn query parameters into ordered (name, value) pairs.

    Parameters whose value is None are omitted entirely. The caller's order is
    preserved.
    """
    if not params:
        return []
    return [(key, serialize_query_value(value)) for key, value in params.items() if value is not None]


def is_rate_limit_error(error: Exception) -> bool:
    """
    Determine if an exception is related to rate limiting.

    This function checks:

    1. The category of a UnipileError
    2. HTTP 429 status code directly on the error
    3. HTTP 429 status code on error.response

    Args:
        error: The exception to check

    Returns:
        True if the error is a rate limit error, False otherwise

    Examples:
        ```python
        try:
            chats = await client.messaging.list_chats(account_id="acc-1")
        except UnipileError as e:
            if is_rate_limit_error(e):
                print(f"Rate limited, retry in {e.retry_after_ms:.0f}ms")
            else:
                raise
        ```
    """
    if isinstance(error, UnipileError):
        return error.category == ErrorCategory.RATE_LIMIT

    # Check for status codes
    if getattr(error, 'status_code', None) == 429:
        return True

    # Check for response attribute with status_code
    response = getattr(error, 'response', None)
    return getattr(response, 'status_code', None) == 429


def is_retryable_error(error: Exception) -> bool:
    """True for UnipileErrors the client would retry"""
    return isinstance(error, UnipileError) and error.retryable

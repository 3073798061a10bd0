import logging
import re
import threading
import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Callable, Dict, List, Mapping, Optional

from .models import (
    RateLimitState,

    # Constants
    DEFAULT_RETRY_BASE_DELAY_MS,
    DEFAULT_RETRY_MAX_DELAY_MS,
)

logger = logging.getLogger(__name__)

# X-RateLimit-Reset values below this are seconds since the epoch, otherwise milliseconds
EPOCH_MILLISECONDS_THRESHOLD = 10_000_000_000

# Leading integer of a header value, parsed the way lenient HTTP clients do
HEADER_INT_PATTERN = re.compile(r'^\s*(-?\d+)')


def _to_datetime(epoch_seconds: float) -> datetime:
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)


class RateLimiter:
    """
    Per-account rate limiter with exponential backoff.

    Each account id gets its own bucket. A bucket tracks consecutive rate limit
    errors, the backoff to apply after them, and an optional reset deadline
    announced by the API. Server deadlines win over the self-managed backoff:
    recording an error with a reset time does not advance the backoff.

    The state map is shared by every concurrent call on the owning client, a
    lock guards each read and mutation.
    """

    def __init__(
        self,
        base_delay_ms: float = DEFAULT_RETRY_BASE_DELAY_MS,
        max_delay_ms: float = DEFAULT_RETRY_MAX_DELAY_MS,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Args:
            base_delay_ms: Starting backoff after the first rate limit error
            max_delay_ms: Ceiling for the doubled backoff
            clock: Returns the current time as seconds since the epoch
        """
        if base_delay_ms <= 0 or max_delay_ms < base_delay_ms:
            raise ValueError("Rate limiter delays must satisfy 0 < base_delay_ms <= max_delay_ms")
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self._clock = clock or time.time
        self._states: Dict[str, RateLimitState] = {}
        self._lock = threading.Lock()

    def _new_state(self) -> RateLimitState:
        return RateLimitState(current_backoff_ms=self.base_delay_ms)

    def _get_or_create(self, account_id: str) -> RateLimitState:
        """Return the bucket for an account, creating it on first use. Caller holds the lock."""
        state = self._states.get(account_id)
        if state is None:
            state = self._new_state()
            self._states[account_id] = state
        return state

    def should_wait(self, account_id: str) -> float:
        """
        How long a request for the account has to wait.

        Returns:
            Milliseconds to wait, 0 if the request may proceed now
        """
        with self._lock:
            state = self._states.get(account_id)
            if state is None:
                return 0

            now = self._clock()

            # Deadline announced by the API
            if state.reset_at is not None:
                wait_ms = (state.reset_at.timestamp() - now) * 1000
                if wait_ms > 0:
                    return wait_ms
                state.reset_at = None

            # Self-managed backoff
            if state.consecutive_errors > 0 and state.last_request_at is not None:
                elapsed_ms = (now - state.last_request_at.timestamp()) * 1000
                wait_ms = state.current_backoff_ms - elapsed_ms
                if wait_ms > 0:
                    return wait_ms

            return 0

    def record_success(self, account_id: str) -> None:
        """Clear error tracking for the account after a successful request"""
        with self._lock:
            state = self._get_or_create(account_id)
            if state.consecutive_errors:
                logger.debug(f"Rate limit state cleared for account {account_id} after {state.consecutive_errors} errors")
            state.consecutive_errors = 0
            state.current_backoff_ms = self.base_delay_ms
            state.reset_at = None
            state.last_request_at = _to_datetime(self._clock())

    def record_rate_limit_error(self, account_id: str, reset_at: Optional[datetime] = None) -> None:
        """
        Record a rate limit error for the account.

        Args:
            account_id: Account bucket
            reset_at: Reset deadline announced by the API. When given it is stored
                as-is and the backoff is left unchanged, otherwise the backoff doubles.
        """
        with self._lock:
            state = self._get_or_create(account_id)
            state.consecutive_errors += 1
            state.last_request_at = _to_datetime(self._clock())

            if reset_at is not None:
                state.reset_at = reset_at
                logger.debug(f"Rate limit for account {account_id} resets at {reset_at.isoformat()}")
            else:
                state.current_backoff_ms = min(state.current_backoff_ms * 2, self.max_delay_ms)
                logger.debug(
                    f"Rate limit backoff for account {account_id} increased to {state.current_backoff_ms:.0f}ms "
                    f"after {state.consecutive_errors} consecutive errors"
                )

    def reset(self, account_id: str) -> None:
        """Forget the state of a single account"""
        with self._lock:
            self._states.pop(account_id, None)
        logger.info(f"Rate limit state reset for account {account_id}")

    def reset_all(self) -> None:
        """Forget the state of every account"""
        with self._lock:
            self._states.clear()
        logger.info("Rate limit state reset for all accounts")

    def get_current_backoff(self, account_id: str) -> float:
        """Current backoff in milliseconds, the base delay for unseen accounts"""
        with self._lock:
            state = self._states.get(account_id)
            return state.current_backoff_ms if state is not None else self.base_delay_ms

    def get_consecutive_errors(self, account_id: str) -> int:
        with self._lock:
            state = self._states.get(account_id)
            return state.consecutive_errors if state is not None else 0

    def get_state(self, account_id: str) -> RateLimitState:
        """Snapshot of an account's state, defaults for unseen accounts"""
        with self._lock:
            state = self._states.get(account_id)
            return state.model_copy() if state is not None else self._new_state()

    @property
    def tracked_accounts(self) -> List[str]:
        with self._lock:
            return list(self._states)

    @staticmethod
    def parse_rate_limit_headers(headers: Mapping[str, str], now: Optional[float] = None) -> Optional[datetime]:
        """
        Extract the rate limit reset time from response headers.

        ``Retry-After`` is tried first, as seconds from now and then as an HTTP
        date. ``X-RateLimit-Reset`` is read as a Unix timestamp in seconds, or in
        milliseconds for values of 10,000,000,000 and above.

        Args:
            headers: Response headers
            now: Current time in seconds since the epoch, defaults to time.time()

        Returns:
            The reset time, or None if no header could be parsed
        """
        if now is None:
            now = time.time()

        # Normalize header keys to lowercase
        headers = {k.lower(): v for k, v in headers.items()}

        retry_after = headers.get('retry-after')
        if retry_after is not None:
            match = HEADER_INT_PATTERN.match(retry_after)
            if match:
                return _to_datetime(now + int(match.group(1)))
            try:
                reset_at = parsedate_to_datetime(retry_after)
            except (TypeError, ValueError, IndexError):
                reset_at = None
            if reset_at is not None:
                if reset_at.tzinfo is None:
                    reset_at = reset_at.replace(tzinfo=timezone.utc)
                return reset_at

        rate_limit_reset = headers.get('x-ratelimit-reset')
        if rate_limit_reset is not None:
            match = HEADER_INT_PATTERN.match(rate_limit_reset)
            if match:
                timestamp = int(match.group(1))
                ms = timestamp if timestamp >= EPOCH_MILLISECONDS_THRESHOLD else timestamp * 1000
                return _to_datetime(ms / 1000)

        return None

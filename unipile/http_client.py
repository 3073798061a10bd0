import asyncio
import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

import httpx

from .enums import ErrorCategory
from .errors import UnipileError
from .models import (
    ErrorContext,
    HttpResponse,
    RequestOptions,
    UnipileConfig,

    # Constants
    GLOBAL_ACCOUNT_ID,
)
from .rate_limiter import RateLimiter
from .utils import build_query

logger = logging.getLogger(__name__)

# Backoff for retryable errors other than rate limits
RETRY_DELAY_UNIT_MS = 1000
MAX_RETRY_DELAY_MS = 30000

# Lowercased fragments of transport error messages that indicate connectivity problems
CONNECTION_ERROR_MARKERS = (
    'econnrefused',
    'enotfound',
    'network',
    'connection refused',
    'connection reset',
    'name or service not known',
    'nodename nor servname',
    'temporary failure in name resolution',
)


def _is_connection_failure(error: BaseException) -> bool:
    if isinstance(error, (httpx.NetworkError, ConnectionError)):
        return True
    message = str(error).lower()
    return any(marker in message for marker in CONNECTION_ERROR_MARKERS)


def _extract_error_message(body: Any, fallback: str) -> str:
    if isinstance(body, dict):
        for key in ('message', 'error', 'error_description'):
            if isinstance(body.get(key), str):
                return body[key]
    return fallback


def _safe_parse_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


class HttpClient:
    """
    Core HTTP client for the Unipile API with rate limiting and retry support.

    For most use cases, use the UnipileClient instead of using this class directly.
    """

    def __init__(
        self,
        config: UnipileConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        """
        Args:
            config: Client configuration
            transport: Optional httpx transport for the internally created client
            http_client: Optional externally managed httpx client, not closed by aclose()
            rate_limiter: Optional rate limiter, one is created from the config otherwise
        """
        self.config = config
        self.base_url = config.base_url
        self._rate_limiter = rate_limiter or RateLimiter(config.retry_base_delay, config.retry_max_delay)
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(transport=transport)

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._rate_limiter

    async def request(self, options: RequestOptions) -> HttpResponse:
        """
        Make a request with rate limiting and retry support.

        Raises:
            UnipileError: When the call fails, after retries for retryable errors
        """
        account_id = options.account_id or GLOBAL_ACCOUNT_ID

        wait_ms = self._rate_limiter.should_wait(account_id)
        if wait_ms > 0:
            if not self.config.enable_retry:
                reset_at = datetime.fromtimestamp(time.time() + wait_ms / 1000, tz=timezone.utc)
                raise UnipileError.rate_limit(
                    f"Rate limit active, retry after {wait_ms:.0f}ms",
                    ErrorContext(account_id=account_id, rate_limit_reset_at=reset_at),
                )
            logger.debug(f"Rate limit active for account {account_id}, waiting {wait_ms:.0f}ms")
            await self._sleep(wait_ms)

        last_error: Optional[UnipileError] = None
        max_attempts = self.config.max_retries if self.config.enable_retry else 1

        for attempt in range(1, max_attempts + 1):
            try:
                response = await self._execute(options, attempt)
            except UnipileError as error:
                last_error = error
                if not error.retryable or attempt >= max_attempts:
                    raise

                if error.category == ErrorCategory.RATE_LIMIT:
                    self._rate_limiter.record_rate_limit_error(account_id, error.reset_at)
                    retry_after = error.retry_after_ms
                    delay_ms = retry_after if retry_after > 0 else self._rate_limiter.get_current_backoff(account_id)
                else:
                    delay_ms = min(RETRY_DELAY_UNIT_MS * 2 ** (attempt - 1), MAX_RETRY_DELAY_MS)

                logger.warning(
                    f"{error.category.value} error on {options.method} {options.path} "
                    f"(attempt {attempt}/{max_attempts}): {error.message}. Retrying in {delay_ms:.0f}ms"
                )
                await self._sleep(delay_ms)
                continue

            self._rate_limiter.record_success(account_id)
            return response

        raise last_error or UnipileError.unknown(
            "Request failed after retries", ErrorContext(account_id=account_id)
        )

    async def _execute(self, options: RequestOptions, attempt: int) -> HttpResponse:
        """Execute a single attempt and convert the outcome to a response or UnipileError"""
        url = self.build_url(options.path, options.params)
        timeout_ms = options.timeout or self.config.timeout
        headers = {
            'X-API-KEY': self.config.api_key,
            'Content-Type': 'application/json',
            'Accept': 'application/json',
            **(options.headers or {}),
        }

        logger.debug(f"{options.method} {url} (attempt {attempt})")
        try:
            content = json.dumps(options.body).encode() if options.body is not None else None
            response = await asyncio.wait_for(
                self._client.request(
                    options.method,
                    url,
                    headers=headers,
                    content=content,
                    timeout=timeout_ms / 1000,
                ),
                timeout=timeout_ms / 1000,
            )
        except UnipileError:
            raise
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            raise UnipileError.timeout(
                f"Request timed out after {timeout_ms}ms",
                ErrorContext(url=url, method=options.method, retry_attempt=attempt, cause=e),
            ) from e
        except Exception as e:
            context = ErrorContext(url=url, method=options.method, retry_attempt=attempt, cause=e)
            if _is_connection_failure(e):
                raise UnipileError.connection(f"Connection failed: {e}", context) from e
            raise UnipileError.unknown(f"Request failed: {e}", context, retryable=True) from e

        return self._handle_response(response, options, attempt, url)

    def _handle_response(
        self, response: httpx.Response, options: RequestOptions, attempt: int, url: str
    ) -> HttpResponse:
        """Classify the HTTP status and decode successful responses"""
        status = response.status_code
        context = ErrorContext(
            status_code=status,
            url=url,
            method=options.method,
            account_id=options.account_id,
            retry_attempt=attempt,
        )

        if status == 429:
            context.rate_limit_reset_at = RateLimiter.parse_rate_limit_headers(response.headers)
            context.response_body = _safe_parse_json(response)
            raise UnipileError.rate_limit("Rate limit exceeded", context)

        if status >= 400:
            body = _safe_parse_json(response)
            context.response_body = body

            if status in (401, 403):
                raise UnipileError.auth(_extract_error_message(body, "Authentication failed"), context)
            if status == 404:
                raise UnipileError.not_found(_extract_error_message(body, "Resource not found"), context=context)
            if status in (400, 422):
                raise UnipileError.validation(_extract_error_message(body, "Validation failed"), context=context)
            if status >= 500:
                raise UnipileError.unknown(_extract_error_message(body, "Server error"), context, retryable=True)
            raise UnipileError.unknown(_extract_error_message(body, "Request failed"), context, retryable=False)

        if status == 204:
            data = None
        elif 'application/json' in response.headers.get('content-type', ''):
            try:
                data = response.json() if response.content else None
            except ValueError as e:
                context.response_body = response.text
                raise UnipileError.unknown("Response body is not valid JSON", context, retryable=True) from e
        else:
            data = response.text

        logger.debug(f"{options.method} {options.path} -> {status}")
        return HttpResponse(data=data, status=status, headers=response.headers)

    def build_url(self, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Build the full URL for a path.

        Parameters whose value is None are left out, booleans are written as
        true/false, and parameters keep the order they were given in.
        """
        url = httpx.URL(f"{self.base_url}{path}")
        query = build_query(params)
        if query:
            url = url.copy_merge_params(query)
        return str(url)

    async def _sleep(self, ms: float) -> None:
        await asyncio.sleep(ms / 1000)

    async def get(
        self, path: str, params: Optional[Dict[str, Any]] = None, account_id: Optional[str] = None
    ) -> HttpResponse:
        """Convenience method for GET requests"""
        return await self.request(RequestOptions(method='GET', path=path, params=params, account_id=account_id))

    async def post(self, path: str, body: Any = None, account_id: Optional[str] = None) -> HttpResponse:
        """Convenience method for POST requests"""
        return await self.request(RequestOptions(method='POST', path=path, body=body, account_id=account_id))

    async def put(self, path: str, body: Any = None, account_id: Optional[str] = None) -> HttpResponse:
        """Convenience method for PUT requests"""
        return await self.request(RequestOptions(method='PUT', path=path, body=body, account_id=account_id))

    async def patch(self, path: str, body: Any = None, account_id: Optional[str] = None) -> HttpResponse:
        """Convenience method for PATCH requests"""
        return await self.request(RequestOptions(method='PATCH', path=path, body=body, account_id=account_id))

    async def delete(
        self, path: str, account_id: Optional[str] = None, params: Optional[Dict[str, Any]] = None
    ) -> HttpResponse:
        """Convenience method for DELETE requests"""
        return await self.request(RequestOptions(method='DELETE', path=path, params=params, account_id=account_id))

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance created it"""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

import logging
import os
from typing import Any, Dict, Optional

import httpx

from .http_client import HttpClient
from .models import UnipileConfig
from .rate_limiter import RateLimiter
from .services import AccountService, EmailService, LinkedInService, MessagingService, WebhookService

logger = logging.getLogger(__name__)

# Process-wide defaults applied to clients created without an explicit config
_global_config: Dict[str, Any] = {}

ENV_DSN = 'UNIPILE_DSN'
ENV_API_KEY = 'UNIPILE_API_KEY'
ENV_USE_HTTP = 'UNIPILE_USE_HTTP'


def configure(**options: Any) -> None:
    """
    Set default options for all clients created afterwards.

    Options passed directly to a client override these defaults.

    Example:
        ```python
        configure(dsn="api6.unipile.com:13624", api_key="...", max_retries=3)
        client = UnipileClient()  # picks up the defaults
        ```
    """
    unknown = set(options) - set(UnipileConfig.model_fields)
    if unknown:
        raise ValueError(f"Unknown configuration options: {', '.join(sorted(unknown))}")
    _global_config.update(options)


class UnipileClient:
    """
    Client for the Unipile API.

    Groups the API services over one shared HTTP client, so every service
    shares the same per-account rate limit state.

    Example:
        ```python
        async with UnipileClient(dsn="api6.unipile.com:13624", api_key="...") as client:
            accounts = await client.accounts.list()
            await client.email.send(
                account_id="account-123",
                to=[{"email": "recipient@example.com"}],
                subject="Hello",
                body="Hello, world!",
            )
        ```
    """

    def __init__(
        self,
        config: Optional[UnipileConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        **options: Any,
    ):
        """
        Args:
            config: Complete configuration. When omitted, one is built from the
                global defaults set with configure() and the keyword options.
            transport: Optional httpx transport, mostly useful for testing
            http_client: Optional externally managed httpx client
            **options: UnipileConfig fields overriding the defaults or the given config
        """
        if config is None:
            config = UnipileConfig(**{**_global_config, **options})
        elif options:
            config = UnipileConfig(**{**config.model_dump(), **options})

        self.config = config
        self._transport = transport
        self._http = HttpClient(config, transport=transport, http_client=http_client)

        self.accounts = AccountService(self._http)
        self.email = EmailService(self._http)
        self.messaging = MessagingService(self._http)
        self.linkedin = LinkedInService(self._http)
        self.webhooks = WebhookService(self._http)

        logger.info(
            f"UnipileClient initialized for {config.base_url}: retry={config.enable_retry}, "
            f"max_retries={config.max_retries}, timeout={config.timeout}ms"
        )

    @property
    def http_client(self) -> HttpClient:
        """The underlying HTTP client, for calling endpoints the services do not cover"""
        return self._http

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._http.rate_limiter

    def reset_rate_limit(self, account_id: str) -> None:
        """Forget the rate limit state of one account"""
        self._http.rate_limiter.reset(account_id)

    def reset_all_rate_limits(self) -> None:
        self._http.rate_limiter.reset_all()

    def with_options(self, **options: Any) -> "UnipileClient":
        """
        Create a new client with modified options.

        The new client has its own rate limit state and HTTP connection pool.
        """
        return UnipileClient(self.config, transport=self._transport, **options)

    @classmethod
    def from_env(cls, **options: Any) -> "UnipileClient":
        """
        Create a client from environment variables.

        Reads UNIPILE_DSN, UNIPILE_API_KEY and UNIPILE_USE_HTTP ("true" selects
        plain HTTP).

        Raises:
            ValueError: If a required variable is missing or empty
        """
        dsn = os.environ.get(ENV_DSN)
        api_key = os.environ.get(ENV_API_KEY)

        if not dsn:
            raise ValueError(f"{ENV_DSN} environment variable is required")
        if not api_key:
            raise ValueError(f"{ENV_API_KEY} environment variable is required")

        use_http = os.environ.get(ENV_USE_HTTP) == 'true'
        return cls(dsn=dsn, api_key=api_key, use_http=use_http, **options)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "UnipileClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, model_validator

# Constants
DEFAULT_TIMEOUT_MS = 30000
DEFAULT_RETRY_BASE_DELAY_MS = 300000  # 5 minutes
DEFAULT_RETRY_MAX_DELAY_MS = 7200000  # 2 hours
DEFAULT_MAX_RETRIES = 5
GLOBAL_ACCOUNT_ID = "global"

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]


class UnipileConfig(BaseModel):
    """
    Configuration for a Unipile client.

    All durations are expressed in milliseconds.
    """
    dsn: str = Field(..., min_length=1, description="API host and port, e.g. api6.unipile.com:13624")
    api_key: str = Field(..., min_length=1, description="API access token")
    use_http: bool = Field(default=False, description="Use plain HTTP instead of HTTPS")
    timeout: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0, description="Per-attempt request timeout")
    enable_retry: bool = Field(default=True, description="Retry retryable failures with backoff")
    retry_base_delay: int = Field(default=DEFAULT_RETRY_BASE_DELAY_MS, gt=0, description="Base rate limit backoff")
    retry_max_delay: int = Field(default=DEFAULT_RETRY_MAX_DELAY_MS, gt=0, description="Maximum rate limit backoff")
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, gt=0, description="Maximum attempts per request")

    @model_validator(mode="after")
    def _check_delays(self) -> "UnipileConfig":
        if self.retry_max_delay < self.retry_base_delay:
            raise ValueError("retry_max_delay must be greater than or equal to retry_base_delay")
        return self

    @property
    def base_url(self) -> str:
        scheme = "http" if self.use_http else "https"
        return f"{scheme}://{self.dsn}"


class ErrorContext(BaseModel):
    """Diagnostic details attached to every UnipileError"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    status_code: Optional[int] = None
    url: Optional[str] = None
    method: Optional[str] = None
    response_body: Any = None
    account_id: Optional[str] = None
    retry_attempt: Optional[int] = None
    rate_limit_reset_at: Optional[datetime] = None
    cause: Optional[BaseException] = None


class ValidationErrorDetail(BaseModel):
    field: str
    message: str
    value: Any = None


class RequestOptions(BaseModel):
    """A single logical API call"""
    method: HttpMethod
    path: str
    params: Optional[Dict[str, Any]] = None
    body: Any = None
    headers: Optional[Dict[str, str]] = None
    account_id: Optional[str] = None
    timeout: Optional[int] = Field(default=None, gt=0)


class HttpResponse(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: Any = None
    status: int
    headers: httpx.Headers


class RateLimitState(BaseModel):
    """Rate limit bookkeeping for one account bucket"""
    consecutive_errors: int = Field(default=0, ge=0)
    reset_at: Optional[datetime] = None
    current_backoff_ms: float
    last_request_at: Optional[datetime] = None


class PaginatedResponse(BaseModel):
    items: List[Any] = Field(default_factory=list)
    cursor: Optional[str] = None
    total: Optional[int] = None


class EmailAddress(BaseModel):
    email: str
    name: Optional[str] = None


class AttachmentUpload(BaseModel):
    filename: str
    content_type: str
    content: str = Field(..., description="Base64 encoded file content")

"""
Async client for the Unipile messaging, email and LinkedIn API, with per-account
rate limiting and retries.
"""

from importlib.metadata import PackageNotFoundError, version

from .client import UnipileClient, configure
from .enums import (
    AccountProvider,
    AccountStatus,
    CheckpointType,
    ErrorCategory,
    LinkedInSearchType,
    SearchParameterType,
    WebhookEvent,
    WebhookSource,
)
from .errors import UnipileError
from .http_client import HttpClient
from .models import (
    AttachmentUpload,
    EmailAddress,
    ErrorContext,
    HttpResponse,
    PaginatedResponse,
    RateLimitState,
    RequestOptions,
    UnipileConfig,
    ValidationErrorDetail,
)
from .rate_limiter import RateLimiter
from .services import AccountService, EmailService, LinkedInService, MessagingService, WebhookService
from .utils import compact, is_rate_limit_error, is_retryable_error

try:
    __version__ = version("unipile-sdk")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    'UnipileClient',
    'configure',
    'UnipileConfig',
    'HttpClient',
    'RateLimiter',
    'UnipileError',
    'ErrorCategory',
    'ErrorContext',
    'ValidationErrorDetail',
    'RequestOptions',
    'HttpResponse',
    'RateLimitState',
    'PaginatedResponse',
    'EmailAddress',
    'AttachmentUpload',
    'AccountProvider',
    'AccountStatus',
    'CheckpointType',
    'LinkedInSearchType',
    'SearchParameterType',
    'WebhookEvent',
    'WebhookSource',
    'AccountService',
    'EmailService',
    'LinkedInService',
    'MessagingService',
    'WebhookService',
    'compact',
    'is_rate_limit_error',
    'is_retryable_error',
]

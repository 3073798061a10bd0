from .accounts import AccountService
from .email import EmailService
from .linkedin import LinkedInService
from .messaging import MessagingService
from .webhooks import WebhookService

__all__ = [
    'AccountService',
    'EmailService',
    'LinkedInService',
    'MessagingService',
    'WebhookService',
]

from enum import Enum


class ErrorCategory(str, Enum):
    """Categories used to decide how a failed request is handled"""
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    RATE_LIMIT = "rate_limit"
    AUTH = "auth"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"


class AccountProvider(str, Enum):
    """Providers an account can be connected through"""
    LINKEDIN = "LINKEDIN"
    WHATSAPP = "WHATSAPP"
    INSTAGRAM = "INSTAGRAM"
    MESSENGER = "MESSENGER"
    TELEGRAM = "TELEGRAM"
    TWITTER = "TWITTER"
    SLACK = "SLACK"
    GMAIL = "GMAIL"
    OUTLOOK = "OUTLOOK"
    ICLOUD = "ICLOUD"
    EXCHANGE = "EXCHANGE"
    IMAP = "IMAP"


class AccountStatus(str, Enum):
    OK = "OK"
    CONNECTING = "CONNECTING"
    CREDENTIALS = "CREDENTIALS"
    PERMISSIONS = "PERMISSIONS"
    ERROR = "ERROR"
    STOPPED = "STOPPED"


class CheckpointType(str, Enum):
    """Verification steps the API may require while connecting an account"""
    OTP = "OTP"
    IN_APP_VALIDATION = "IN_APP_VALIDATION"
    CAPTCHA = "CAPTCHA"
    EMAIL_VERIFICATION = "EMAIL_VERIFICATION"
    PHONE_VERIFICATION = "PHONE_VERIFICATION"


class WebhookSource(str, Enum):
    MESSAGING = "messaging"
    EMAIL = "email"
    EMAIL_TRACKING = "email_tracking"
    ACCOUNT_STATUS = "account_status"


class WebhookEvent(str, Enum):
    MESSAGE_RECEIVED = "message_received"
    MAIL_SENT = "mail_sent"
    MAIL_OPENED = "mail_opened"
    LINK_CLICKED = "link_clicked"
    ACCOUNT_STATUS_CHANGED = "account_status_changed"


class LinkedInSearchType(str, Enum):
    COMPANY = "COMPANY"
    PEOPLE = "PEOPLE"


class SearchParameterType(str, Enum):
    """Sales Navigator search parameter lists"""
    INDUSTRY = "industry"
    LOCATION = "location"
    COMPANY_SIZE = "company_size"
    SENIORITY = "seniority"
    FUNCTION = "function"

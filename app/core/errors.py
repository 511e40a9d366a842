"""
Application error taxonomy.

Every error that can reach a client is an ``AppError`` carrying an HTTP status
and a short machine-readable ``code``. Only the code is sent to the client;
the message stays in server-side logs.
"""

from typing import Optional


class AppError(Exception):
    """Base exception for all client-visible application errors."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None, code: Optional[str] = None):
        self.message = message or self.code
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        super().__init__(self.message)


class AuthError(AppError):
    """Login or token problems."""

    status_code = 500
    code = "auth_failed"


class MissingCodeError(AuthError):
    status_code = 400
    code = "missing_code"


class TokenExchangeError(AuthError):
    status_code = 500
    code = "oauth_token_exchange_failed"


class NotAuthenticatedError(AuthError):
    status_code = 401
    code = "not_authenticated"


class SourceError(AppError):
    """Calendar event source failures."""

    status_code = 500
    code = "failed_to_fetch_events"

    def __init__(self, message: Optional[str] = None, source: Optional[str] = None, **kwargs):
        self.source = source
        super().__init__(message, **kwargs)


class PrimarySourceError(SourceError):
    pass


class FallbackSourceError(SourceError):
    pass


class AllSourcesExhaustedError(SourceError):
    pass


class ConfigError(AppError):
    status_code = 500
    code = "not_configured"


class NotConfiguredError(ConfigError):
    pass


class ValidationError(AppError):
    status_code = 400
    code = "invalid_request"


class MissingMeetingError(ValidationError):
    code = "missing_meeting"


class SummarizeFailedError(AppError):
    status_code = 500
    code = "summarize_failed"

"""Error taxonomy shared by the services and the HTTP layer.

Each error carries a stable machine-readable ``code`` and the HTTP status it is
translated to by ``api.error_handler.handle_api_error``.
"""
from typing import Any, Dict, Optional


class AppError(Exception):
    """Base exception for all expected application errors."""

    code = "INTERNAL_SERVER_ERROR"
    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class ValidationError(AppError):
    """Input rejected before any side effect took place."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.details = details


class NotFoundError(AppError):
    """Resource missing or owned by another user."""

    code = "NOT_FOUND"
    status_code = 404


class UnauthorizedError(AppError):
    """Missing or invalid authentication."""

    code = "UNAUTHORIZED"
    status_code = 401

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class RateLimitError(AppError):
    """Upstream rate limit exceeded."""

    code = "RATE_LIMIT_EXCEEDED"
    status_code = 429


class ServiceUnavailableError(AppError):
    """The AI provider failed or could not be reached."""

    code = "AI_SERVICE_ERROR"
    status_code = 503


class DatabaseError(AppError):
    """A core record could not be read or written."""

    code = "DATABASE_ERROR"
    status_code = 500

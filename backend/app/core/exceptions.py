"""
Application exception hierarchy.

Services raise these; the handlers in app.api.errors translate them into
JSON responses. Every error carries a machine-readable code and the HTTP
status it maps to.
"""

from typing import Any, Optional


class AppError(Exception):
    """Base exception for all application errors."""

    status_code: int = 500
    error_code: str = "APP_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Any] = None,
    ):
        self.message = message
        if error_code is not None:
            self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or missing input. User-correctable."""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class DuplicateKeyError(AppError):
    """A unique constraint (event slug, user email) was violated."""

    status_code = 409
    error_code = "DUPLICATE_KEY"


class NotFoundError(AppError):
    status_code = 404
    error_code = "NOT_FOUND"


class AuthenticationError(AppError):
    status_code = 401
    error_code = "NOT_AUTHENTICATED"


class ConfigurationError(AppError):
    """A required deployment setting is missing."""

    status_code = 500
    error_code = "CONFIGURATION_ERROR"


class UpstreamError(AppError):
    """The database, image host or another upstream service failed."""

    status_code = 502
    error_code = "UPSTREAM_ERROR"


class DatabaseConnectionError(UpstreamError):
    status_code = 503
    error_code = "DATABASE_UNAVAILABLE"


class ImageUploadError(UpstreamError):
    error_code = "IMAGE_UPLOAD_FAILED"


class PasswordHashingError(AppError):
    error_code = "PASSWORD_HASHING_FAILED"

    def __init__(self):
        super().__init__("Error hashing password")


def validation_error_from(exc, message: str = "Validation failed") -> ValidationError:
    """Wrap a pydantic ValidationError, keeping its per-field errors as details."""
    return ValidationError(message, details=exc.errors(include_url=False, include_context=False))

# app/core/errors.py
"""
Failure kinds raised by services and repositories.

Services never build HTTP responses themselves. They raise one of the
errors below and the handlers registered in `app.main` decide the status
code, the response body and how loudly to log.
"""


class AppError(Exception):
    """Base class for expected, typed failures."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Admin access required"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Resource already exists"


class UpstreamError(AppError):
    """A dependency (database, auth provider, LLM provider) failed."""

    status_code = 500
    default_message = "Internal server error"


class GenerationError(UpstreamError):
    default_message = "Failed to generate response"

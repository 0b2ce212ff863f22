"""
Application Error Taxonomy

Every failure a caller can act on is one of these. Each carries the HTTP
status the API layer answers with and a message that is safe to show to
the user.
"""

from typing import Optional


class FinanceTrackerError(Exception):
    """Base class for all expected application errors."""

    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FinanceTrackerError):
    """Bad input shape or values. Client-fixable."""

    status_code = 400
    default_message = "Invalid request"


class ConflictError(ValidationError):
    """Input collides with an existing record (e.g. an email already in use)."""

    status_code = 409
    default_message = "Resource already exists"


class AuthError(FinanceTrackerError):
    """Missing, invalid or expired credentials."""

    status_code = 401
    default_message = "Token is not valid"


class OwnershipError(FinanceTrackerError):
    """Authenticated, but not allowed to touch this resource."""

    status_code = 403
    default_message = "Not authorized to access this resource"


class NotFoundError(FinanceTrackerError):
    """The requested resource does not exist."""

    status_code = 404
    default_message = "Resource not found"


class InternalError(FinanceTrackerError):
    """Unexpected persistence or runtime failure."""

    status_code = 500
    default_message = "Server error"

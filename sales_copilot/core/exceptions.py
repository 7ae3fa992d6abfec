"""Custom exception hierarchy.

Every application error carries the HTTP status it maps to, so the API layer
can render it without knowing about individual classes.
"""

from typing import Optional


class AppError(Exception):
    """Base exception for application errors."""

    status_code: int = 500

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(AppError):
    """Raised when input validation fails."""

    status_code = 400


class MissingInputError(ValidationError):
    """Raised when the generation input is empty after trimming."""

    def __init__(self, message: str = "Missing input", original_error: Optional[Exception] = None):
        super().__init__(message, original_error)


class InvalidStatusError(ValidationError):
    """Raised when a session status is outside the allowed set."""

    def __init__(self, message: str = "Invalid status", original_error: Optional[Exception] = None):
        super().__init__(message, original_error)


class UnauthorizedError(AppError):
    """Raised when the caller has no authenticated identity."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized", original_error: Optional[Exception] = None):
        super().__init__(message, original_error)


class NoTeamMembershipError(AppError):
    """Raised when the authenticated user is not a member of any team."""

    status_code = 403

    def __init__(
        self, message: str = "No team connected to user", original_error: Optional[Exception] = None
    ):
        super().__init__(message, original_error)


class SessionNotFoundError(AppError):
    """Raised when no session matches the id and team pair."""

    status_code = 404

    def __init__(
        self, message: str = "Session not found for this team", original_error: Optional[Exception] = None
    ):
        super().__init__(message, original_error)


class SessionClosedError(AppError):
    """Raised when generating against a closed session under the block policy."""

    status_code = 409

    def __init__(self, message: str = "Session is closed", original_error: Optional[Exception] = None):
        super().__init__(message, original_error)


class GenerationFailedError(AppError):
    """Raised when the completion service fails or times out."""

    status_code = 500

    def __init__(self, message: str = "Script generation failed", original_error: Optional[Exception] = None):
        super().__init__(message, original_error)


class APIClientError(AppError):
    """Raised when an external API call fails."""

    pass


class APITimeoutError(APIClientError):
    """Raised when an external API call times out."""

    pass


class PersistenceError(AppError):
    """Raised when a database operation fails."""

    pass


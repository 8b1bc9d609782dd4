from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class UnauthorizedError(AuthenticationError):
    """Raised when credentials are missing, malformed or wrong.

    The message never says which part of the credentials was rejected.
    """

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class SessionError(AuthenticationError):
    """Base class for session token failures. Callers treat all subclasses alike."""

    def __init__(self, message: str = "Session expired or invalid") -> None:
        super().__init__(message)


class SessionNotFoundError(SessionError):
    """Raised when a token was never issued or has already been evicted."""


class SessionExpiredError(SessionError):
    """Raised when a stored session fails the validity check. The record is evicted."""


class ValidationError(UserError):
    """Raised when user input fails validation."""

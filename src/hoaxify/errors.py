from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Raised when a session token is not present in the token store."""

    def __init__(self, message: str = "Invalid session token") -> None:
        super().__init__(message)


class TokenExpiredError(AuthenticationError):
    """Raised when a session token exists but its sliding window has elapsed."""

    def __init__(self, message: str = "Session token expired") -> None:
        super().__init__(message)


class AccessDeniedError(UserError):
    """Raised when a user tries to access a resource they do not have permission for."""


class ValidationError(UserError):
    """Raised when user input fails validation.

    ``field_errors`` maps request field names to messages when the failure
    can be attributed to specific fields.
    """

    def __init__(self, message: str = "Validation failure", field_errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.field_errors = field_errors or {}


class MailDeliveryError(UserError):
    """Raised when an outgoing email could not be delivered."""

    def __init__(self, message: str = "E-mail delivery failed") -> None:
        super().__init__(message)


class TokenGenerationError(RuntimeError):
    """Raised when no unique session token could be minted.

    Not a UserError: exhausting the retry budget points at a broken entropy
    source or store, and is reported as an internal server error.
    """

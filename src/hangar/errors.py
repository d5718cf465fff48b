from abc import ABC


class UserError(ABC, Exception):
    """Error whose message is safe to return to the API client.

    Never put tokens, key secrets or hashes in these messages.
    """

    error_type = "bad_request"


class NotFoundError(UserError):
    error_type = "not_found"

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """No usable credential was presented."""

    error_type = "authentication_error"

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class SessionExpiredError(AuthenticationError):
    """The session token is unknown, revoked or past its expiry."""

    error_type = "session_expired"

    def __init__(self, message: str = "Invalid or expired session") -> None:
        super().__init__(message)


class InvalidApiKeyError(AuthenticationError):
    """The API key is malformed, unknown or its secret does not match."""

    error_type = "invalid_api_key"

    def __init__(self, message: str = "Invalid API key") -> None:
        super().__init__(message)


class AccessDeniedError(UserError):
    """The session is valid but its kind or owner may not perform the operation."""

    error_type = "access_denied"


class ValidationError(UserError):
    error_type = "validation_error"


class InvalidReferenceError(Exception):
    """Raised when a record points at an entity that is missing or incomplete.

    Not a UserError: it signals broken data on our side, so the message is
    never shown to the client.
    """

"""Failure taxonomy for the Auth service.

ERROR_MESSAGES and ERROR_STATUS are the single source of truth for what a
caller sees for each ErrorKind. Exceptions below are raised inside the core
(store, token verifier) and converted to AuthResult failures by the service;
they never cross the activity boundary as-is.
"""

from __future__ import annotations

from gatekeep_shared.auth_models import AuthResult, ErrorKind

ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.VALIDATION_ERROR: "Invalid request",
    ErrorKind.DUPLICATE_ACCOUNT: "User with email {email} already exists",
    ErrorKind.INVALID_CREDENTIALS: "Invalid email or password",
    ErrorKind.INVALID_TOKEN: "Invalid token",
    ErrorKind.STORE_UNAVAILABLE: "User store unavailable",
}

# Transport-level status carried on every failed AuthResult
ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION_ERROR: 400,
    ErrorKind.DUPLICATE_ACCOUNT: 400,
    ErrorKind.INVALID_CREDENTIALS: 400,
    ErrorKind.INVALID_TOKEN: 401,
    ErrorKind.STORE_UNAVAILABLE: 503,
}


def failure(kind: ErrorKind, detail: str | None = None, **fields: str) -> AuthResult:
    """Build a failed AuthResult with the canonical message for `kind`.

    `fields` fill placeholders in the message template; `detail` is appended
    after a colon (used for validation field names).
    """
    message = ERROR_MESSAGES[kind].format(**fields)
    if detail:
        message = f"{message}: {detail}"
    return AuthResult(
        success=False, message=message, error_kind=kind, status=ERROR_STATUS[kind]
    )


class AuthError(Exception):
    """Base class for failures raised inside the credential core."""

    kind: ErrorKind


class DuplicateAccountError(AuthError):
    """The store's uniqueness constraint on email rejected a create."""

    kind = ErrorKind.DUPLICATE_ACCOUNT

    def __init__(self, email: str) -> None:
        super().__init__(f"email already registered: {email}")
        self.email = email


class InvalidTokenError(AuthError):
    """Signature mismatch, malformed payload, missing claims, or expiry."""

    kind = ErrorKind.INVALID_TOKEN


class StoreUnavailableError(AuthError):
    """The user store could not be reached or failed mid-operation."""

    kind = ErrorKind.STORE_UNAVAILABLE


class ConfigError(ValueError):
    """An environment variable is missing or has an invalid value."""

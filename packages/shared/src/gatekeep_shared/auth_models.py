"""Auth boundary models — the contract between callers and the Auth activities.

These types cross the Temporal activity boundary. Callers build the Request
models as activity arguments; the Auth worker receives them and returns an
AuthResult.

Design choices:
  - UserRecord is the only type that carries a password hash. It never leaves
    the Auth worker: everything that crosses the boundary is a PublicUser.
  - Request fields are plain strings. Shape validation (email syntax, length
    limits) happens inside the activity so that a bad request comes back as a
    VALIDATION_ERROR result instead of a deserialization crash.
  - Failures carry a stable ErrorKind so the transport layer can map kind →
    status without parsing messages.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from gatekeep_shared.models import PlatformResult

# ============================================================================
# Domain objects
# ============================================================================


class ErrorKind(str, Enum):
    """Failure kinds surfaced by the Auth service."""

    VALIDATION_ERROR = "validation_error"
    DUPLICATE_ACCOUNT = "duplicate_account"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"
    STORE_UNAVAILABLE = "store_unavailable"


class PublicUser(BaseModel):
    """A registered account as seen by callers — and as embedded in tokens."""

    id: str
    name: str
    email: str
    created_at: datetime


class UserRecord(PublicUser):
    """A stored account. The hash is opaque bcrypt output, never plaintext."""

    password_hash: str

    def public(self) -> PublicUser:
        return PublicUser(
            id=self.id,
            name=self.name,
            email=self.email,
            created_at=self.created_at,
        )

    def __repr__(self) -> str:
        # Keep the hash out of tracebacks and debug logs
        return f"UserRecord(id={self.id!r}, email={self.email!r})"

    __str__ = __repr__


# ============================================================================
# Activity Request/Result Pairs (3)
# ============================================================================


class RegisterRequest(BaseModel):
    """Input for register_user: create an account and sign a first token."""

    name: str
    email: str
    password: str


class LoginRequest(BaseModel):
    """Input for login_user: check credentials and sign a token."""

    email: str
    password: str


class VerifyTokenRequest(BaseModel):
    """Input for verify_token: validate a token and (optionally) renew it."""

    token: str


class AuthResult(PlatformResult):
    """Result of every Auth activity.

    On success `user` and `token` are set. On failure `error_kind` names the
    failure, `message` is the caller-facing text for it, and `status` is the
    protocol status a transport layer should answer with.
    """

    user: PublicUser | None = None
    token: str = ""
    error_kind: ErrorKind | None = None
    status: int | None = None

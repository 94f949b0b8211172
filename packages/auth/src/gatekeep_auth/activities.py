"""Auth activities — Temporal activities for the credential core.

These run on the auth worker (AUTH_QUEUE). Other services dispatch to this
queue when they need to register an account, log a user in, or check a
session token.

Three activities — each is an atomic business verb:

  register_user — validate shape, create the account, sign a first token
  login_user    — check credentials, sign a token
  verify_token  — validate a token and hand back its claims (plus a renewed token)

Activities are bound methods on AuthActivities so the worker injects one
AuthService (store, hasher, signing secret) at startup instead of reaching for
module-level singletons.

Expected failures come back as AuthResult(success=False, error_kind=...).
STORE_UNAVAILABLE is the exception: it is raised as a retryable
ApplicationError so the caller's Temporal retry policy decides what to do.
"""

from __future__ import annotations

from typing import Any

from gatekeep_shared.auth_models import (
    AuthResult,
    ErrorKind,
    LoginRequest,
    RegisterRequest,
    VerifyTokenRequest,
)
from temporalio import activity
from temporalio.exceptions import ApplicationError

from gatekeep_auth.client import create_client
from gatekeep_auth.config import AuthSettings, load_settings
from gatekeep_auth.errors import failure
from gatekeep_auth.hasher import PasswordHasher
from gatekeep_auth.service import AuthService
from gatekeep_auth.store import RedisUserStore
from gatekeep_auth.tokens import TokenIssuer
from gatekeep_auth.validation import check_registration


def _raise_if_unavailable(result: AuthResult) -> AuthResult:
    if result.error_kind is ErrorKind.STORE_UNAVAILABLE:
        raise ApplicationError(
            result.message, result.status, type="StoreUnavailable", non_retryable=False
        )
    return result


class AuthActivities:
    """Activity implementations bound to a single AuthService."""

    def __init__(self, service: AuthService) -> None:
        self._service = service

    @activity.defn(name="register_user")
    async def register_user(self, request: RegisterRequest) -> AuthResult:
        """Register a new account. Fails on malformed input or a taken email."""
        invalid = check_registration(request)
        if invalid:
            activity.logger.info(f"Register rejected, invalid fields: {invalid}")
            return failure(ErrorKind.VALIDATION_ERROR, detail=invalid)

        activity.logger.info(f"Registering account for {request.email.strip().lower()}")
        return _raise_if_unavailable(
            await self._service.register(request.name, request.email, request.password)
        )

    @activity.defn(name="login_user")
    async def login_user(self, request: LoginRequest) -> AuthResult:
        """Authenticate by email and password."""
        activity.logger.info("Login attempt")
        return _raise_if_unavailable(
            await self._service.login(request.email, request.password)
        )

    @activity.defn(name="verify_token")
    async def verify_token(self, request: VerifyTokenRequest) -> AuthResult:
        """Check a session token; renewed per the service's sliding-renewal setting."""
        return _raise_if_unavailable(await self._service.verify_token(request.token))

    def all(self) -> list[Any]:
        return [self.register_user, self.login_user, self.verify_token]


def build_service(settings: AuthSettings) -> AuthService:
    """Wire an AuthService from settings and the environment's Redis backend."""
    return AuthService(
        store=RedisUserStore(create_client()),
        hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        tokens=TokenIssuer(settings.jwt_secret, settings.jwt_ttl_seconds),
        sliding_renewal=settings.sliding_renewal,
    )


def build_auth_activities() -> list[Any]:
    """Worker hook: load settings once and return the bound activities."""
    return AuthActivities(build_service(load_settings())).all()

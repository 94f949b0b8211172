"""Auth service — registration, login, and token verification.

The service is a stateless orchestrator over three injected collaborators:
a UserStore, a PasswordHasher and a TokenIssuer. Each operation returns an
AuthResult; expected failures are never raised. Store outages come back as
STORE_UNAVAILABLE and are not retried here — the caller's retry policy owns
that decision.

Sliding renewal: with `sliding_renewal=True`, every successful verify_token
signs a brand-new token with a fresh expiry over the same claims. Sessions stay
alive for as long as they are used, and there is no revocation list, so a
leaked token stays usable as long as someone keeps verifying it. Turn it off to
get verify-only semantics: the presented token is returned unchanged and
expires on schedule.
"""

from __future__ import annotations

import logging

from gatekeep_shared.auth_models import AuthResult, ErrorKind, PublicUser

from gatekeep_auth.errors import (
    DuplicateAccountError,
    InvalidTokenError,
    StoreUnavailableError,
    failure,
)
from gatekeep_auth.hasher import PasswordHasher
from gatekeep_auth.store import UserStore, normalize_email
from gatekeep_auth.tokens import TokenIssuer

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        store: UserStore,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
        sliding_renewal: bool = True,
    ) -> None:
        self._store = store
        self._hasher = hasher
        self._tokens = tokens
        self.sliding_renewal = sliding_renewal

    async def register(self, name: str, email: str, password: str) -> AuthResult:
        """Create an account and sign a token for it."""
        email = normalize_email(email)
        try:
            if await self._store.find_by_email(email) is not None:
                logger.info(f"Register rejected, {email} already exists")
                return failure(ErrorKind.DUPLICATE_ACCOUNT, email=email)

            password_hash = await self._hasher.hash(password)
            record = await self._store.create(name, email, password_hash)
        except DuplicateAccountError as e:
            # Lost the race to a concurrent register for the same email
            logger.info(f"Register rejected by uniqueness claim for {email}")
            return failure(e.kind, email=email)
        except StoreUnavailableError as e:
            logger.error(f"Register failed, store unavailable: {e}")
            return failure(e.kind)

        user = record.public()
        return self._signed(user, f"User '{user.id}' registered")

    async def login(self, email: str, password: str) -> AuthResult:
        """Check credentials and sign a token.

        Unknown email and wrong password produce the same failure, and the
        unknown-email path still pays for one bcrypt verification.
        """
        email = normalize_email(email)
        try:
            record = await self._store.find_by_email(email)
        except StoreUnavailableError as e:
            logger.error(f"Login failed, store unavailable: {e}")
            return failure(e.kind)

        if record is None:
            await self._hasher.dummy_verify(password)
            logger.info("Login rejected: invalid credentials")
            return failure(ErrorKind.INVALID_CREDENTIALS)

        if not await self._hasher.verify(password, record.password_hash):
            logger.info(f"Login rejected for user '{record.id}': invalid credentials")
            return failure(ErrorKind.INVALID_CREDENTIALS)

        user = record.public()
        return self._signed(user, f"User '{user.id}' logged in")

    async def verify_token(self, token: str) -> AuthResult:
        """Validate a token; renew it when sliding renewal is on."""
        try:
            user = self._tokens.verify(token)
        except InvalidTokenError as e:
            logger.info(f"Token rejected: {e}")
            return failure(e.kind)

        if not self.sliding_renewal:
            return AuthResult(
                success=True, message="Token valid", user=user, token=token
            )
        return self._signed(user, "Token valid, renewed")

    def _signed(self, user: PublicUser, message: str) -> AuthResult:
        return AuthResult(
            success=True,
            message=message,
            user=user,
            token=self._tokens.issue(user),
        )

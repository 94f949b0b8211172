"""JWT issuance and verification for Gatekeep session tokens.

Tokens are HS256 JWTs whose payload is the PublicUser fields plus four
internal claims:

  sub: the user id
  iat: issued-at (seconds since epoch)
  exp: expiry, iat + ttl
  jti: random token id

Internal claims are stripped on verification; callers only ever see a
PublicUser. iat has one-second resolution, so the random jti is what keeps two
tokens for the same user distinct when they are issued in the same second.
"""

from __future__ import annotations

import time
import uuid

import jwt as pyjwt
from gatekeep_shared.auth_models import PublicUser
from pydantic import ValidationError

from gatekeep_auth.errors import InvalidTokenError

ALGORITHM = "HS256"
REQUIRED_CLAIMS = ("sub", "iat", "exp")
INTERNAL_CLAIMS = (*REQUIRED_CLAIMS, "jti")


def issue_token(
    user: PublicUser, secret: str, ttl_seconds: int, now: float | None = None
) -> str:
    """Sign a token over `user`'s public claims, valid for `ttl_seconds`."""
    issued_at = int(now if now is not None else time.time())
    payload = {
        **user.model_dump(mode="json"),
        "sub": user.id,
        "iat": issued_at,
        "exp": issued_at + ttl_seconds,
        "jti": uuid.uuid4().hex,
    }
    return pyjwt.encode(payload, secret, algorithm=ALGORITHM)


def decode_token(token: str, secret: str) -> PublicUser:
    """Validate `token` and return the identity it carries.

    Raises:
        InvalidTokenError: Bad signature, malformed token, missing claims,
            or expired. The underlying PyJWT error is chained as __cause__.
    """
    try:
        payload = pyjwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            options={"require": list(REQUIRED_CLAIMS)},
        )
    except pyjwt.PyJWTError as e:
        raise InvalidTokenError(str(e)) from e

    claims = {k: v for k, v in payload.items() if k not in INTERNAL_CLAIMS}
    try:
        return PublicUser.model_validate(claims)
    except ValidationError as e:
        raise InvalidTokenError("token claims are malformed") from e


class TokenIssuer:
    """Bundles the process-wide signing secret and TTL."""

    def __init__(self, secret: str, ttl_seconds: int) -> None:
        self._secret = secret
        self.ttl_seconds = ttl_seconds

    def issue(self, user: PublicUser) -> str:
        return issue_token(user, self._secret, self.ttl_seconds)

    def verify(self, token: str) -> PublicUser:
        return decode_token(token, self._secret)

"""Auth worker settings, loaded once at startup from the environment.

Environment variables (a `.env` file is honored via python-dotenv):
  - JWT_SECRET             — HS256 signing secret (required)
  - JWT_TTL_SECONDS        — token lifetime, default 7200
  - BCRYPT_ROUNDS          — bcrypt cost factor, default 10
  - TOKEN_SLIDING_RENEWAL  — re-issue a fresh token on every successful
                             verification, default true

Missing or invalid values fail fast with a ConfigError naming the variable —
a worker with a bad secret should crash on boot, not on the first request.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from gatekeep_auth.errors import ConfigError

_ENV_NAMES = {
    "jwt_secret": "JWT_SECRET",
    "jwt_ttl_seconds": "JWT_TTL_SECONDS",
    "bcrypt_rounds": "BCRYPT_ROUNDS",
    "sliding_renewal": "TOKEN_SLIDING_RENEWAL",
}


class AuthSettings(BaseModel):
    """Validated, read-only settings shared by every request."""

    model_config = {"frozen": True}

    jwt_secret: str = Field(min_length=1, repr=False)
    jwt_ttl_seconds: int = Field(default=7200, gt=0)
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)
    sliding_renewal: bool = True


def load_settings(environ: Mapping[str, str] | None = None) -> AuthSettings:
    """Build AuthSettings from `environ` (default: os.environ after load_dotenv)."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    values = {
        field: environ[env_name]
        for field, env_name in _ENV_NAMES.items()
        if environ.get(env_name) not in (None, "")
    }
    if "jwt_secret" not in values:
        raise ConfigError("JWT_SECRET environment variable is not set")

    try:
        return AuthSettings(**values)
    except ValidationError as e:
        bad = ", ".join(_ENV_NAMES[str(err["loc"][0])] for err in e.errors())
        raise ConfigError(f"Invalid auth settings: {bad}") from e

"""Test fixtures for the Auth core.

The user store runs on a real RedisAdapter over an in-memory fakeredis server,
so SET NX uniqueness behaves exactly as it does in production. FailingRedis
stands in for an unreachable backend.

bcrypt runs at its minimum cost (4 rounds) to keep the suite fast.
"""

from __future__ import annotations

from typing import Any

import fakeredis
import pytest
from fakeredis.aioredis import FakeRedis
from gatekeep_auth.client import RedisAdapter
from gatekeep_auth.hasher import PasswordHasher
from gatekeep_auth.service import AuthService
from gatekeep_auth.store import RedisUserStore
from gatekeep_auth.tokens import TokenIssuer

SECRET = "super-secret-jwt-token-for-testing-only"
TTL_SECONDS = 3600
TEST_ROUNDS = 4


class FailingRedis:
    """Raw client whose every call fails like a dropped connection."""

    def __getattr__(self, name: str) -> Any:
        async def _fail(*args: Any, **kwargs: Any) -> Any:
            raise ConnectionError(f"redis unreachable during {name}")

        return _fail


@pytest.fixture
def raw_redis() -> FakeRedis:
    return FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def redis_adapter(raw_redis) -> RedisAdapter:
    return RedisAdapter(raw_redis)


@pytest.fixture
def store(redis_adapter) -> RedisUserStore:
    return RedisUserStore(redis_adapter)


@pytest.fixture
def down_store() -> RedisUserStore:
    return RedisUserStore(RedisAdapter(FailingRedis()))


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=TEST_ROUNDS)


@pytest.fixture
def tokens() -> TokenIssuer:
    return TokenIssuer(SECRET, TTL_SECONDS)


@pytest.fixture
def service(store, hasher, tokens) -> AuthService:
    return AuthService(store, hasher, tokens)

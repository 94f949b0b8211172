"""Tests for the Auth service state machine.

The service is wired to the fakeredis-backed store, a 4-round bcrypt hasher
and a real TokenIssuer (see conftest.py). Collaborator failures are injected
with AsyncMock stores.
"""

from __future__ import annotations

import asyncio
import time
from unittest.mock import AsyncMock

import jwt as pyjwt
import pytest
from gatekeep_auth.errors import DuplicateAccountError, StoreUnavailableError
from gatekeep_auth.service import AuthService
from gatekeep_auth.tokens import issue_token
from gatekeep_shared.auth_models import ErrorKind

SECRET = "super-secret-jwt-token-for-testing-only"


def _iat(token: str) -> int:
    return pyjwt.decode(token, options={"verify_signature": False})["iat"]


class TestScenario:
    @pytest.mark.asyncio
    async def test_register_login_verify(self, service):
        registered = await service.register("Ana", "ana@x.com", "secret1")
        assert registered.success is True
        assert registered.user.email == "ana@x.com"
        assert registered.status is None
        assert registered.token != ""

        wrong = await service.login("ana@x.com", "wrong")
        assert wrong.success is False
        assert wrong.error_kind is ErrorKind.INVALID_CREDENTIALS

        logged_in = await service.login("ana@x.com", "secret1")
        assert logged_in.success is True
        assert logged_in.token != ""

        verified = await service.verify_token(logged_in.token)
        assert verified.success is True
        assert verified.user.email == "ana@x.com"
        assert verified.user == registered.user

        garbage = await service.verify_token("garbage")
        assert garbage.success is False
        assert garbage.error_kind is ErrorKind.INVALID_TOKEN
        assert garbage.message == "Invalid token"
        assert garbage.status == 401


class TestRegister:
    @pytest.mark.asyncio
    async def test_token_signs_created_record(self, service, tokens):
        result = await service.register("Ana", "ana@x.com", "secret1")
        claims = tokens.verify(result.token)
        assert claims.id == result.user.id
        assert claims == result.user

    @pytest.mark.asyncio
    async def test_hash_not_exposed(self, service):
        result = await service.register("Ana", "ana@x.com", "secret1")
        dumped = result.model_dump_json()
        assert "password_hash" not in dumped
        assert "secret1" not in dumped
        assert "$2b$" not in dumped

    @pytest.mark.asyncio
    async def test_password_stored_hashed(self, service, store):
        await service.register("Ana", "ana@x.com", "secret1")
        record = await store.find_by_email("ana@x.com")
        assert record.password_hash != "secret1"
        assert record.password_hash.startswith("$2b$")

    @pytest.mark.asyncio
    async def test_duplicate_email(self, service):
        await service.register("Ana", "ana@x.com", "secret1")
        result = await service.register("Ana Again", "Ana@X.com", "secret2")

        assert result.success is False
        assert result.error_kind is ErrorKind.DUPLICATE_ACCOUNT
        assert result.message == "User with email ana@x.com already exists"
        assert result.user is None
        assert result.token == ""

    @pytest.mark.asyncio
    async def test_concurrent_register_one_record(self, service, raw_redis):
        results = await asyncio.gather(
            service.register("Ana", "ana@x.com", "secret1"),
            service.register("Ana", "ana@x.com", "secret1"),
        )

        assert sorted(r.success for r in results) == [False, True]
        loser = next(r for r in results if not r.success)
        assert loser.error_kind is ErrorKind.DUPLICATE_ACCOUNT
        assert len(await raw_redis.keys("auth:user:idx:email:*")) == 1

    @pytest.mark.asyncio
    async def test_store_constraint_maps_to_duplicate(self, hasher, tokens):
        """A create that loses the uniqueness race looks like a pre-check hit."""
        store = AsyncMock()
        store.find_by_email.return_value = None
        store.create.side_effect = DuplicateAccountError("ana@x.com")
        service = AuthService(store, hasher, tokens)

        result = await service.register("Ana", "ana@x.com", "secret1")

        assert result.error_kind is ErrorKind.DUPLICATE_ACCOUNT
        assert result.message == "User with email ana@x.com already exists"

    @pytest.mark.asyncio
    async def test_store_unavailable(self, down_store, hasher, tokens):
        service = AuthService(down_store, hasher, tokens)
        result = await service.register("Ana", "ana@x.com", "secret1")
        assert result.success is False
        assert result.error_kind is ErrorKind.STORE_UNAVAILABLE


class TestLogin:
    @pytest.mark.asyncio
    async def test_unknown_email_matches_wrong_password(self, service):
        await service.register("Ana", "ana@x.com", "secret1")

        unknown = await service.login("nobody@x.com", "secret1")
        wrong = await service.login("ana@x.com", "wrong")

        assert unknown.error_kind is wrong.error_kind is ErrorKind.INVALID_CREDENTIALS
        assert unknown.message == wrong.message

    @pytest.mark.asyncio
    async def test_unknown_email_still_hashes(self, store, tokens):
        hasher = AsyncMock()
        service = AuthService(store, hasher, tokens)

        await service.login("nobody@x.com", "secret1")

        hasher.dummy_verify.assert_awaited_once_with("secret1")

    @pytest.mark.asyncio
    async def test_email_case_insensitive(self, service):
        await service.register("Ana", "ana@x.com", "secret1")
        result = await service.login("ANA@x.com", "secret1")
        assert result.success is True

    @pytest.mark.asyncio
    async def test_corrupt_stored_hash_is_invalid_credentials(self, service, store, raw_redis):
        registered = await service.register("Ana", "ana@x.com", "secret1")
        record = await store.find_by_email("ana@x.com")
        broken = record.model_copy(update={"password_hash": "corrupt"})
        await raw_redis.set(f"auth:user:{registered.user.id}", broken.model_dump_json())

        result = await service.login("ana@x.com", "secret1")
        assert result.error_kind is ErrorKind.INVALID_CREDENTIALS

    @pytest.mark.asyncio
    async def test_corrupt_stored_record_is_store_unavailable(self, service, raw_redis):
        registered = await service.register("Ana", "ana@x.com", "secret1")
        await raw_redis.set(f"auth:user:{registered.user.id}", "{not json")

        result = await service.login("ana@x.com", "secret1")

        assert result.error_kind is ErrorKind.STORE_UNAVAILABLE
        assert result.status == 503

    @pytest.mark.asyncio
    async def test_store_unavailable(self, hasher, tokens):
        store = AsyncMock()
        store.find_by_email.side_effect = StoreUnavailableError("down")
        service = AuthService(store, hasher, tokens)

        result = await service.login("ana@x.com", "secret1")
        assert result.error_kind is ErrorKind.STORE_UNAVAILABLE


class TestVerifyToken:
    @pytest.mark.asyncio
    async def test_expired_token(self, service):
        registered = await service.register("Ana", "ana@x.com", "secret1")
        expired = issue_token(registered.user, SECRET, 60, now=time.time() - 3600)

        result = await service.verify_token(expired)
        assert result.error_kind is ErrorKind.INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_wrong_secret(self, service):
        registered = await service.register("Ana", "ana@x.com", "secret1")
        forged = issue_token(registered.user, "attacker-secret", 600)

        result = await service.verify_token(forged)
        assert result.error_kind is ErrorKind.INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_sliding_renewal_issues_fresh_token(self, service):
        registered = await service.register("Ana", "ana@x.com", "secret1")
        old = issue_token(registered.user, SECRET, 3600, now=time.time() - 100)

        result = await service.verify_token(old)

        assert result.success is True
        assert result.token != old
        assert _iat(result.token) > _iat(old)
        assert result.user == registered.user

    @pytest.mark.asyncio
    async def test_renewal_in_same_second_is_new_token(self, service, tokens):
        registered = await service.register("Ana", "ana@x.com", "secret1")

        result = await service.verify_token(registered.token)

        assert result.success is True
        assert result.token != registered.token
        assert tokens.verify(result.token) == registered.user

    @pytest.mark.asyncio
    async def test_renewal_disabled_returns_same_token(self, store, hasher, tokens):
        service = AuthService(store, hasher, tokens, sliding_renewal=False)
        registered = await service.register("Ana", "ana@x.com", "secret1")

        result = await service.verify_token(registered.token)

        assert result.success is True
        assert result.token == registered.token
        assert result.user == registered.user

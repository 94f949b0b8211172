"""User record store — the only durable state behind the Auth service.

UserStore is the interface the service depends on. RedisUserStore implements
it on top of RedisAdapter:

  auth:user:idx:email:<email>  → user id   (claimed with SET NX)
  auth:user:<id>               → UserRecord JSON

Uniqueness comes from the SET NX claim on the email index, not from the
service's find-then-create check. Two concurrent registrations for the same
email both pass the lookup, but only one wins the claim; the other gets
DuplicateAccountError.

Emails are normalized (stripped, lower-cased) before every lookup and write.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from typing import Protocol

from gatekeep_shared.auth_models import UserRecord
from pydantic import ValidationError

from gatekeep_auth.client import RedisAdapter
from gatekeep_auth.errors import DuplicateAccountError, StoreUnavailableError
from gatekeep_auth.keys import user_idx_email, user_key

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserStore(Protocol):
    async def find_by_email(self, email: str) -> UserRecord | None: ...

    async def create(self, name: str, email: str, password_hash: str) -> UserRecord:
        """Persist a new record.

        Raises:
            DuplicateAccountError: The email is already taken.
            StoreUnavailableError: The backend failed.
        """
        ...


class RedisUserStore:
    """UserStore over a RedisAdapter."""

    def __init__(self, client: RedisAdapter) -> None:
        self._client = client

    async def find_by_email(self, email: str) -> UserRecord | None:
        email = normalize_email(email)
        try:
            user_id = await self._client.get(user_idx_email(email))
            if not user_id:
                return None
            record_json = await self._client.get(user_key(user_id))
        except Exception as e:
            raise StoreUnavailableError(f"find_by_email failed: {e}") from e

        if record_json is None:
            # Claim exists but the record write has not landed (or failed)
            logger.warning(f"Email index for user '{user_id}' has no record")
            return None
        try:
            return UserRecord.model_validate_json(record_json)
        except ValidationError as e:
            logger.error(f"Stored record for user '{user_id}' is corrupt")
            raise StoreUnavailableError(f"record for user '{user_id}' is corrupt") from e

    async def create(self, name: str, email: str, password_hash: str) -> UserRecord:
        email = normalize_email(email)
        record = UserRecord(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            password_hash=password_hash,
            created_at=datetime.now(UTC),
        )
        index_key = user_idx_email(email)

        try:
            claimed = await self._client.set_if_absent(index_key, record.id)
        except Exception as e:
            raise StoreUnavailableError(f"create failed: {e}") from e
        if not claimed:
            raise DuplicateAccountError(email)

        try:
            await self._client.set(user_key(record.id), record.model_dump_json())
        except Exception as e:
            await self._release_claim(index_key)
            raise StoreUnavailableError(f"create failed: {e}") from e

        logger.info(f"Created user '{record.id}' for {email}")
        return record

    async def _release_claim(self, index_key: str) -> None:
        try:
            await self._client.delete(index_key)
        except Exception:
            logger.exception(f"Could not release email claim {index_key}")

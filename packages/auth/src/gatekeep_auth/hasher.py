"""Password hashing and verification.

Uses bcrypt for password hashing with automatic salting and a configurable
work factor. The async PasswordHasher runs bcrypt in a worker thread so
concurrent requests hash in parallel instead of queueing on the event loop.
"""

from __future__ import annotations

import asyncio

import bcrypt

DEFAULT_ROUNDS = 10


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt (auto-salted)."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash.

    A malformed stored hash is a failed verification, not an error.
    """
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except (ValueError, TypeError):
        return False


class PasswordHasher:
    """bcrypt hashing at a fixed cost factor, offloaded to threads."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self.rounds = rounds
        # Same cost as real hashes, so a lookup miss takes as long as a wrong password
        self._dummy_hash = hash_password("gatekeep-dummy-password", rounds)

    async def hash(self, password: str) -> str:
        return await asyncio.to_thread(hash_password, password, self.rounds)

    async def verify(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(verify_password, password, password_hash)

    async def dummy_verify(self, password: str) -> None:
        """Burn one verification's worth of time for an unknown account."""
        await self.verify(password, self._dummy_hash)

"""Redis client adapter for the user store.

Normalizes the interface between Upstash SDK (cloud) and fakeredis (local dev).
Both speak get/set/delete, but return types differ slightly (bytes vs str,
None vs False for a refused SET NX). The RedisAdapter hides that so the store
never touches raw clients.

Environment detection:
  - UPSTASH_REDIS_REST_URL set → Upstash SDK (staging/prod)
  - Otherwise → fakeredis (local dev, no Docker, no cloud dependency)
"""

from __future__ import annotations

import os
from typing import Any


class RedisAdapter:
    """Unified async Redis interface over Upstash SDK or fakeredis."""

    def __init__(self, raw_client: Any) -> None:
        self._client = raw_client

    async def get(self, key: str) -> str | None:
        result = await self._client.get(key)
        if result is None or isinstance(result, str):
            return result
        return result.decode()

    async def set(self, key: str, value: str) -> None:
        await self._client.set(key, value)

    async def set_if_absent(self, key: str, value: str) -> bool:
        """Atomic SET NX. True if this call created the key."""
        return bool(await self._client.set(key, value, nx=True))

    async def delete(self, *keys: str) -> None:
        await self._client.delete(*keys)


def create_client() -> RedisAdapter:
    """Build a RedisAdapter for the current environment.

    The Auth worker builds one adapter at startup and injects it into the
    store; there is no module-level singleton.
    """
    if os.environ.get("UPSTASH_REDIS_REST_URL"):
        from upstash_redis.asyncio import Redis

        return RedisAdapter(Redis.from_env())

    from fakeredis.aioredis import FakeRedis

    return RedisAdapter(FakeRedis(decode_responses=True))

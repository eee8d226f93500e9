from __future__ import annotations

from typing import Any, Optional

import redis.asyncio as redis
import structlog

from ...domain.constants import DEFAULT_CACHE_TTL
from ...domain.ports import KeyValueCache

logger = structlog.get_logger(__name__)


class RedisKeyValueCache(KeyValueCache):
    """
    KeyValueCache backed by Redis, shared by every worker that points at
    the same server.

    Keys are namespaced with ``prefix`` so several projects can share one
    database.
    """

    def __init__(
        self,
        client: redis.Redis,
        *,
        prefix: str = "pkg_firebase_auth:",
        default_ttl: Optional[int] = DEFAULT_CACHE_TTL,
    ) -> None:
        self._redis = client
        self._prefix = prefix
        self._default_ttl = default_ttl

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> "RedisKeyValueCache":
        client = redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        return cls(client, **kwargs)

    async def get(self, key: str) -> Optional[str]:
        value = await self._redis.get(self._key(key))
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def put(self, key: str, value: str, *, expiration_ttl: Optional[int] = None) -> None:
        ttl = expiration_ttl if expiration_ttl is not None else self._default_ttl
        await self._redis.set(self._key(key), value, ex=ttl)

    async def close(self) -> None:
        await self._redis.aclose()
        logger.debug("Redis key cache closed")

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

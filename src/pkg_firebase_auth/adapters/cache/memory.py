from __future__ import annotations

import time
from typing import Callable, Dict, Optional, Tuple

from ...domain.constants import DEFAULT_CACHE_TTL
from ...domain.ports import KeyValueCache


class InMemoryKeyValueCache(KeyValueCache):
    """
    Process-local TTL store.

    Good for a single worker, the CLI and tests. Entries expire lazily on
    read. ``default_ttl=None`` keeps entries without an explicit TTL forever.
    """

    def __init__(
        self,
        *,
        default_ttl: Optional[int] = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[str, Optional[float]]] = {}

    async def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return value

    async def put(self, key: str, value: str, *, expiration_ttl: Optional[int] = None) -> None:
        ttl = expiration_ttl if expiration_ttl is not None else self._default_ttl
        expires_at = self._clock() + ttl if ttl is not None else None
        self._entries[key] = (value, expires_at)

    def clear(self) -> None:
        self._entries.clear()

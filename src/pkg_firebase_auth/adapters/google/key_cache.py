from __future__ import annotations

import json
import re
from typing import Any, List, Mapping, Optional

import structlog

from ...domain.constants import CACHE_TTL_SAFETY_MARGIN, KEY_SET_CACHE_KEY
from ...domain.exceptions import KeyFetchError
from ...domain.ports import JwksFetcher, KeyValueCache, ProviderKeyResolver
from ...domain.value_objects import find_key
from .jwks_fetcher import HttpxJwksFetcher

logger = structlog.get_logger(__name__)

_MAX_AGE = re.compile(r"max-age=(\d+)")


def cache_ttl_from_header(cache_control: Optional[str]) -> Optional[int]:
    """
    TTL in seconds for a key set served with ``cache_control``.

    Returns None (store default) when there is no usable max-age.
    """
    match = _MAX_AGE.search(cache_control or "")
    if match is None:
        return None

    ttl = int(match.group(1)) - CACHE_TTL_SAFETY_MARGIN
    return ttl if ttl > 0 else None


class ProviderKeyCache(ProviderKeyResolver):
    """
    Read-through cache of the provider's JWK set.

    - a cached key set is authoritative until it expires; a kid that is
      not in it is a miss, even if Google has since rotated keys
    - on a cold cache the set is fetched once, stored whole, and searched
    - a fetch that yields no key list caches nothing
    """

    def __init__(
        self,
        cache: KeyValueCache,
        fetcher: Optional[JwksFetcher] = None,
        *,
        cache_key: str = KEY_SET_CACHE_KEY,
    ) -> None:
        self._cache = cache
        self._fetcher = fetcher or HttpxJwksFetcher()
        self._cache_key = cache_key

    async def get_provider_key(self, kid: Optional[str]) -> Optional[Mapping[str, Any]]:
        cached = await self._read_cached_keys()
        if cached is not None:
            logger.debug("JWK set cache hit", kid=kid, keys_count=len(cached))
            return find_key(cached, kid)

        logger.debug("JWK set cache miss", kid=kid)

        try:
            document = await self._fetcher.fetch()
        except KeyFetchError as exc:
            logger.warning("Failed to fetch JWK set", error=str(exc))
            return None

        if document.keys is None:
            logger.warning("JWK set response has no key list")
            return None

        ttl = cache_ttl_from_header(document.cache_control)
        await self._cache.put(
            self._cache_key,
            json.dumps([dict(k) for k in document.keys]),
            expiration_ttl=ttl,
        )
        logger.debug("JWK set cached", keys_count=len(document.keys), ttl=ttl)

        return document.find(kid)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    async def _read_cached_keys(self) -> Optional[List[Any]]:
        raw = await self._cache.get(self._cache_key)
        if raw is None:
            return None

        try:
            keys = json.loads(raw)
        except (TypeError, ValueError) as exc:
            logger.warning("Ignoring unreadable cached JWK set", error=str(exc))
            return None

        if not isinstance(keys, list):
            logger.warning("Ignoring cached JWK set that is not a list")
            return None

        return keys


async def get_provider_key(
    cache: KeyValueCache,
    kid: Optional[str],
    fetcher: Optional[JwksFetcher] = None,
) -> Optional[Mapping[str, Any]]:
    """Look up ``kid`` in the cached key set, fetching it on a cold cache."""
    return await ProviderKeyCache(cache, fetcher).get_provider_key(kid)

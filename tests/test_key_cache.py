# tests/test_key_cache.py
import json

import httpx
import pytest

from pkg_firebase_auth.adapters.cache.memory import InMemoryKeyValueCache
from pkg_firebase_auth.adapters.cache.redis_cache import RedisKeyValueCache
from pkg_firebase_auth.adapters.google.jwks_fetcher import HttpxJwksFetcher
from pkg_firebase_auth.adapters.google.key_cache import ProviderKeyCache, cache_ttl_from_header, get_provider_key
from pkg_firebase_auth.domain.constants import GOOGLE_JWKS_URL
from pkg_firebase_auth.domain.exceptions import KeyFetchError

from conftest import RecordingCache, StaticFetcher

KEYS = [{"kid": "a", "kty": "RSA", "n": "x", "e": "AQAB"}, {"kid": "b", "kty": "RSA", "n": "y", "e": "AQAB"}]


@pytest.mark.parametrize("header, expected", [
    ("public, max-age=19800, must-revalidate, no-transform", 19680),
    ("max-age=121", 1),
    ("max-age=120", None),
    ("max-age=60", None),
    ("no-store", None),
    ("", None),
    (None, None),
])
def test_cache_ttl_from_header(header, expected):
    assert cache_ttl_from_header(header) == expected


# --------------------------------------------------------------------- #
# ProviderKeyCache
# --------------------------------------------------------------------- #

@pytest.mark.asyncio
async def test_cold_cache_fetches_once_and_stores_with_ttl():
    cache = RecordingCache()
    fetcher = StaticFetcher(KEYS, cache_control="public, max-age=3600")
    keys = ProviderKeyCache(cache, fetcher)

    first = await keys.get_provider_key("b")

    assert first == KEYS[1]
    assert fetcher.calls == 1
    assert len(cache.puts) == 1
    key, value, ttl = cache.puts[0]
    assert key == "google_pk"
    assert json.loads(value) == KEYS
    assert ttl == 3480

    second = await keys.get_provider_key("b")

    assert second == first
    assert fetcher.calls == 1
    assert len(cache.puts) == 1


@pytest.mark.asyncio
async def test_cached_set_without_kid_is_a_miss_without_refetch():
    cache = RecordingCache({"google_pk": json.dumps(KEYS)})
    fetcher = StaticFetcher([{"kid": "rotated"}])

    assert await ProviderKeyCache(cache, fetcher).get_provider_key("rotated") is None
    assert fetcher.calls == 0


@pytest.mark.asyncio
async def test_fresh_fetch_without_matching_kid_still_caches():
    cache = RecordingCache()
    fetcher = StaticFetcher(KEYS)

    assert await ProviderKeyCache(cache, fetcher).get_provider_key("zzz") is None
    assert fetcher.calls == 1
    assert cache.puts[0][2] is None


@pytest.mark.asyncio
async def test_response_without_key_list_is_not_cached():
    cache = RecordingCache()
    fetcher = StaticFetcher(None, cache_control="max-age=3600")

    assert await ProviderKeyCache(cache, fetcher).get_provider_key("a") is None
    assert fetcher.calls == 1
    assert cache.puts == []


@pytest.mark.asyncio
async def test_fetch_failure_yields_absent_key():
    class FailingFetcher:
        calls = 0

        async def fetch(self):
            self.calls += 1
            raise KeyFetchError("boom")

    cache = RecordingCache()
    fetcher = FailingFetcher()

    assert await ProviderKeyCache(cache, fetcher).get_provider_key("a") is None
    assert fetcher.calls == 1
    assert cache.puts == []


@pytest.mark.asyncio
async def test_corrupt_cache_entry_triggers_refetch():
    cache = RecordingCache({"google_pk": "{not json"})
    fetcher = StaticFetcher(KEYS)

    assert await ProviderKeyCache(cache, fetcher).get_provider_key("a") == KEYS[0]
    assert fetcher.calls == 1
    assert json.loads(cache.store["google_pk"]) == KEYS


@pytest.mark.asyncio
async def test_custom_cache_key_and_function_entry_point():
    cache = RecordingCache()
    fetcher = StaticFetcher(KEYS)

    await ProviderKeyCache(cache, fetcher, cache_key="other").get_provider_key("a")
    assert "other" in cache.store

    assert await get_provider_key(cache, "a", fetcher) == KEYS[0]
    assert fetcher.calls == 2


# --------------------------------------------------------------------- #
# HttpxJwksFetcher
# --------------------------------------------------------------------- #

def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetcher_reads_keys_and_cache_control():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.host))
        return httpx.Response(200, json={"keys": KEYS}, headers={"Cache-Control": "public, max-age=100"})

    async with _client(handler) as client:
        document = await HttpxJwksFetcher(client=client).fetch()

    assert seen == [("GET", httpx.URL(GOOGLE_JWKS_URL).host)]
    assert document.keys == tuple(KEYS)
    assert document.cache_control == "public, max-age=100"


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    httpx.Response(500, json={"keys": KEYS}),
    httpx.Response(200, json={"error": "nope"}),
    httpx.Response(200, json={"keys": "not-a-list"}),
    httpx.Response(200, json=["a"]),
])
async def test_fetcher_without_usable_key_list(response):
    async with _client(lambda request: response) as client:
        document = await HttpxJwksFetcher(client=client).fetch()

    assert document.keys is None


@pytest.mark.asyncio
async def test_fetcher_raises_on_non_json_and_transport_errors():
    async with _client(lambda request: httpx.Response(200, text="<html>")) as client:
        with pytest.raises(KeyFetchError):
            await HttpxJwksFetcher(client=client).fetch()

    def broken(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    async with _client(broken) as client:
        with pytest.raises(KeyFetchError):
            await HttpxJwksFetcher(client=client).fetch()


# --------------------------------------------------------------------- #
# KeyValueCache implementations
# --------------------------------------------------------------------- #

class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.asyncio
async def test_in_memory_cache_expiry():
    clock = FakeClock()
    cache = InMemoryKeyValueCache(default_ttl=50, clock=clock)

    await cache.put("explicit", "1", expiration_ttl=10)
    await cache.put("default", "2")
    assert await cache.get("explicit") == "1"
    assert await cache.get("missing") is None

    clock.now += 10
    assert await cache.get("explicit") is None
    assert await cache.get("default") == "2"

    clock.now += 40
    assert await cache.get("default") is None


@pytest.mark.asyncio
async def test_in_memory_cache_without_default_ttl_keeps_entries():
    clock = FakeClock()
    cache = InMemoryKeyValueCache(default_ttl=None, clock=clock)
    await cache.put("k", "v")
    clock.now += 10 ** 9
    assert await cache.get("k") == "v"


class FakeRedis:
    def __init__(self) -> None:
        self.data = {}
        self.set_calls = []
        self.closed = False

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.set_calls.append((key, value, ex))
        self.data[key] = value

    async def aclose(self):
        self.closed = True


@pytest.mark.asyncio
async def test_redis_cache_prefixes_keys_and_applies_ttl():
    client = FakeRedis()
    cache = RedisKeyValueCache(client, prefix="t:", default_ttl=300)

    await cache.put("google_pk", "[]", expiration_ttl=60)
    await cache.put("other", "x")

    assert client.set_calls == [("t:google_pk", "[]", 60), ("t:other", "x", 300)]
    assert await cache.get("google_pk") == "[]"
    assert await cache.get("missing") is None

    client.data["t:raw"] = b"bytes"
    assert await cache.get("raw") == "bytes"

    await cache.close()
    assert client.closed

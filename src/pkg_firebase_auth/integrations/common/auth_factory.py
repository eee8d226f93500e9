from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Optional

import structlog

from ...adapters.cache.memory import InMemoryKeyValueCache
from ...adapters.cache.redis_cache import RedisKeyValueCache
from ...adapters.google.jwks_fetcher import HttpxJwksFetcher
from ...adapters.google.key_cache import ProviderKeyCache
from ...adapters.jwt_decoder import CompactTokenDecoder
from ...adapters.rsa_verifier import RSASignatureVerifier
from ...application.use_cases.authenticate import AuthenticateFirebaseTokenUseCase
from ...domain.constants import DEFAULT_HTTP_TIMEOUT, GOOGLE_JWKS_URL, KEY_SET_CACHE_KEY
from ...domain.entities import ClaimMap, FirebaseIdentity
from ...domain.ports import JwksFetcher, KeyValueCache, SignatureVerifier
from ...domain.value_objects import ClaimPredicate, ProjectId
from ...settings import FirebaseAuthSettings

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class AuthDependencies:
    """
    Framework-agnostic auth facade.

    Integrations (FastAPI, Strawberry, CLI) adapt this to their own
    dependency systems. Every method returns None on rejection; the
    reason only goes to the log.
    """

    auth_use_case: AuthenticateFirebaseTokenUseCase
    # releases resources the factory opened itself (e.g. a Redis pool)
    on_close: Optional[Callable[[], Awaitable[None]]] = None

    async def authenticate(
            self,
            token: Optional[str],
            extra_checks: Iterable[ClaimPredicate] = (),
    ) -> Optional[ClaimMap]:
        """Token -> verified payload claims, or None."""
        outcome = await self.auth_use_case.execute(token, extra_checks)
        return outcome.claims

    async def authenticate_identity(
            self,
            token: Optional[str],
            extra_checks: Iterable[ClaimPredicate] = (),
    ) -> Optional[FirebaseIdentity]:
        claims = await self.authenticate(token, extra_checks)
        return FirebaseIdentity.from_claims(claims) if claims is not None else None

    async def aclose(self) -> None:
        """Close what the factory created. Caller-supplied caches are left open."""
        if self.on_close is not None:
            await self.on_close()


def create_auth_dependencies(
        *,
        project_id: str,
        cache: KeyValueCache,
        fetcher: Optional[JwksFetcher] = None,
        verifier: Optional[SignatureVerifier] = None,
        jwks_url: str = GOOGLE_JWKS_URL,
        cache_key: str = KEY_SET_CACHE_KEY,
        http_timeout: float = DEFAULT_HTTP_TIMEOUT,
        verify_ssl: bool = True,
) -> AuthDependencies:
    """
    High-level factory: Firebase project + key cache -> AuthDependencies.

    - builds the token decoder, key cache and RS256 verifier
    - wires AuthenticateFirebaseTokenUseCase
    - returns an AuthDependencies facade

    Raises ValueError for an empty project id.
    """
    fetcher = fetcher or HttpxJwksFetcher(jwks_url, timeout=http_timeout, verify_ssl=verify_ssl)

    auth_uc = AuthenticateFirebaseTokenUseCase(
        project_id=ProjectId(project_id),
        token_decoder=CompactTokenDecoder(),
        key_resolver=ProviderKeyCache(cache, fetcher, cache_key=cache_key),
        verifier=verifier or RSASignatureVerifier(),
    )
    return AuthDependencies(auth_use_case=auth_uc)


def create_auth_dependencies_from_settings(
        settings: FirebaseAuthSettings,
        cache: Optional[KeyValueCache] = None,
) -> AuthDependencies:
    """
    Same as `create_auth_dependencies`, configured from settings.

    Without an explicit cache, uses Redis when ``redis_url`` is set and a
    process-local cache otherwise. A Redis cache built here is closed by
    `AuthDependencies.aclose`.
    """
    on_close = None
    if cache is None:
        if settings.redis_url:
            redis_cache = RedisKeyValueCache.from_url(settings.redis_url)
            cache, on_close = redis_cache, redis_cache.close
        else:
            cache = InMemoryKeyValueCache()

    auth = create_auth_dependencies(
        project_id=settings.project_id,
        cache=cache,
        jwks_url=settings.jwks_url,
        cache_key=settings.cache_key,
        http_timeout=settings.http_timeout,
        verify_ssl=settings.verify_ssl,
    )
    auth.on_close = on_close
    return auth


async def authenticate(
        project_id: str,
        cache: KeyValueCache,
        token: Optional[str],
        extra_checks: Iterable[ClaimPredicate] = (),
        *,
        fetcher: Optional[JwksFetcher] = None,
        verifier: Optional[SignatureVerifier] = None,
) -> Optional[ClaimMap]:
    """
    Verify a Firebase ID token.

    Returns the payload claims (the uid is under "sub") when the token is
    authentic, None otherwise. Never raises.
    """
    try:
        auth = create_auth_dependencies(
            project_id=project_id,
            cache=cache,
            fetcher=fetcher,
            verifier=verifier,
        )
    except ValueError as exc:
        logger.warning("Token verification failed", reason="invalid_configuration", error=str(exc))
        return None

    return await auth.authenticate(token, extra_checks)

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from .entities import DecodedToken
from .value_objects import JwksDocument


class KeyValueCache(Protocol):
    """
    Port for the caller-supplied text key-value store that holds the
    provider key set between requests.

    Implementations must make single-key get/put atomic. Nothing else
    is assumed; concurrent writers simply overwrite each other.
    """

    async def get(self, key: str) -> Optional[str]:
        """Return the stored text, or None when missing or expired."""
        ...

    async def put(self, key: str, value: str, *, expiration_ttl: Optional[int] = None) -> None:
        """
        Store ``value`` under ``key``.

        ``expiration_ttl`` is in seconds; None means "use the store's
        own default".
        """
        ...


class JwksFetcher(Protocol):
    """Port for retrieving the provider's published JWK set."""

    async def fetch(self) -> JwksDocument:
        """
        Raises:
          - KeyFetchError when the endpoint cannot be read at all
        """
        ...


class SignatureVerifier(Protocol):
    """Port for checking a signature against a single JWK."""

    def verify(self, jwk: Mapping[str, Any], signing_input: bytes, signature: bytes) -> bool:
        """
        Return False for a signature that does not match.

        Raises:
          - KeyImportError when ``jwk`` is not usable key material
        """
        ...


class TokenDecoder(Protocol):
    """Port for splitting and decoding a compact token."""

    def decode(self, token: str) -> DecodedToken:
        """
        Raises:
          - MalformedTokenError
        """
        ...


class ProviderKeyResolver(Protocol):
    """Port for looking up the provider's public key by key id."""

    async def get_provider_key(self, kid: Optional[str]) -> Optional[Mapping[str, Any]]:
        """Return the matching JWK, or None when no key matches."""
        ...

from __future__ import annotations

from typing import Any, Optional, Tuple

import httpx
import structlog

from ...domain.constants import DEFAULT_HTTP_TIMEOUT, GOOGLE_JWKS_URL
from ...domain.exceptions import KeyFetchError
from ...domain.ports import JwksFetcher
from ...domain.value_objects import JwksDocument

logger = structlog.get_logger(__name__)


class HttpxJwksFetcher(JwksFetcher):
    """
    Reads Google's securetoken JWK set over HTTPS.

    A shared ``httpx.AsyncClient`` may be passed in; otherwise a short-lived
    client is opened per fetch.
    """

    def __init__(
        self,
        url: str = GOOGLE_JWKS_URL,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        verify_ssl: bool = True,
    ) -> None:
        self._url = url
        self._client = client
        self._timeout = timeout
        self._verify_ssl = verify_ssl

    async def fetch(self) -> JwksDocument:
        try:
            if self._client is not None:
                response = await self._client.get(self._url)
            else:
                async with httpx.AsyncClient(timeout=self._timeout, verify=self._verify_ssl) as client:
                    response = await client.get(self._url)
        except httpx.HTTPError as exc:
            raise KeyFetchError(f"GET {self._url} failed: {exc}") from exc

        if response.is_error:
            logger.warning("JWK endpoint returned an error", status_code=response.status_code)
            return JwksDocument(keys=None, cache_control=response.headers.get("cache-control"))

        try:
            body = response.json()
        except ValueError as exc:
            raise KeyFetchError(f"JWK set response is not JSON: {exc}") from exc

        return JwksDocument(keys=self._extract_keys(body), cache_control=response.headers.get("cache-control"))

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _extract_keys(body: Any) -> Optional[Tuple[dict, ...]]:
        if not isinstance(body, dict) or body.get("error"):
            return None
        keys = body.get("keys")
        if not isinstance(keys, list):
            return None
        return tuple(k for k in keys if isinstance(k, dict))

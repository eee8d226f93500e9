from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .domain.constants import DEFAULT_HTTP_TIMEOUT, GOOGLE_JWKS_URL, KEY_SET_CACHE_KEY


@dataclass(slots=True)
class FirebaseAuthSettings:
    """
    Firebase token verification settings.

    Host code decides how to construct this (env, config file, etc.).
    """
    project_id: str
    jwks_url: str = GOOGLE_JWKS_URL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    verify_ssl: bool = True

    # Key set caching
    cache_key: str = KEY_SET_CACHE_KEY
    redis_url: Optional[str] = None

from __future__ import annotations

import os
from typing import Optional

from .domain.constants import DEFAULT_HTTP_TIMEOUT, GOOGLE_JWKS_URL, KEY_SET_CACHE_KEY
from .settings import FirebaseAuthSettings


def settings_from_env(*, project_id: Optional[str] = None) -> FirebaseAuthSettings:
    """
    Build settings from the environment. An explicit ``project_id`` wins
    over FIREBASE_PROJECT_ID.
    """
    def _bool(key: str, default: bool = True) -> bool:
        raw = os.getenv(key)
        if raw is None:
            return default
        return str(raw).strip().lower() in {"1", "true", "yes", "on"}

    def _float(key: str, default: float) -> float:
        raw = os.getenv(key)
        if not raw:
            return default
        try:
            return float(raw)
        except ValueError as exc:
            raise RuntimeError(f"{key} must be a number, got {raw!r}") from exc

    project_id = (project_id or "").strip() or (os.getenv("FIREBASE_PROJECT_ID") or "").strip()
    if not project_id:
        raise RuntimeError("Missing Firebase auth settings: FIREBASE_PROJECT_ID")

    return FirebaseAuthSettings(
        project_id=project_id,
        jwks_url=os.getenv("FIREBASE_JWKS_URL") or GOOGLE_JWKS_URL,
        http_timeout=_float("FIREBASE_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        verify_ssl=_bool("VERIFY_SSL", True),
        cache_key=os.getenv("FIREBASE_KEY_CACHE_KEY") or KEY_SET_CACHE_KEY,
        redis_url=os.getenv("REDIS_URL") or None,
    )

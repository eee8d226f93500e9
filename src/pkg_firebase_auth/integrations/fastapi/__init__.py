from __future__ import annotations

from .deps import FastAPIAuthentication
from .security import bearer_scheme, extract_token_from_request
from ..common.auth_factory import AuthDependencies, create_auth_dependencies
from ...domain.ports import KeyValueCache


def create_fastapi_auth(
    *,
    project_id: str,
    cache: KeyValueCache,
) -> FastAPIAuthentication:
    """
    High-level helper for FastAPI apps:

    - Creates AuthDependencies for the Firebase project
    - Wraps them in FastAPIAuthentication, exposing dependencies like:

        fastapi_auth.get_current_user
        fastapi_auth.get_optional_user
        fastapi_auth.require_claims(...)
    """
    auth: AuthDependencies = create_auth_dependencies(
        project_id=project_id,
        cache=cache,
    )
    return FastAPIAuthentication(auth=auth)


__all__ = [
    "FastAPIAuthentication",
    "bearer_scheme",
    "create_fastapi_auth",
    "extract_token_from_request",
]

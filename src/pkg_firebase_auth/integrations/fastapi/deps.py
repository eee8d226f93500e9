from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials

from .security import DEFAULT_COOKIE_NAME, bearer_scheme, extract_token_from_request, not_authenticated
from ..common.auth_factory import AuthDependencies
from ...domain.entities import FirebaseIdentity
from ...domain.value_objects import ClaimPredicate


@dataclass(slots=True)
class FastAPIAuthentication:
    """
    FastAPI integration for pkg_firebase_auth.

    Built on top of the framework-agnostic AuthDependencies facade. Every
    rejection is the same 401 "Not authenticated".
    """

    auth: AuthDependencies
    cookie_name: str = DEFAULT_COOKIE_NAME

    # ------------------------------------------------------------------ #
    # Base dependencies
    # ------------------------------------------------------------------ #

    async def get_current_user(
            self,
            request: Request,
            credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    ) -> FirebaseIdentity:
        """Dependency: Require authentication."""
        token = extract_token_from_request(request, credentials, self.cookie_name)
        identity = await self.auth.authenticate_identity(token)
        if identity is None:
            raise not_authenticated()
        return identity

    async def get_optional_user(
            self,
            request: Request,
            credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    ) -> FirebaseIdentity | None:
        """Dependency: Optional authentication. Bad or missing token -> anonymous."""
        token = extract_token_from_request(request, credentials, self.cookie_name)
        if token is None:
            return None
        return await self.auth.authenticate_identity(token)

    # ------------------------------------------------------------------ #
    # Claim-check dependency factory
    # ------------------------------------------------------------------ #

    def require_claims(self, *checks: ClaimPredicate) -> Callable:
        """
        Dependency factory: authenticate and additionally require every
        given claim check (e.g. ``Equals("email_verified", True)``).
        """

        async def dependency(
                request: Request,
                credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
        ) -> FirebaseIdentity:
            token = extract_token_from_request(request, credentials, self.cookie_name)
            identity = await self.auth.authenticate_identity(token, checks)
            if identity is None:
                raise not_authenticated()
            return identity

        return dependency


"""

from pkg_firebase_auth.integrations.fastapi import create_fastapi_auth
from pkg_firebase_auth import Equals, InMemoryKeyValueCache
from app.config import settings  # your own settings

fastapi_auth = create_fastapi_auth(
    project_id=settings.FIREBASE_PROJECT_ID,
    cache=InMemoryKeyValueCache(),
)

get_current_user = fastapi_auth.get_current_user
get_optional_user = fastapi_auth.get_optional_user
require_verified_email = fastapi_auth.require_claims(Equals("email_verified", True))

"""

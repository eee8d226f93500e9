from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Type

from graphql import GraphQLError
from starlette.requests import Request
from strawberry.permission import BasePermission
from strawberry.types import Info

from ...domain.entities import FirebaseIdentity
from ...domain.ports import KeyValueCache
from ...domain.value_objects import ClaimPredicate, validate_claims
from ..common.auth_factory import AuthDependencies, create_auth_dependencies


# --------------------------------------------------------------------- #
# Context type used by Strawberry
# --------------------------------------------------------------------- #

@dataclass(slots=True)
class StrawberryAuthContext:
    """
    Default context type for Strawberry GraphQL.

    You can use this directly, or extend it in your app by adding more fields.
    """
    request: Request
    user: Optional[FirebaseIdentity] = None
    extra: Any = None  # host app can put UoW, services, etc. here if desired


def _extract_token_from_request(request: Request, cookie_name: str) -> Optional[str]:
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header.removeprefix("Bearer ").strip()
        if token:
            return token

    return request.cookies.get(cookie_name) or None


# --------------------------------------------------------------------- #
# Main integration: StrawberryAuth
# --------------------------------------------------------------------- #

@dataclass(slots=True)
class StrawberryAuth:
    """
    Strawberry GraphQL integration for pkg_firebase_auth.

    Responsibilities:
      - provide a `context_getter` for Strawberry's GraphQLRouter
      - provide permission classes you can attach to fields/mutations
    """

    auth: AuthDependencies
    cookie_name: str = "id_token"

    def make_context_getter(
        self,
        *,
        optional: bool = True,
        extra_factory: Optional[Callable[[Request, Optional[FirebaseIdentity]], Any]] = None,
    ):
        """
        Build an async function compatible with:

            strawberry.fastapi.GraphQLRouter(context_getter=...)

        Args:
            optional:
                - True:   missing or rejected tokens become `user=None`
                - False:  they become a GraphQL "Not authenticated" error
            extra_factory:
                - Optional callable: (request, user) -> Any, stored on context.extra
        """

        async def _context_getter(request: Request) -> StrawberryAuthContext:
            token = _extract_token_from_request(request, self.cookie_name)
            user = await self.auth.authenticate_identity(token) if token else None

            if user is None and not optional:
                raise GraphQLError("Not authenticated")

            extra = extra_factory(request, user) if extra_factory else None
            return StrawberryAuthContext(request=request, user=user, extra=extra)

        return _context_getter

    # ----------------------------------------------------------------- #
    # Permission helpers
    # ----------------------------------------------------------------- #

    def require_authenticated(self) -> Type[BasePermission]:
        """
        Permission: user must be authenticated (context.user is not None).
        """

        class _RequireAuthenticated(BasePermission):
            message = "Authentication required"

            def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
                ctx: StrawberryAuthContext = info.context
                return ctx.user is not None

        return _RequireAuthenticated

    def require_claims(self, *checks: ClaimPredicate) -> Type[BasePermission]:
        """
        Permission: the verified claims must pass every check.

        Example:

            RequireVerifiedEmail = strawberry_auth.require_claims(Equals("email_verified", True))

            @strawberry.field(permission_classes=[RequireVerifiedEmail])
            def profile(self, info: Info) -> ProfileType:
                ...
        """

        class _RequireClaims(BasePermission):
            message = "Forbidden"

            def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
                ctx: StrawberryAuthContext = info.context
                if ctx.user is None:
                    self.message = "Authentication required"
                    return False
                return validate_claims(ctx.user.claims, checks)

        return _RequireClaims


def create_strawberry_auth(
    *,
    project_id: str,
    cache: KeyValueCache,
    cookie_name: str = "id_token",
) -> StrawberryAuth:
    """
    Convenience helper:

        strawberry_auth = create_strawberry_auth(
            project_id="my-firebase-project",
            cache=InMemoryKeyValueCache(),
        )
    """
    auth_deps: AuthDependencies = create_auth_dependencies(project_id=project_id, cache=cache)
    return StrawberryAuth(auth=auth_deps, cookie_name=cookie_name)

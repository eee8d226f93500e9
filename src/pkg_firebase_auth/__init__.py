"""
pkg_firebase_auth

Verification of Firebase ID tokens against Google's published public
keys, with a pluggable key-set cache. Framework integrations (FastAPI,
Strawberry) are thin wrappers over the same core.
"""

__version__ = "0.1.0"

from .domain.constants import RejectionReason
from .domain.entities import ClaimMap, DecodedToken, FirebaseIdentity, get_number, get_string
from .domain.exceptions import (
    AuthenticationError,
    InvalidTokenError,
    MalformedTokenError,
    ClaimValidationError,
    SignatureInvalidError,
    KeyNotFoundError,
    KeyFetchError,
    KeyImportError,
)
from .domain.value_objects import (
    ProjectId,
    ClaimPredicate,
    Equals,
    InFuture,
    InPast,
    NotEmpty,
    Custom,
    validate_claims,
)
from .domain.ports import KeyValueCache, JwksFetcher, SignatureVerifier

from .application.use_cases.authenticate import AuthenticateFirebaseTokenUseCase

from .adapters.cache.memory import InMemoryKeyValueCache
from .adapters.cache.redis_cache import RedisKeyValueCache
from .adapters.google.jwks_fetcher import HttpxJwksFetcher
from .adapters.google.key_cache import ProviderKeyCache, get_provider_key
from .adapters.jwt_decoder import CompactTokenDecoder
from .adapters.rsa_verifier import RSASignatureVerifier

from .integrations.common.auth_factory import (
    AuthDependencies,
    authenticate,
    create_auth_dependencies,
    create_auth_dependencies_from_settings,
)
from .settings import FirebaseAuthSettings
from .env import settings_from_env

__all__ = [
    "__version__",
    # entry point
    "authenticate",
    # domain core
    "ClaimMap",
    "DecodedToken",
    "FirebaseIdentity",
    "ProjectId",
    "RejectionReason",
    "get_number",
    "get_string",
    # claim checks
    "ClaimPredicate",
    "Equals",
    "InFuture",
    "InPast",
    "NotEmpty",
    "Custom",
    "validate_claims",
    # ports
    "KeyValueCache",
    "JwksFetcher",
    "SignatureVerifier",
    # exceptions
    "AuthenticationError",
    "InvalidTokenError",
    "MalformedTokenError",
    "ClaimValidationError",
    "SignatureInvalidError",
    "KeyNotFoundError",
    "KeyFetchError",
    "KeyImportError",
    # use cases
    "AuthenticateFirebaseTokenUseCase",
    # adapters
    "InMemoryKeyValueCache",
    "RedisKeyValueCache",
    "HttpxJwksFetcher",
    "ProviderKeyCache",
    "get_provider_key",
    "CompactTokenDecoder",
    "RSASignatureVerifier",
    # wiring
    "AuthDependencies",
    "create_auth_dependencies",
    "create_auth_dependencies_from_settings",
    "FirebaseAuthSettings",
    "settings_from_env",
]

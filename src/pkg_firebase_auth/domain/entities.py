from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .constants import RejectionReason

# Untyped JSON object decoded from a token segment
ClaimMap = Dict[str, Any]


def get_string(claims: Mapping[str, Any], key: str) -> Optional[str]:
    """Return ``claims[key]`` if it is a string, else None."""
    value = claims.get(key)
    return value if isinstance(value, str) else None


def get_number(claims: Mapping[str, Any], key: str) -> Optional[float]:
    """
    Return ``claims[key]`` if it is a JSON number, else None.

    Booleans are rejected even though Python treats them as ints.
    """
    value = claims.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


@dataclass(frozen=True, slots=True)
class DecodedToken:
    """
    A compact token split into its parts.

    ``raw_header`` and ``raw_payload`` are the segments exactly as they
    appeared in the token; the signature covers these bytes, so they are
    never regenerated from the decoded maps.
    """
    header: ClaimMap
    payload: ClaimMap
    signature: bytes
    raw_header: str
    raw_payload: str

    @property
    def key_id(self) -> Optional[str]:
        return get_string(self.header, "kid")

    @property
    def signing_input(self) -> bytes:
        return f"{self.raw_header}.{self.raw_payload}".encode("utf-8")


@dataclass(frozen=True, slots=True)
class VerificationOutcome:
    """
    Internal result of one verification run.

    Exactly one of ``claims`` / ``reason`` is set. Only ``claims`` ever
    leaves the package; ``reason`` is for logs.
    """
    claims: Optional[ClaimMap] = None
    reason: Optional[RejectionReason] = None
    detail: str = ""

    @classmethod
    def authenticated(cls, claims: ClaimMap) -> "VerificationOutcome":
        return cls(claims=claims)

    @classmethod
    def rejected(cls, reason: RejectionReason, detail: str = "") -> "VerificationOutcome":
        return cls(reason=reason, detail=detail)

    @property
    def ok(self) -> bool:
        return self.claims is not None


@dataclass(frozen=True, slots=True)
class FirebaseIdentity:
    """
    Read-only view over verified Firebase ID token claims.
    """
    uid: str
    email: Optional[str] = None
    email_verified: bool = False
    name: Optional[str] = None
    picture: Optional[str] = None
    sign_in_provider: Optional[str] = None
    auth_time: Optional[float] = None
    issued_at: Optional[float] = None
    expires_at: Optional[float] = None
    claims: ClaimMap = field(default_factory=dict, repr=False)

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "FirebaseIdentity":
        firebase = claims.get("firebase")
        provider = get_string(firebase, "sign_in_provider") if isinstance(firebase, dict) else None

        return cls(
            uid=get_string(claims, "sub") or "",
            email=get_string(claims, "email"),
            email_verified=claims.get("email_verified") is True,
            name=get_string(claims, "name"),
            picture=get_string(claims, "picture"),
            sign_in_provider=provider,
            auth_time=get_number(claims, "auth_time"),
            issued_at=get_number(claims, "iat"),
            expires_at=get_number(claims, "exp"),
            claims=dict(claims),
        )

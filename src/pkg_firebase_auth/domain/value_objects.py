# src/pkg_firebase_auth/domain/value_objects.py

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Tuple

from .constants import EXPECTED_ALGORITHM, ISSUER_PREFIX
from .entities import get_number, get_string

ClaimPredicate = Callable[[Mapping[str, Any]], bool]

_MISSING = object()


# --- Provider value objects ----------------------------------------------


@dataclass(frozen=True, slots=True)
class ProjectId:
    """
    Firebase project id. Doubles as the expected audience and as the
    suffix of the expected issuer.
    """
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError(f"Invalid Firebase project id: {self.value!r}")

    @property
    def issuer(self) -> str:
        return f"{ISSUER_PREFIX}{self.value}"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class JwksDocument:
    """
    What came back from the JWK endpoint.

    ``keys`` is None when the body had no key list (error bodies included).
    """
    keys: Optional[Tuple[Mapping[str, Any], ...]]
    cache_control: Optional[str] = None

    def find(self, kid: Optional[str]) -> Optional[Mapping[str, Any]]:
        return find_key(self.keys or (), kid)


def find_key(keys: Iterable[Mapping[str, Any]], kid: Optional[str]) -> Optional[Mapping[str, Any]]:
    return next((k for k in keys if isinstance(k, Mapping) and k.get("kid") == kid), None)


# --- Claim predicates ----------------------------------------------------


def unix_now() -> int:
    return round(time.time())


class ClaimCheck:
    """Base for named claim predicates. Instances are callable."""

    def evaluate(self, claims: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def __call__(self, claims: Mapping[str, Any]) -> bool:
        return self.evaluate(claims)


@dataclass(frozen=True, slots=True)
class Equals(ClaimCheck):
    """``claims[key]`` equals ``expected`` (same JSON type, same value)."""
    key: str
    expected: Any

    def evaluate(self, claims: Mapping[str, Any]) -> bool:
        value = claims.get(self.key, _MISSING)
        if value is _MISSING:
            return False
        # bool is an int subclass; True must not equal 1
        if isinstance(value, bool) != isinstance(self.expected, bool):
            return False
        return value == self.expected


@dataclass(frozen=True, slots=True)
class InFuture(ClaimCheck):
    """Numeric timestamp strictly after now (Unix seconds)."""
    key: str
    clock: Callable[[], int] = field(default=unix_now, compare=False, repr=False)

    def evaluate(self, claims: Mapping[str, Any]) -> bool:
        value = get_number(claims, self.key)
        return value is not None and value > self.clock()


@dataclass(frozen=True, slots=True)
class InPast(ClaimCheck):
    """Numeric timestamp at or before now (Unix seconds)."""
    key: str
    clock: Callable[[], int] = field(default=unix_now, compare=False, repr=False)

    def evaluate(self, claims: Mapping[str, Any]) -> bool:
        value = get_number(claims, self.key)
        return value is not None and value <= self.clock()


@dataclass(frozen=True, slots=True)
class NotEmpty(ClaimCheck):
    key: str

    def evaluate(self, claims: Mapping[str, Any]) -> bool:
        return bool(get_string(claims, self.key))


@dataclass(frozen=True, slots=True)
class Custom(ClaimCheck):
    """Wraps an arbitrary caller predicate so it can be named in logs."""
    fn: ClaimPredicate
    name: str = "custom"

    def evaluate(self, claims: Mapping[str, Any]) -> bool:
        return bool(self.fn(claims))


def validate_claims(claims: Mapping[str, Any], checks: Iterable[ClaimPredicate]) -> bool:
    """AND over all checks. An empty set of checks passes."""
    return all(check(claims) for check in checks)


def standard_payload_checks(
        project_id: ProjectId,
        clock: Callable[[], int] = unix_now,
) -> Sequence[ClaimCheck]:
    """The fixed Firebase ID token payload checks."""
    return (
        InFuture("exp", clock=clock),
        InPast("iat", clock=clock),
        Equals("aud", project_id.value),
        Equals("iss", project_id.issuer),
        NotEmpty("sub"),
        InPast("auth_time", clock=clock),
    )


def standard_header_checks() -> Sequence[ClaimCheck]:
    return (
        Equals("alg", EXPECTED_ALGORITHM),
        NotEmpty("kid"),
    )

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

import structlog

from ...domain.constants import RejectionReason
from ...domain.entities import ClaimMap, VerificationOutcome
from ...domain.exceptions import (
    AuthenticationError,
    ClaimValidationError,
    KeyNotFoundError,
    SignatureInvalidError,
)
from ...domain.ports import ProviderKeyResolver, SignatureVerifier, TokenDecoder
from ...domain.value_objects import (
    ClaimPredicate,
    ProjectId,
    standard_header_checks,
    standard_payload_checks,
    unix_now,
    validate_claims,
)

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class AuthenticateFirebaseTokenUseCase:
    """
    Application use case:
    - Decode a Firebase ID token via TokenDecoder port
    - Check the standard payload claims, the header, then caller checks
    - Resolve the signing key and verify the signature

    Verification is all-or-nothing. The outcome carries either the
    payload claims or a rejection reason; the reason is logged here and
    never handed to HTTP callers.
    """

    project_id: ProjectId
    token_decoder: TokenDecoder
    key_resolver: ProviderKeyResolver
    verifier: SignatureVerifier
    clock: Callable[[], int] = field(default=unix_now)

    async def execute(
            self,
            token: Optional[str],
            extra_checks: Iterable[ClaimPredicate] = (),
    ) -> VerificationOutcome:
        if not token:
            return self._reject(RejectionReason.NO_TOKEN, "No token provided")

        try:
            claims = await self._verify(token, tuple(extra_checks))
        except AuthenticationError as exc:
            return self._reject(exc.reason, str(exc))
        except Exception as exc:  # noqa: BLE001
            # cache backend failures, misbehaving caller checks, bugs
            logger.error("Unexpected error during token verification", error=str(exc), exc_info=True)
            return VerificationOutcome.rejected(RejectionReason.INTERNAL_ERROR, str(exc))

        logger.debug("Token verified", sub=claims.get("sub"))
        return VerificationOutcome.authenticated(claims)

    # ------------------------------------------------------------------ #
    # Internal: the verification pipeline
    # ------------------------------------------------------------------ #

    async def _verify(self, token: str, extra_checks: tuple) -> ClaimMap:
        decoded = self.token_decoder.decode(token)

        self._require(decoded.payload, standard_payload_checks(self.project_id, clock=self.clock), "payload")
        self._require(decoded.header, standard_header_checks(), "header")
        self._require(decoded.payload, extra_checks, "caller")

        jwk = await self.key_resolver.get_provider_key(decoded.key_id)
        if jwk is None:
            raise KeyNotFoundError(f"No public key for kid {decoded.key_id!r}")

        if not self.verifier.verify(jwk, decoded.signing_input, decoded.signature):
            raise SignatureInvalidError("Signature not valid")

        return decoded.payload

    @staticmethod
    def _require(claims: Mapping[str, Any], checks: Sequence[ClaimPredicate], scope: str) -> None:
        if not validate_claims(claims, checks):
            failed = next(check for check in checks if not check(claims))
            name = getattr(failed, "name", None) or getattr(failed, "__name__", None) or repr(failed)
            raise ClaimValidationError(f"{scope.capitalize()} claims not valid: {name}")

    @staticmethod
    def _reject(reason: RejectionReason, detail: str) -> VerificationOutcome:
        logger.warning("Token verification failed", reason=reason.value, error=detail)
        return VerificationOutcome.rejected(reason, detail)

from .constants import RejectionReason


class AuthenticationError(Exception):
    """Raised when authentication fails."""
    reason: RejectionReason = RejectionReason.INTERNAL_ERROR


class InvalidTokenError(AuthenticationError):
    """Raised when the token itself is unacceptable."""
    pass


class MalformedTokenError(InvalidTokenError):
    """Raised when token structure, encoding or JSON is broken."""
    reason = RejectionReason.MALFORMED_TOKEN


class ClaimValidationError(InvalidTokenError):
    """Raised when a header or payload claim check fails."""
    reason = RejectionReason.CLAIMS_INVALID


class SignatureInvalidError(InvalidTokenError):
    """Raised when the signature does not match the signed segments."""
    reason = RejectionReason.SIGNATURE_INVALID


class KeyNotFoundError(AuthenticationError):
    """Raised when no public key matches the token's key id."""
    reason = RejectionReason.KEY_NOT_FOUND


class KeyFetchError(AuthenticationError):
    """Raised when the JWK set cannot be retrieved."""
    reason = RejectionReason.KEY_FETCH_FAILED


class KeyImportError(AuthenticationError):
    """Raised when the provider's key material cannot be loaded."""
    reason = RejectionReason.KEY_IMPORT_FAILED

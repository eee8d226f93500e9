import json
from typing import Any, Mapping

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey
from jwt.algorithms import RSAAlgorithm
from jwt.exceptions import InvalidKeyError

from ..domain.exceptions import KeyImportError
from ..domain.ports import SignatureVerifier


class RSASignatureVerifier(SignatureVerifier):
    """
    RSASSA-PKCS1-v1_5 with SHA-256 (JWS "RS256") via PyJWT.
    """

    def __init__(self) -> None:
        self._algorithm = RSAAlgorithm(RSAAlgorithm.SHA256)

    def verify(self, jwk: Mapping[str, Any], signing_input: bytes, signature: bytes) -> bool:
        kid = jwk.get("kid")
        try:
            public_key = RSAAlgorithm.from_jwk(json.dumps(dict(jwk)))
        except (InvalidKeyError, KeyError, TypeError, ValueError) as exc:
            raise KeyImportError(f"Cannot import JWK {kid!r}: {exc}") from exc

        if not isinstance(public_key, RSAPublicKey):
            raise KeyImportError(f"JWK {kid!r} is not an RSA public key")

        return self._algorithm.verify(signing_input, public_key, signature)

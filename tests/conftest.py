# tests/conftest.py
import json
import time
from typing import Any, Dict, List, Optional

import pytest
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from jwt.algorithms import RSAAlgorithm

from pkg_firebase_auth.adapters.base64url import encode
from pkg_firebase_auth.domain.value_objects import JwksDocument

PROJECT_ID = "demo-project"
KID = "test-kid-1"


def b64_json(data: Dict[str, Any]) -> str:
    return encode(json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8"))


def valid_claims(**overrides: Any) -> Dict[str, Any]:
    now = int(time.time())
    claims = {
        "iss": f"https://securetoken.google.com/{PROJECT_ID}",
        "aud": PROJECT_ID,
        "auth_time": now - 60,
        "user_id": "uid-123",
        "sub": "uid-123",
        "iat": now - 30,
        "exp": now + 3600,
        "email": "jane@example.com",
        "email_verified": True,
        "firebase": {"sign_in_provider": "password", "identities": {}},
    }
    claims.update(overrides)
    return claims


class TokenFactory:
    """Mints RS256 tokens the way Firebase Auth does."""

    def __init__(self, private_key: rsa.RSAPrivateKey, kid: str = KID) -> None:
        self.private_key = private_key
        self.kid = kid

    @property
    def jwk(self) -> Dict[str, Any]:
        data = json.loads(RSAAlgorithm.to_jwk(self.private_key.public_key()))
        data.update({"kid": self.kid, "alg": "RS256", "use": "sig"})
        return data

    def sign(self, data: bytes) -> bytes:
        return self.private_key.sign(data, padding.PKCS1v15(), hashes.SHA256())

    def mint(
        self,
        claims: Optional[Dict[str, Any]] = None,
        header: Optional[Dict[str, Any]] = None,
    ) -> str:
        header = header if header is not None else {"alg": "RS256", "kid": self.kid, "typ": "JWT"}
        raw_header = b64_json(header)
        raw_payload = b64_json(claims if claims is not None else valid_claims())
        signature = self.sign(f"{raw_header}.{raw_payload}".encode("utf-8"))
        return f"{raw_header}.{raw_payload}.{encode(signature)}"


class RecordingCache:
    """KeyValueCache fake that remembers every put."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.store: Dict[str, str] = dict(initial or {})
        self.puts: List[tuple] = []
        self.gets = 0

    async def get(self, key: str) -> Optional[str]:
        self.gets += 1
        return self.store.get(key)

    async def put(self, key: str, value: str, *, expiration_ttl: Optional[int] = None) -> None:
        self.puts.append((key, value, expiration_ttl))
        self.store[key] = value


class StaticFetcher:
    """JwksFetcher fake returning a fixed document and counting calls."""

    def __init__(self, keys: Optional[List[Dict[str, Any]]], cache_control: Optional[str] = None) -> None:
        self.document = JwksDocument(
            keys=tuple(keys) if keys is not None else None,
            cache_control=cache_control,
        )
        self.calls = 0

    async def fetch(self) -> JwksDocument:
        self.calls += 1
        return self.document


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def tokens(rsa_private_key) -> TokenFactory:
    return TokenFactory(rsa_private_key)


@pytest.fixture
def cache() -> RecordingCache:
    return RecordingCache()


@pytest.fixture
def fetcher(tokens) -> StaticFetcher:
    return StaticFetcher([tokens.jwk], cache_control="public, max-age=19800, must-revalidate, no-transform")

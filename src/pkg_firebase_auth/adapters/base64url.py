"""
URL-safe, unpadded base64 as used by compact JWS tokens.
"""

from __future__ import annotations

import base64
import binascii

from ..domain.exceptions import MalformedTokenError

_TO_STANDARD = str.maketrans("-_", "+/")

# len % 4 -> padding to restore; a remainder of 1 can never be valid
_PADDING = {0: "", 2: "==", 3: "="}


def decode(text: str) -> bytes:
    """
    Decode base64url text into raw bytes.

    Raises MalformedTokenError for characters outside the alphabet or an
    impossible length.
    """
    try:
        padding = _PADDING[len(text) % 4]
    except KeyError:
        raise MalformedTokenError("Illegal base64url string: bad length") from None

    try:
        return base64.b64decode(text.translate(_TO_STANDARD) + padding, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedTokenError(f"Illegal base64url string: {exc}") from exc


def encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")

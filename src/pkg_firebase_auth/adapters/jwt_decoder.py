import json
from typing import Any, Dict

from . import base64url
from ..domain.entities import DecodedToken
from ..domain.exceptions import MalformedTokenError
from ..domain.ports import TokenDecoder


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON
    raise ValueError(f"Non-standard JSON constant {name}")


class CompactTokenDecoder(TokenDecoder):
    """
    Splits a compact JWS token and decodes its header and payload.

    Does NOT verify anything: signature and claims are checked by the
    authenticate use case.
    """

    def decode(self, token: str) -> DecodedToken:
        """
        Raises:
            MalformedTokenError
        """
        if not isinstance(token, str):
            raise MalformedTokenError("Token must be a string")

        parts = token.split(".")
        if len(parts) != 3:
            raise MalformedTokenError(f"Expected 3 token segments, got {len(parts)}")

        raw_header, raw_payload, raw_signature = parts

        return DecodedToken(
            header=self._decode_json_segment(raw_header, "header"),
            payload=self._decode_json_segment(raw_payload, "payload"),
            signature=base64url.decode(raw_signature),
            raw_header=raw_header,
            raw_payload=raw_payload,
        )

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _decode_json_segment(segment: str, name: str) -> Dict[str, Any]:
        data = base64url.decode(segment)

        try:
            # Payloads may carry non-ASCII names, so decode as UTF-8 first
            value = json.loads(data.decode("utf-8"), parse_constant=_reject_constant)
        except ValueError as exc:
            raise MalformedTokenError(f"Invalid {name} segment: {exc}") from exc

        if not isinstance(value, dict):
            raise MalformedTokenError(f"Token {name} is not a JSON object")

        return value

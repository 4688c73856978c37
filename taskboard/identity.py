"""
Session tokens.

A token is three URL-safe base64 segments joined by dots:

    header.payload.check

    header  = {"alg": "none", "typ": "TBT"}
    payload = {"userId": ..., "iat": <epoch s>, "exp": <epoch s>}
    check   = CRC-32 of "header.payload", as 8 hex digits

The check segment only catches corrupted or hand-edited tokens. It carries no
secret: anyone can mint a token for any account id. Validation does not
confirm the account still exists and there is no revocation list.
"""
import base64
import binascii
import json
import logging
import math
import time
import zlib
from typing import Callable, Optional, Dict, Any

logger = logging.getLogger(__name__)

TOKEN_HEADER = {"alg": "none", "typ": "TBT"}
DEFAULT_TTL_SECONDS = 24 * 60 * 60


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64decode(segment: str) -> bytes:
    """Decode one segment; non-canonical encodings are rejected."""
    padded = segment + "=" * (-len(segment) % 4)
    data = base64.urlsafe_b64decode(padded.encode("ascii"))
    if _b64encode(data) != segment:
        raise ValueError("non-canonical base64 segment")
    return data


def _checksum(signing_input: str) -> str:
    return _b64encode(f"{zlib.crc32(signing_input.encode('ascii')):08x}".encode("ascii"))


class IdentityService:
    """Issues and validates opaque session tokens bound to an account id."""

    def __init__(self, ttl_seconds: int = DEFAULT_TTL_SECONDS,
                 clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    def issue_token(self, account_id: str) -> str:
        """Encode the account id and an expiry `ttl_seconds` from now."""
        issued = int(self.clock())
        payload = {"userId": account_id, "iat": issued, "exp": issued + self.ttl_seconds}
        header_seg = _b64encode(json.dumps(TOKEN_HEADER, separators=(",", ":")).encode("utf-8"))
        payload_seg = _b64encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
        signing_input = f"{header_seg}.{payload_seg}"
        return f"{signing_input}.{_checksum(signing_input)}"

    def decode_token(self, token: Any) -> Optional[Dict[str, Any]]:
        """
        Decode a token's payload without checking expiry.

        Returns None for anything structurally wrong: wrong part count,
        undecodable segments, checksum mismatch, or a payload missing a
        string userId / numeric exp.
        """
        if not isinstance(token, str) or not token:
            return None
        parts = token.split(".")
        if len(parts) != 3:
            return None
        header_seg, payload_seg, check_seg = parts
        try:
            signing_input = f"{header_seg}.{payload_seg}"
            if _checksum(signing_input) != check_seg:
                return None
            header = json.loads(_b64decode(header_seg).decode("utf-8"))
            payload = json.loads(_b64decode(payload_seg).decode("utf-8"))
        except (ValueError, UnicodeError, binascii.Error):
            return None
        if header != TOKEN_HEADER or not isinstance(payload, dict):
            return None
        user_id = payload.get("userId")
        exp = payload.get("exp")
        if not isinstance(user_id, str) or not user_id:
            return None
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            return None
        if isinstance(exp, float) and not math.isfinite(exp):
            return None
        return payload

    def validate_token(self, token: Any) -> Optional[str]:
        """Return the token's account id, or None if it is malformed or expired."""
        payload = self.decode_token(token)
        if payload is None:
            logger.warning("Rejected malformed session token")
            return None
        if self.clock() > payload["exp"]:
            logger.warning("Rejected expired session token")
            return None
        return payload["userId"]

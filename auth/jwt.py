"""
JWT-style token creation and verification.

Tokens are compact HS256 JWTs: base64url header, payload and HMAC-SHA256
signature joined by dots. The payload carries ``sub`` (user id), ``iat``
and ``exp``. The secret is handed to ``TokenSigner`` at construction
(``create_app`` reads it from ``config.jwt_secret``, env var ``JWT_SECRET``).
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Any, Callable, Dict, Optional

from auth.errors import TokenError, TokenErrorKind

_HEADER = {"alg": "HS256", "typ": "JWT"}


def _b64encode(raw: bytes) -> str:
    return urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(segment: str) -> bytes:
    padded = segment + "=" * (-len(segment) % 4)
    return urlsafe_b64decode(padded.encode("ascii"))


def _encode_json(obj: Dict[str, Any]) -> str:
    return _b64encode(json.dumps(obj, separators=(",", ":")).encode())


class TokenSigner:
    """Issues and verifies signed bearer tokens for one secret."""

    def __init__(
        self,
        secret: str,
        expiry_seconds: int = 86400,
        clock: Callable[[], float] = time.time,
    ):
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret.encode()
        self.expiry_seconds = expiry_seconds
        self._clock = clock

    def __repr__(self) -> str:
        return f"TokenSigner(expiry_seconds={self.expiry_seconds})"

    def _sign(self, signing_input: str) -> str:
        digest = hmac.new(self._secret, signing_input.encode("ascii"), hashlib.sha256).digest()
        return _b64encode(digest)

    def issue(self, subject: str) -> str:
        """Create a signed token for ``subject`` that expires after ``expiry_seconds``."""
        now = int(self._clock())
        payload = {"sub": subject, "iat": now, "exp": now + self.expiry_seconds}
        signing_input = _encode_json(_HEADER) + "." + _encode_json(payload)
        return signing_input + "." + self._sign(signing_input)

    def verify(self, token: Optional[str]) -> str:
        """
        Verify ``token`` and return its subject.

        Raises ``TokenError`` with kind MISSING, MALFORMED, BAD_SIGNATURE or
        EXPIRED. The signature is checked before the payload is parsed.
        """
        if not token:
            raise TokenError(TokenErrorKind.MISSING)

        # base64url segments are ASCII; headers arrive decoded as latin-1.
        if not token.isascii():
            raise TokenError(TokenErrorKind.MALFORMED, "non-ascii token")

        parts = token.split(".")
        if len(parts) != 3:
            raise TokenError(TokenErrorKind.MALFORMED, "bad format")
        header_seg, payload_seg, sig_seg = parts

        try:
            header = json.loads(_b64decode(header_seg))
        except (ValueError, UnicodeError) as exc:
            raise TokenError(TokenErrorKind.MALFORMED, "bad header") from exc
        if not isinstance(header, dict) or header.get("alg") != _HEADER["alg"]:
            raise TokenError(TokenErrorKind.MALFORMED, "unsupported algorithm")

        expected_sig = self._sign(header_seg + "." + payload_seg)
        if not hmac.compare_digest(sig_seg.encode("ascii"), expected_sig.encode("ascii")):
            raise TokenError(TokenErrorKind.BAD_SIGNATURE, "bad signature")

        try:
            payload = json.loads(_b64decode(payload_seg))
        except (ValueError, UnicodeError) as exc:
            raise TokenError(TokenErrorKind.MALFORMED, "bad payload") from exc
        if not isinstance(payload, dict):
            raise TokenError(TokenErrorKind.MALFORMED, "bad payload")

        subject = payload.get("sub")
        exp = payload.get("exp")
        if not isinstance(subject, str) or not subject or not isinstance(exp, (int, float)):
            raise TokenError(TokenErrorKind.MALFORMED, "missing claims")
        if exp <= self._clock():
            raise TokenError(TokenErrorKind.EXPIRED, "token expired")
        return subject

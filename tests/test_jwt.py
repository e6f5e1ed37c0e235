"""
Tests for signed bearer tokens.
"""

import json
from base64 import urlsafe_b64decode, urlsafe_b64encode

import pytest

from auth.errors import TokenError, TokenErrorKind
from auth.jwt import TokenSigner

NOW = 1_700_000_000


class _Clock:
    def __init__(self, now: float = NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _decode(segment: str) -> dict:
    return json.loads(urlsafe_b64decode(segment + "=" * (-len(segment) % 4)))


def _encode(obj: dict) -> str:
    return urlsafe_b64encode(json.dumps(obj).encode()).rstrip(b"=").decode()


def _kind(signer: TokenSigner, token) -> TokenErrorKind:
    with pytest.raises(TokenError) as excinfo:
        signer.verify(token)
    return excinfo.value.kind


class TestIssue:
    def test_round_trip_returns_subject(self):
        signer = TokenSigner("s3cret", clock=_Clock())
        assert signer.verify(signer.issue("user-1")) == "user-1"

    def test_compact_three_segments(self):
        token = TokenSigner("s3cret").issue("user-1")
        header, payload, sig = token.split(".")
        assert _decode(header) == {"alg": "HS256", "typ": "JWT"}
        assert sig

    def test_payload_claims_expire_after_one_day(self):
        signer = TokenSigner("s3cret", clock=_Clock())
        payload = _decode(signer.issue("user-1").split(".")[1])
        assert payload == {"sub": "user-1", "iat": NOW, "exp": NOW + 86400}

    def test_empty_secret_rejected(self):
        with pytest.raises(ValueError):
            TokenSigner("")

    def test_repr_hides_secret(self):
        assert "s3cret" not in repr(TokenSigner("s3cret"))


class TestVerify:
    def test_missing(self):
        signer = TokenSigner("s3cret")
        assert _kind(signer, None) == TokenErrorKind.MISSING
        assert _kind(signer, "") == TokenErrorKind.MISSING

    def test_malformed(self):
        signer = TokenSigner("s3cret")
        assert _kind(signer, "abc") == TokenErrorKind.MALFORMED
        assert _kind(signer, "a.b") == TokenErrorKind.MALFORMED
        assert _kind(signer, "not.a.token") == TokenErrorKind.MALFORMED

    def test_unsupported_algorithm(self):
        signer = TokenSigner("s3cret")
        _, payload, sig = signer.issue("user-1").split(".")
        forged = _encode({"alg": "none", "typ": "JWT"}) + "." + payload + "." + sig
        assert _kind(signer, forged) == TokenErrorKind.MALFORMED

    def test_altered_signature(self):
        signer = TokenSigner("s3cret")
        token = signer.issue("user-1")
        last = "A" if token[-1] != "A" else "B"
        assert _kind(signer, token[:-1] + last) == TokenErrorKind.BAD_SIGNATURE

    def test_altered_subject(self):
        clock = _Clock()
        signer = TokenSigner("s3cret", clock=clock)
        header, _, sig = signer.issue("user-1").split(".")
        forged_payload = _encode({"sub": "admin", "iat": NOW, "exp": NOW + 86400})
        forged = f"{header}.{forged_payload}.{sig}"
        assert _kind(signer, forged) == TokenErrorKind.BAD_SIGNATURE

    def test_other_secret(self):
        token = TokenSigner("other").issue("user-1")
        assert _kind(TokenSigner("s3cret"), token) == TokenErrorKind.BAD_SIGNATURE

    def test_non_ascii_segments_are_malformed(self):
        signer = TokenSigner("s3cret")
        header, payload, sig = signer.issue("user-1").split(".")
        assert _kind(signer, f"{header}.é.x") == TokenErrorKind.MALFORMED
        assert _kind(signer, f"{header}.{payload}.{sig[:-1]}é") == TokenErrorKind.MALFORMED

    def test_expiry_checked_at_verification_time(self):
        clock = _Clock()
        signer = TokenSigner("s3cret", clock=clock)
        token = signer.issue("user-1")

        clock.now = NOW + 86399
        assert signer.verify(token) == "user-1"

        clock.now = NOW + 86400
        assert _kind(signer, token) == TokenErrorKind.EXPIRED

    def test_custom_lifetime(self):
        clock = _Clock()
        signer = TokenSigner("s3cret", expiry_seconds=60, clock=clock)
        token = signer.issue("user-1")
        clock.now = NOW + 61
        assert _kind(signer, token) == TokenErrorKind.EXPIRED

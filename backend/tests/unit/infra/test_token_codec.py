# tests/unit/infra/test_token_codec.py
"""
Unit tests for JWTTokenCodec backed by PyJWT.

Covers:
- mint/decode round trip (ordered claims, repeated claims, metadata)
- expiry handling with and without validation, clock skew
- tampering, wrong algorithm, issuer and audience checks
- signing failures surfacing as an internal fault
"""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta

import jwt
import pytest

from spoiler_auth.infra.jwt.pyjwt_token_codec import (
    JWTTokenCodec,
    claims_to_payload,
    payload_to_claims,
)
from spoiler_auth.services._shared.errors import (
    AudienceMismatchError,
    AuthError,
    InvalidTokenError,
    IssuerMismatchError,
    SignatureInvalidError,
    TokenExpiredError,
    TokenSigningError,
)
from tests.helpers.auth import (
    alter_signature_tail,
    flip_signature,
    replace_payload,
    truncate_signature,
)


def _now() -> datetime:
    return datetime.now(UTC)


def _claims(user: str = "alice") -> tuple:
    return (
        ("unique_name", user),
        ("name", user),
        ("iat", int(_now().timestamp())),
        ("sub", user),
        ("email", f"{user}@example.com"),
        ("amr", "pwd"),
        ("role", "Admin"),
    )


def test_round_trip_returns_equivalent_claims(codec):
    claims = _claims()
    expires_at = _now() + timedelta(minutes=30)

    decoded = codec.decode(codec.mint(claims, expires_at))

    assert decoded.claims == claims
    assert decoded.subject == "alice"
    assert decoded.expires_at == datetime.fromtimestamp(int(expires_at.timestamp()), tz=UTC)
    assert decoded.issuer == "spoiler-auth-tests"
    assert decoded.audience == ("spoiler-api",)
    assert decoded.token_id


def test_repeated_claims_survive_round_trip(codec):
    claims = _claims() + (("role", "Reader"),)
    decoded = codec.decode(codec.mint(claims, _now() + timedelta(minutes=5)))

    assert [v for t, v in decoded.claims if t == "role"] == ["Admin", "Reader"]


def test_payload_folding_helpers():
    payload = claims_to_payload((("sub", "a"), ("role", "x"), ("role", "y"), ("role", "z")))
    assert payload == {"sub": "a", "role": ["x", "y", "z"]}
    assert payload_to_claims({**payload, "exp": 1, "iss": "i", "aud": "a", "jti": "j"}) == (
        ("sub", "a"),
        ("role", "x"),
        ("role", "y"),
        ("role", "z"),
    )


def test_each_mint_is_unique(codec):
    claims = _claims()
    expires_at = _now() + timedelta(minutes=5)
    assert codec.mint(claims, expires_at) != codec.mint(claims, expires_at)


def test_mint_keeps_explicit_audience(codec):
    claims = _claims() + (("aud", "spoiler-api"),)
    token = codec.mint(claims, _now() + timedelta(minutes=5))
    assert codec.decode(token).audience == ("spoiler-api",)


@pytest.mark.parametrize("token", [None, "", "   "])
def test_empty_token_is_invalid(codec, token):
    with pytest.raises(InvalidTokenError):
        codec.decode(token)


@pytest.mark.parametrize("token", ["not-a-jwt", "a.b", "a.b.c"])
def test_malformed_token_is_invalid(codec, token):
    with pytest.raises(InvalidTokenError):
        codec.decode(token)


def test_broken_payload_segment_stays_invalid(codec):
    """Only the signature segment may be undecodable for a tampering verdict."""
    header, _, signature = codec.mint(_claims(), _now() + timedelta(minutes=5)).split(".")

    with pytest.raises(InvalidTokenError) as excinfo:
        codec.decode(".".join([header, "bm90LWpzb24", signature[:41]]))
    assert type(excinfo.value) is InvalidTokenError


def test_expired_token_fails_only_when_expiry_is_validated(codec):
    token = codec.mint(_claims(), _now() - timedelta(minutes=5))

    with pytest.raises(TokenExpiredError):
        codec.decode(token, validate_expiry=True)

    decoded = codec.decode(token, validate_expiry=False)
    assert decoded.subject == "alice"


def test_clock_skew_tolerates_recent_expiry(codec):
    token = codec.mint(_claims(), _now() - timedelta(seconds=20))
    assert codec.decode(token, validate_expiry=True).subject == "alice"


def test_expiry_with_frozen_clock(codec, freeze_time):
    with freeze_time("2024-01-01 12:00:00") as frozen:
        token = codec.mint(_claims(), _now() + timedelta(minutes=10))

        frozen.tick(timedelta(minutes=10, seconds=30))
        assert codec.decode(token).subject == "alice"

        frozen.tick(timedelta(minutes=1))
        with pytest.raises(TokenExpiredError):
            codec.decode(token)


def _tampered(codec, how: str) -> str:
    token = codec.mint(_claims(), _now() + timedelta(minutes=5))
    if how == "signature":
        return flip_signature(token)
    if how == "signature_last_char":
        return alter_signature_tail(token)
    if how == "signature_truncated":
        return truncate_signature(token)
    if how == "payload":
        return replace_payload(token, sub="mallory")
    if how == "secret":
        forger = JWTTokenCodec(replace(codec.cfg, secret_key="another-secret-with-enough-entropy-987654"))
        return forger.mint(_claims("mallory"), _now() + timedelta(minutes=5))
    raise AssertionError(how)


@pytest.mark.parametrize(
    "how",
    ["signature", "signature_last_char", "signature_truncated", "payload", "secret"],
)
@pytest.mark.parametrize("validate_expiry", [True, False])
def test_tampered_token_fails_with_signature_invalid(codec, how, validate_expiry):
    token = _tampered(codec, how)
    with pytest.raises(AuthError) as excinfo:
        codec.decode(token, validate_expiry=validate_expiry)
    assert type(excinfo.value) is SignatureInvalidError


def test_tampered_expired_token_still_reports_signature(codec):
    token = flip_signature(codec.mint(_claims(), _now() - timedelta(hours=1)))
    with pytest.raises(SignatureInvalidError):
        codec.decode(token, validate_expiry=True)


def test_unaccepted_algorithm_is_signature_invalid(codec):
    hs512 = JWTTokenCodec(replace(codec.cfg, algorithm="HS512"))
    token = hs512.mint(_claims(), _now() + timedelta(minutes=5))
    with pytest.raises(SignatureInvalidError):
        codec.decode(token)


def test_unsigned_token_is_rejected(codec):
    token = jwt.encode(
        {"sub": "mallory", "exp": int((_now() + timedelta(minutes=5)).timestamp())},
        key=None,
        algorithm="none",
    )
    with pytest.raises(SignatureInvalidError):
        codec.decode(token)


def test_issuer_mismatch(codec):
    foreign = JWTTokenCodec(replace(codec.cfg, issuer="someone-else"))
    token = foreign.mint(_claims(), _now() + timedelta(minutes=5))
    with pytest.raises(IssuerMismatchError):
        codec.decode(token)


def test_missing_issuer_is_a_mismatch(codec):
    token = jwt.encode(
        {"sub": "alice", "aud": "spoiler-api", "exp": int((_now() + timedelta(minutes=5)).timestamp())},
        codec.cfg.secret_key,
        algorithm="HS256",
    )
    with pytest.raises(IssuerMismatchError):
        codec.decode(token)


def test_audience_mismatch(codec):
    foreign = JWTTokenCodec(replace(codec.cfg, audiences=("other-api",)))
    token = foreign.mint(_claims(), _now() + timedelta(minutes=5))

    with pytest.raises(AudienceMismatchError):
        codec.decode(token)

    lenient = JWTTokenCodec(replace(codec.cfg, validate_audience=False))
    assert lenient.decode(token).subject == "alice"


def test_any_accepted_audience_matches(codec):
    multi = JWTTokenCodec(replace(codec.cfg, audiences=("spoiler-api", "spoiler-admin")))
    token = multi.mint(_claims(), _now() + timedelta(minutes=5))

    decoded = codec.decode(token)
    assert decoded.audience == ("spoiler-api", "spoiler-admin")


def test_signing_failure_is_internal_fault(codec):
    claims = _claims() + (("blob", object()),)
    with pytest.raises(TokenSigningError) as excinfo:
        codec.mint(claims, _now() + timedelta(minutes=5))
    assert not isinstance(excinfo.value, AuthError)

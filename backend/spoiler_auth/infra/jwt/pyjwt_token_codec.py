# spoiler_auth/infra/jwt/pyjwt_token_codec.py
from __future__ import annotations

import binascii
import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import jwt
from jwt.utils import base64url_decode

from spoiler_auth.services._shared.errors import (
    AudienceMismatchError,
    InvalidTokenError,
    IssuerMismatchError,
    SignatureInvalidError,
    TokenExpiredError,
    TokenSigningError,
)
from spoiler_auth.services._shared.ports import ClaimSet, DecodedToken, TokenCodec
from spoiler_auth.services.auth.dto import AuthTokenConfig

log = logging.getLogger(__name__)

# Claims owned by the codec; stripped from the claim set handed back by decode().
MANAGED_CLAIMS = ("exp", "iss", "aud", "jti")


def _header_and_payload_intact(token: str) -> bool:
    """Return whether the first two segments are base64url-encoded JSON objects."""
    parts = token.split(".")
    if len(parts) != 3:
        return False
    try:
        header, payload = (json.loads(base64url_decode(part)) for part in parts[:2])
    except (ValueError, TypeError, binascii.Error):
        return False
    return isinstance(header, dict) and isinstance(payload, dict)


def claims_to_payload(claims: ClaimSet) -> dict[str, Any]:
    """
    Fold an ordered claim set into a JWT payload.

    Repeated claim types (e.g. ``role``) collapse into a list in first-seen order.
    """
    payload: dict[str, Any] = {}
    for ctype, value in claims:
        if ctype not in payload:
            payload[ctype] = value
        elif isinstance(payload[ctype], list):
            payload[ctype].append(value)
        else:
            payload[ctype] = [payload[ctype], value]
    return payload


def payload_to_claims(payload: dict[str, Any]) -> ClaimSet:
    """Expand a JWT payload back into ordered ``(type, value)`` pairs."""
    claims: list[tuple[str, Any]] = []
    for ctype, value in payload.items():
        if ctype in MANAGED_CLAIMS:
            continue
        if isinstance(value, list):
            claims.extend((ctype, item) for item in value)
        else:
            claims.append((ctype, value))
    return tuple(claims)


@dataclass(slots=True)
class JWTTokenCodec(TokenCodec):
    """
    Adapter for PyJWT signing access tokens with a symmetric HMAC secret.

    .. note::
       Stateless: validity is determined purely by signature, issuer,
       audience and (optionally) expiry at decode time.
    """

    cfg: AuthTokenConfig

    def _audience_claim(self) -> str | list[str]:
        audiences = list(self.cfg.audiences)
        return audiences[0] if len(audiences) == 1 else audiences

    def mint(self, claims: ClaimSet, expires_at: datetime) -> str:
        payload = claims_to_payload(claims)
        payload["exp"] = int(expires_at.timestamp())
        payload.setdefault("jti", uuid4().hex)
        payload.setdefault("iss", self.cfg.issuer)
        if self.cfg.audiences:
            payload.setdefault("aud", self._audience_claim())

        try:
            return jwt.encode(payload, self.cfg.secret_key, algorithm=self.cfg.algorithm)
        except (TypeError, ValueError, jwt.PyJWTError) as exc:
            raise TokenSigningError("Unable to sign access token.") from exc

    def decode(self, token: str | None, *, validate_expiry: bool = True) -> DecodedToken:
        if token is None or not token.strip():
            raise InvalidTokenError()

        try:
            payload: dict[str, Any] = jwt.decode(
                token.strip(),
                self.cfg.secret_key,
                algorithms=[self.cfg.algorithm],
                issuer=self.cfg.issuer,
                audience=list(self.cfg.audiences) if self.cfg.validate_audience else None,
                leeway=self.cfg.clock_skew,
                options={
                    "require": ["exp", "sub"],
                    "verify_exp": validate_expiry,
                    "verify_aud": self.cfg.validate_audience,
                },
            )
        except jwt.ExpiredSignatureError as exc:
            log.debug("token.decode_failed kind=token_expired")
            raise TokenExpiredError() from exc
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as exc:
            log.debug("token.decode_failed kind=signature_invalid")
            raise SignatureInvalidError() from exc
        except jwt.InvalidIssuerError as exc:
            log.debug("token.decode_failed kind=issuer_mismatch")
            raise IssuerMismatchError() from exc
        except jwt.InvalidAudienceError as exc:
            log.debug("token.decode_failed kind=audience_mismatch")
            raise AudienceMismatchError() from exc
        except jwt.MissingRequiredClaimError as exc:
            log.debug("token.decode_failed kind=missing_claim claim=%s", exc.claim)
            if exc.claim == "iss":
                raise IssuerMismatchError() from exc
            if exc.claim == "aud":
                raise AudienceMismatchError() from exc
            raise InvalidTokenError() from exc
        except jwt.DecodeError as exc:
            # An undecodable signature on an otherwise well-formed token is tampering.
            if _header_and_payload_intact(token.strip()):
                log.debug("token.decode_failed kind=signature_invalid")
                raise SignatureInvalidError() from exc
            log.debug("token.decode_failed kind=invalid_token")
            raise InvalidTokenError() from exc
        except jwt.InvalidTokenError as exc:
            log.debug("token.decode_failed kind=invalid_token")
            raise InvalidTokenError() from exc

        aud = payload.get("aud")
        audience = tuple(aud) if isinstance(aud, list) else ((aud,) if aud else ())
        return DecodedToken(
            claims=payload_to_claims(payload),
            subject=str(payload["sub"]),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
            issuer=payload.get("iss"),
            audience=audience,
            token_id=payload.get("jti"),
        )

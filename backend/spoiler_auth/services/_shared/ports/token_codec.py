from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from .claims_provider import ClaimSet


@dataclass(frozen=True, slots=True)
class DecodedToken:
    """
    Result of a successful access token decode.

    :ivar claims: Embedded claims, without the codec-managed ``exp``/``iss``/``aud``/``jti``.
    :ivar subject: Resolved identity (``sub`` claim).
    :ivar expires_at: Absolute expiration (UTC).
    :ivar issuer: Verified issuer.
    :ivar audience: Audience(s) carried by the token.
    :ivar token_id: Unique token identifier (``jti``).
    """

    claims: ClaimSet
    subject: str
    expires_at: datetime
    issuer: str | None = None
    audience: tuple[str, ...] = ()
    token_id: str | None = None


class TokenCodec(Protocol):
    """Port for minting and verifying signed, self-contained access tokens."""

    def mint(self, claims: ClaimSet, expires_at: datetime) -> str:
        """
        Sign ``claims`` plus an expiry claim into a bearer token.

        :raises TokenSigningError: When the signing subsystem fails.
        """
        ...

    def decode(self, token: str | None, *, validate_expiry: bool = True) -> DecodedToken:
        """
        Verify and decode ``token``.

        :param validate_expiry: When ``False`` an expired token still decodes
            (used by the refresh flow to recover the identity).
        :raises AuthError: One of the codec error kinds.
        """
        ...

# spoiler_auth/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

SUPPORTED_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param access_token: Encoded access JWT (may already be expired).
    :type access_token: str | None
    :param refresh_token: Opaque refresh token to rotate.
    :type refresh_token: str
    """

    access_token: str | None
    refresh_token: str


@dataclass(frozen=True, slots=True)
class RevokeIn:
    """
    Input DTO for refresh token revocation.

    :param access_token: Encoded access JWT (must still be valid).
    :type access_token: str | None
    :param refresh_token: Opaque refresh token to revoke.
    :type refresh_token: str
    """

    access_token: str | None
    refresh_token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthResultOut:
    """
    Output DTO with the access/refresh token pair and their expiries.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param expires_at: Access token expiration (UTC).
    :type expires_at: datetime
    :param refresh_token: Opaque refresh token.
    :type refresh_token: str
    :param refresh_token_expires_at: Refresh token expiration (UTC).
    :type refresh_token_expires_at: datetime
    """

    access_token: str
    expires_at: datetime
    refresh_token: str
    refresh_token_expires_at: datetime


# ----------------------------- Config DTO --------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission and validation configuration.

    Changing ``secret_key`` invalidates every token issued before.

    :param secret_key: Symmetric HMAC signing secret.
    :type secret_key: str
    :param issuer: Value of the ``iss`` claim (emitted and expected).
    :type issuer: str
    :param audiences: Accepted audiences; the emitted ``aud`` uses all of them.
    :type audiences: tuple[str, ...]
    :param algorithm: One of HS256, HS384, HS512.
    :type algorithm: str
    :param validate_audience: Whether ``decode`` checks the ``aud`` claim.
    :type validate_audience: bool
    :param clock_skew: Leeway applied to ``exp``/``nbf``/``iat`` validation.
    :type clock_skew: timedelta
    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime.
    :type refresh_expires: timedelta
    """

    secret_key: str
    issuer: str
    audiences: tuple[str, ...] = ()
    algorithm: str = "HS256"
    validate_audience: bool = True
    clock_skew: timedelta = timedelta(minutes=1)
    access_expires: timedelta = timedelta(minutes=60)
    refresh_expires: timedelta = timedelta(minutes=43200)

    def __post_init__(self) -> None:
        if not self.secret_key:
            raise ValueError("A JWT signing secret is required.")
        if self.algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"Unsupported signing algorithm: {self.algorithm!r}")
        if self.validate_audience and not self.audiences:
            raise ValueError("Audience validation is enabled but no audience is configured.")

# spoiler_auth/services/auth/service.py
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from spoiler_auth.services._shared.base import BaseService, ServiceContext
from spoiler_auth.services._shared.errors import InvalidTokenError
from spoiler_auth.services._shared.ports import (
    ClaimsProvider,
    DecodedToken,
    Identity,
    RefreshTokenRecord,
    RefreshTokenStore,
    TokenCodec,
    first_claim,
)
from spoiler_auth.services.auth.dto import (
    AuthResultOut,
    AuthTokenConfig,
    RefreshIn,
    RevokeIn,
)

log = logging.getLogger(__name__)


class AuthSessionService(BaseService):
    """
    Authentication session lifecycle service (login / refresh / revoke).

    This service mints access tokens via a pluggable TokenCodec, builds their
    claims through a ClaimsProvider and manages refresh tokens via a
    RefreshTokenStore (atomic rotation + replay detection).
    """

    def __init__(
        self,
        *,
        token_codec: TokenCodec,
        refresh_store: RefreshTokenStore,
        claims_provider: ClaimsProvider,
        token_cfg: AuthTokenConfig,
        ctx: ServiceContext | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param token_codec: Adapter for minting/decoding access JWTs.
        :param refresh_store: Stateful store for refresh tokens (atomic rotation).
        :param claims_provider: Identity-to-claims mapping.
        :param token_cfg: Access/Refresh lifetime configuration.
        """
        super().__init__(ctx=ctx, clock=clock)
        self.tokens = token_codec
        self.refresh_store = refresh_store
        self.claims = claims_provider
        self.cfg = token_cfg

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, identity: Identity) -> AuthResultOut:
        """
        Issue a fresh token pair for an already authenticated identity.

        No prior refresh token is required or consulted.
        """
        result = self._issue(identity, presented_refresh_token=None)
        log.info("auth.login user_id=%s request_id=%s", identity.user_id, self.ctx.request_id)
        return result

    # ------------------------------------------------------------------ #
    # Refresh with atomic rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> AuthResultOut:
        """
        Rotate a refresh token and emit a new token pair.

        Security
        --------
        - The access token is decoded **without** expiry validation: refresh is
          the recovery path for an expired access token. Signature, issuer and
          audience are still enforced.
        - Only the identity is taken from the old token; claims are re-derived.
        - Rotation errors from the store propagate unchanged.
        """
        decoded = self.tokens.decode(dto.access_token, validate_expiry=False)
        identity = self._identity_from(decoded)
        result = self._issue(identity, presented_refresh_token=dto.refresh_token)
        log.info("auth.refresh user_id=%s request_id=%s", identity.user_id, self.ctx.request_id)
        return result

    # ------------------------------------------------------------------ #
    # Revoke
    # ------------------------------------------------------------------ #

    def revoke(self, dto: RevokeIn) -> None:
        """Revoke a refresh token; requires a currently valid access token."""
        decoded = self.tokens.decode(dto.access_token, validate_expiry=True)
        self.refresh_store.revoke(decoded.subject, dto.refresh_token)
        log.info("auth.revoke user_id=%s request_id=%s", decoded.subject, self.ctx.request_id)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _issue(self, identity: Identity, *, presented_refresh_token: str | None) -> AuthResultOut:
        now = self.now_utc()
        access_expires_at = now + self.cfg.access_expires

        # Rotate first: a rejected refresh token must not yield an access token.
        record: RefreshTokenRecord = self.refresh_store.rotate(
            identity.user_id,
            presented_refresh_token,
            now + self.cfg.refresh_expires,
        )
        access = self.tokens.mint(self.claims.get_claims(identity), access_expires_at)

        return AuthResultOut(
            access_token=access,
            expires_at=access_expires_at,
            refresh_token=record.token,
            refresh_token_expires_at=record.expires_at,
        )

    @staticmethod
    def _identity_from(decoded: DecodedToken) -> Identity:
        """Recover the identity carried by a decoded access token."""
        if not decoded.subject:
            raise InvalidTokenError("Invalid token subject.")
        name = first_claim(decoded.claims, "name")
        email = first_claim(decoded.claims, "email")
        return Identity(
            user_id=decoded.subject,
            username=str(name) if name else decoded.subject,
            email=str(email) if email else None,
        )

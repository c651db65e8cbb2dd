"""Per-application auth components and initialization helpers."""

from __future__ import annotations

from dataclasses import dataclass

from flask import Flask, current_app

from spoiler_auth.core.config import build_token_config, split_csv
from spoiler_auth.infra.jwt.pyjwt_token_codec import JWTTokenCodec
from spoiler_auth.services._shared.base import ServiceContext
from spoiler_auth.services._shared.ports import InMemoryRefreshTokenStore, RefreshTokenStore
from spoiler_auth.services.auth.claims import RoleClaimsProvider
from spoiler_auth.services.auth.dto import AuthTokenConfig
from spoiler_auth.services.auth.service import AuthSessionService

EXTENSION_KEY = "spoiler_auth"


@dataclass(slots=True)
class AuthComponents:
    """Long-lived collaborators owned by one Flask application."""

    token_cfg: AuthTokenConfig
    codec: JWTTokenCodec
    refresh_store: RefreshTokenStore
    claims_provider: RoleClaimsProvider

    def session_service(self, ctx: ServiceContext | None = None) -> AuthSessionService:
        """Build a request-scoped service over the shared collaborators."""
        return AuthSessionService(
            ctx=ctx,
            token_codec=self.codec,
            refresh_store=self.refresh_store,
            claims_provider=self.claims_provider,
            token_cfg=self.token_cfg,
        )


def init_app(app: Flask, *, refresh_store: RefreshTokenStore | None = None) -> None:
    """Build the token codec, claims provider and refresh store for ``app``.

    Parameters
    ----------
    app: flask.Flask
        Application that will own the components (``app.extensions``).
    refresh_store: RefreshTokenStore | None
        Optional pre-built store; a fresh in-memory store otherwise. The
        store lives as long as the application, i.e. the process.

    Raises
    ------
    ValueError
        When the token configuration is invalid (fails fast at startup).
    """
    token_cfg = build_token_config(app.config)
    app.extensions[EXTENSION_KEY] = AuthComponents(
        token_cfg=token_cfg,
        codec=JWTTokenCodec(token_cfg),
        refresh_store=refresh_store or InMemoryRefreshTokenStore(),
        claims_provider=RoleClaimsProvider(split_csv(app.config.get("AUTH_ROLES", "Admin"))),
    )


def get_auth() -> AuthComponents:
    """Return the auth components of the current application."""
    components = current_app.extensions.get(EXTENSION_KEY)
    if components is None:
        raise RuntimeError("Auth components are not initialized. Call init_app() first.")
    return components

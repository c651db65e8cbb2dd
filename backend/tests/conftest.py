"""Pytest fixtures wiring the auth core against deterministic settings.

Every test gets its own application and its own in-memory refresh token store,
so token families never leak between cases.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import timedelta
from typing import Any

import pytest
from flask import Flask
from flask.testing import FlaskClient

from spoiler_auth.core.config import TestingConfig
from spoiler_auth.factory import create_app
from spoiler_auth.infra.jwt.pyjwt_token_codec import JWTTokenCodec
from spoiler_auth.services._shared.ports import InMemoryRefreshTokenStore
from spoiler_auth.services.auth.claims import RoleClaimsProvider
from spoiler_auth.services.auth.dto import AuthTokenConfig
from spoiler_auth.services.auth.service import AuthSessionService

TEST_SECRET = "unit-test-secret-key-with-enough-entropy-0123456789"


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Pins the signing secret, issuer and audience.
    - Keeps logging quiet.
    """

    JWT_SECRET_KEY = TEST_SECRET
    JWT_ISSUER = "spoiler-auth-tests"
    JWT_AUDIENCES = "spoiler-api"
    LOG_LEVEL = "WARNING"


@pytest.fixture()
def app() -> Flask:
    """Create a Flask application configured for testing."""

    application = create_app(TestConfig)
    application.logger.setLevel("WARNING")
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a Flask test client."""

    return app.test_client()


@pytest.fixture()
def token_cfg() -> AuthTokenConfig:
    """Token settings mirroring :class:`TestConfig`."""

    return AuthTokenConfig(
        secret_key=TEST_SECRET,
        issuer="spoiler-auth-tests",
        audiences=("spoiler-api",),
        clock_skew=timedelta(seconds=60),
        access_expires=timedelta(minutes=60),
        refresh_expires=timedelta(days=30),
    )


@pytest.fixture()
def codec(token_cfg: AuthTokenConfig) -> JWTTokenCodec:
    return JWTTokenCodec(token_cfg)


@pytest.fixture()
def store() -> InMemoryRefreshTokenStore:
    return InMemoryRefreshTokenStore()


@pytest.fixture()
def service(
    codec: JWTTokenCodec,
    store: InMemoryRefreshTokenStore,
    token_cfg: AuthTokenConfig,
) -> AuthSessionService:
    """Build an AuthSessionService wired to the real codec and an in-memory store."""

    return AuthSessionService(
        token_codec=codec,
        refresh_store=store,
        claims_provider=RoleClaimsProvider(),
        token_cfg=token_cfg,
    )


@pytest.fixture()
def freeze_time() -> Callable[[str | None], Any]:
    """Factory returning :func:`freezegun.freeze_time`.

    Examples
    --------
    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2024-01-01") as frozen:
    ...         frozen.tick(timedelta(hours=1))
    """

    from freezegun import freeze_time as _freeze_time

    def _factory(target: str | None = None) -> Any:
        return _freeze_time(target or "2024-01-01 12:00:00")

    return _factory


@pytest.fixture()
def login_pair(client: FlaskClient) -> dict[str, Any]:
    """Log ``alice`` in through the API and return the response body."""

    resp = client.post("/api/v1/account/login", json={"username": "alice", "password": "pw"})
    assert resp.status_code == 200
    return resp.get_json()

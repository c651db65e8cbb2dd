"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

from spoiler_auth.services.auth.dto import AuthTokenConfig

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


# Load .env during development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


def split_csv(value: str | None) -> tuple[str, ...]:
    """Split a comma-separated string into stripped, non-empty items."""
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    JWT_SECRET_KEY: str
        Symmetric secret used to sign and verify access tokens. Changing it
        invalidates every token issued before.
    JWT_ALGORITHM: str
        HMAC algorithm (``HS256``, ``HS384`` or ``HS512``).
    JWT_ISSUER: str
        Value emitted in and expected from the ``iss`` claim.
    JWT_AUDIENCES: str
        Comma-separated list of accepted audiences.
    JWT_VALIDATE_AUDIENCE: bool
        Whether decoding checks the ``aud`` claim.
    JWT_CLOCK_SKEW_SECONDS: int
        Leeway applied to lifetime validation between machines.
    ACCESS_TOKEN_LIFETIME_MINUTES: int
        Access token lifetime.
    REFRESH_TOKEN_LIFETIME_MINUTES: int
        Refresh token lifetime.
    AUTH_ROLES: str
        Comma-separated roles granted to every identity.
    JSON_SORT_KEYS: bool
        Keeps JSON output order stable when ``False``.
    PROPAGATE_EXCEPTIONS: bool
        Controls Flask error propagation.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    DEBUG: bool
        Toggles Flask debug mode.
    TESTING: bool
        Enables Flask testing mode when ``True``.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"
    APP_VERSION = os.getenv("APP_VERSION", "dev")

    # Secrets / token settings
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT_SECRET_AT_LEAST_32_BYTES")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "spoiler-auth")
    JWT_AUDIENCES = os.getenv("JWT_AUDIENCES", "spoiler-api")
    JWT_VALIDATE_AUDIENCE = env_bool("JWT_VALIDATE_AUDIENCE", True)
    JWT_CLOCK_SKEW_SECONDS = env_int("JWT_CLOCK_SKEW_SECONDS", 60)
    ACCESS_TOKEN_LIFETIME_MINUTES = env_int("ACCESS_TOKEN_LIFETIME_MINUTES", 60)
    REFRESH_TOKEN_LIFETIME_MINUTES = env_int("REFRESH_TOKEN_LIFETIME_MINUTES", 43200)
    AUTH_ROLES = os.getenv("AUTH_ROLES", "Admin")

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Pins a deterministic signing secret unless ``TEST_JWT_SECRET_KEY`` is set.
    - Propagates exceptions so pytest can surface tracebacks directly.
    """

    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = os.getenv("TEST_JWT_SECRET_KEY", "testing-secret-key-with-enough-entropy-0123456789")
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug disabled while relying on WSGI-level log configuration for
    noise control.
    """

    DEBUG = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def build_token_config(config: Mapping[str, Any]) -> AuthTokenConfig:
    """Build the token settings consumed by the auth core from a Flask config.

    Parameters
    ----------
    config: Mapping[str, Any]
        Typically ``app.config``.

    Returns
    -------
    AuthTokenConfig
        Frozen, validated settings.

    Raises
    ------
    ValueError
        When the secret is empty, the algorithm unsupported, or audience
        validation is enabled without any audience.
    """
    audiences = config.get("JWT_AUDIENCES", "")
    if isinstance(audiences, str):
        audiences = split_csv(audiences)
    return AuthTokenConfig(
        secret_key=str(config.get("JWT_SECRET_KEY") or ""),
        issuer=str(config.get("JWT_ISSUER", "spoiler-auth")),
        audiences=tuple(audiences),
        algorithm=str(config.get("JWT_ALGORITHM", "HS256")).upper(),
        validate_audience=bool(config.get("JWT_VALIDATE_AUDIENCE", True)),
        clock_skew=timedelta(seconds=int(config.get("JWT_CLOCK_SKEW_SECONDS", 60))),
        access_expires=timedelta(minutes=int(config.get("ACCESS_TOKEN_LIFETIME_MINUTES", 60))),
        refresh_expires=timedelta(minutes=int(config.get("REFRESH_TOKEN_LIFETIME_MINUTES", 43200))),
    )

"""Application factory wiring auth components and blueprints."""

from __future__ import annotations

from flask import Flask

from spoiler_auth.core.config import BaseConfig, get_config
from spoiler_auth.core.logger import configure_logging, init_app as init_logging
from spoiler_auth.services._shared.ports import RefreshTokenStore


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    refresh_store: RefreshTokenStore | None = None,
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config object/class or import path; ``APP_ENV`` based when omitted.
    :param refresh_store: Optional refresh token store to inject (tests).
    """

    app = Flask(__name__)

    app.config.from_object(get_config() if config is None else config)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from spoiler_auth.core import extensions

    extensions.init_app(app, refresh_store=refresh_store)

    init_logging(app)

    from spoiler_auth.api import init_app as init_api

    init_api(app)

    from spoiler_auth.core import errors

    errors.init_app(app)

    return app

"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request

from spoiler_auth.core.logger import ensure_request_id
from spoiler_auth.services._shared.base import ServiceContext

F = TypeVar("F", bound=Callable[..., Any])

AUTHORIZATION_HEADER = "Authorization"
FALLBACK_TOKEN_HEADER = "access_token"
BEARER_SCHEME = "bearer"


def extract_bearer_token(headers: Mapping[str, str]) -> str | None:
    """Read the access token from ``Authorization`` or the ``access_token`` fallback.

    The ``Bearer`` scheme prefix is matched case-insensitively and stripped;
    a bare token (no scheme) is returned as-is. No other location is consulted.
    """

    raw = headers.get(AUTHORIZATION_HEADER) or headers.get(FALLBACK_TOKEN_HEADER)
    if not raw:
        return None
    value = raw.strip()
    scheme, _, rest = value.partition(" ")
    if scheme.lower() == BEARER_SCHEME:
        value = rest.strip()
    return value or None


def get_access_token() -> str | None:
    """Return the bearer access token presented with the current request."""

    return extract_bearer_token(request.headers)


def service_context() -> ServiceContext:
    """Build the service context for the current request (correlation id)."""

    return ServiceContext(request_id=ensure_request_id())


def json_body() -> dict[str, Any]:
    """Return the JSON request body, or an empty dict when absent/invalid."""

    return request.get_json(silent=True) or {}


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]

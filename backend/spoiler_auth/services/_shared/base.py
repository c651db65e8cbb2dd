# spoiler_auth/services/_shared/base.py
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from spoiler_auth.core import errors as api_errors
from spoiler_auth.services._shared.errors import AuthError, ServiceError


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data (request ids, etc.).

    :param request_id: Correlation id for logging/tracing.
    """

    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide a single, injectable source of "now".
    * Centralize error translation.
    * Keep services thin, orchestration-only, no web leakage.
    """

    def __init__(
        self,
        *,
        ctx: ServiceContext | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize the base service.

        :param ctx: Optional request-scoped context (tracing).
        :type ctx: ServiceContext | None
        :param clock: Optional UTC clock (tests freeze or shift it).
        :type clock: Callable[[], datetime] | None
        """
        self.ctx = ctx or ServiceContext()
        self._clock = clock

    def now_utc(self) -> datetime:
        """Return the current instant as a timezone-aware UTC datetime."""
        if self._clock is not None:
            return self._clock()
        return datetime.now(UTC)

    # -------------------------- Error handling ------------------------------

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, AuthError):
            # → 401 Unauthorized, keeping the stable error kind
            return api_errors.Unauthorized(exc.message, code=exc.code)

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(
                message=str(exc),
                status_code=400,
                code="bad_request",
            )

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc

"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP directly. They serve as stable contracts between the token
codec, the refresh-token store and the auth session service.

The translation to HTTP responses (RFC 7807) is handled by
``spoiler_auth/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from adapters or domain logic.
    - The API layer or BaseService will later translate them to APIError.
    """

    pass


class AuthError(ServiceError):
    """
    Business-rule failure of the token lifecycle.

    Every subclass carries a stable, machine-readable ``code`` that the API
    layer exposes verbatim. None of these are retried: they describe a
    malformed/forged request or an exhausted credential.

    :param message: Human-readable explanation (safe for clients).
    :type message: str | None
    """

    code = "unauthorized"
    default_message = "Unauthorized"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


# --------------------------------------------------------------------------- #
# Access token (codec) errors
# --------------------------------------------------------------------------- #


class InvalidTokenError(AuthError):
    """Raised when the presented token is empty or structurally malformed."""

    code = "invalid_token"
    default_message = "Please provide a valid access token!"


class SignatureInvalidError(AuthError):
    """Raised when the token signature does not verify against the secret."""

    code = "signature_invalid"
    default_message = "The token signature is invalid."


class TokenExpiredError(AuthError):
    """Raised when expiry validation is requested and the token has expired."""

    code = "token_expired"
    default_message = "The access token has expired."


class IssuerMismatchError(AuthError):
    """Raised when the ``iss`` claim differs from the configured issuer."""

    code = "issuer_mismatch"
    default_message = "The token issuer is not accepted."


class AudienceMismatchError(AuthError):
    """Raised when the ``aud`` claim matches none of the accepted audiences."""

    code = "audience_mismatch"
    default_message = "The token audience is not accepted."


# --------------------------------------------------------------------------- #
# Refresh token (store) errors
# --------------------------------------------------------------------------- #


class RefreshTokenNotFoundError(AuthError):
    """Raised when no record matches ``(user_id, token)``."""

    code = "refresh_token_not_found"
    default_message = "Refresh token is null or already revoked!"


class RefreshTokenRevokedError(AuthError):
    """Raised when the matched refresh token is revoked, consumed or expired."""

    code = "refresh_token_revoked"
    default_message = "Refresh token is already revoked!"


class NoTokensForUserError(AuthError):
    """Raised when revoking for a user that never received a refresh token."""

    code = "no_tokens_for_user"
    default_message = "Refresh token not found!"


# --------------------------------------------------------------------------- #
# Internal faults (not business rules)
# --------------------------------------------------------------------------- #


class TokenSigningError(RuntimeError):
    """
    Raised when the signing subsystem cannot produce a token at all.

    Deliberately **not** a :class:`ServiceError`: it signals that the process
    cannot perform the operation, never that the caller's request was invalid,
    so it surfaces as a 500 through the generic error handler.
    """

"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`spoiler_auth.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``spoiler_auth.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Auth session service (from ``spoiler_auth.services.auth``)
    * :class:`AuthSessionService`
    * :class:`RoleClaimsProvider`
    * DTOs: :class:`RefreshIn`, :class:`RevokeIn`, :class:`AuthResultOut`,
      :class:`AuthTokenConfig`
"""

from __future__ import annotations

# Base primitives (service base + request-scoped context)
from ._shared.base import BaseService, ServiceContext
from .auth.claims import RoleClaimsProvider
from .auth.dto import AuthResultOut, AuthTokenConfig, RefreshIn, RevokeIn

# Auth session service + DTOs
from .auth.service import AuthSessionService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Auth
    "AuthSessionService",
    "RoleClaimsProvider",
    "RefreshIn",
    "RevokeIn",
    "AuthResultOut",
    "AuthTokenConfig",
]

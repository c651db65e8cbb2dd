"""
spoiler_auth.services._shared.ports
===================================

Collection of *ports* (hexagonal interfaces) that define the contracts
for token issuance and refresh-token lifecycle infrastructure.

These ports decouple the service layer from concrete implementations
of claim building, token signing and refresh-token storage.

Modules
-------
- :mod:`claims_provider`:
    Defines :class:`~.ClaimsProvider` and the :class:`~.Identity` / claim set types.

- :mod:`token_codec`:
    Defines :class:`~.TokenCodec`, the abstraction for JWT minting and decoding.

- :mod:`refresh_token_store`:
    Defines :class:`~.RefreshTokenStore`, :class:`~.RefreshTokenRecord`
    and :class:`~.InMemoryRefreshTokenStore` for refresh token rotation and revocation.

Design Notes
------------
All these ports follow *Dependency Inversion Principle (DIP)* to keep
the service layer independent from implementation details.
Concrete adapters (e.g., PyJWT) live under ``spoiler_auth.infra``.
"""

from __future__ import annotations

from .claims_provider import Claim, ClaimSet, ClaimsProvider, Identity, first_claim
from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshTokenRecord,
    RefreshTokenStore,
)
from .token_codec import DecodedToken, TokenCodec

__all__ = [
    "Claim",
    "ClaimSet",
    "ClaimsProvider",
    "Identity",
    "first_claim",
    "TokenCodec",
    "DecodedToken",
    "RefreshTokenStore",
    "RefreshTokenRecord",
    "InMemoryRefreshTokenStore",
]

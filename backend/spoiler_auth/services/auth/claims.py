"""Default identity-to-claims mapping for issued access tokens."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from spoiler_auth.services._shared.ports import Claim, ClaimSet, ClaimsProvider, Identity

DEFAULT_ROLES: tuple[str, ...] = ("Admin",)
EMAIL_DOMAIN = "example.com"


class RoleClaimsProvider(ClaimsProvider):
    """
    Emit the standard claim set for an identity plus one ``role`` claim per role.

    Order: ``unique_name``, ``name``, ``iat``, ``sub``, ``email``, ``amr``, ``role``...

    :param roles: Roles granted to every identity.
    :param clock: Source of the ``iat`` instant.
    """

    def __init__(
        self,
        roles: Iterable[str] = DEFAULT_ROLES,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.roles = tuple(roles)
        self._clock = clock or (lambda: datetime.now(UTC))

    def get_claims(self, identity: Identity | None) -> ClaimSet:
        if identity is None:
            return ()

        email = identity.email or f"{identity.username}@{EMAIL_DOMAIN}"
        claims: list[Claim] = [
            ("unique_name", identity.username),
            ("name", identity.username),
            ("iat", int(self._clock().timestamp())),
            ("sub", identity.user_id),
            ("email", email),
            ("amr", "pwd"),
        ]
        claims.extend(("role", role) for role in self.roles)
        return tuple(claims)

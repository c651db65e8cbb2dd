from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, TypeAlias

ClaimValue: TypeAlias = str | int
Claim: TypeAlias = tuple[str, ClaimValue]
ClaimSet: TypeAlias = tuple[Claim, ...]


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Authenticated identity handed to the claims provider.

    :ivar user_id: Externally supplied user identifier (no uniqueness check here).
    :ivar username: Display name.
    :ivar email: Optional e-mail address.
    """

    user_id: str
    username: str
    email: str | None = None


class ClaimsProvider(Protocol):
    """Port mapping an identity to the ordered claims embedded in access tokens."""

    def get_claims(self, identity: Identity | None) -> ClaimSet:
        """
        Build the claim set for ``identity``.

        Pure and total: ``None`` yields an empty tuple.
        """
        ...


def first_claim(claims: ClaimSet, claim_type: str) -> ClaimValue | None:
    """Return the value of the first claim of ``claim_type`` (if any)."""
    for ctype, value in claims:
        if ctype == claim_type:
            return value
    return None

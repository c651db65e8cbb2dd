from __future__ import annotations

import logging
import secrets
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol

from spoiler_auth.services._shared.errors import (
    NoTokensForUserError,
    RefreshTokenNotFoundError,
    RefreshTokenRevokedError,
)

log = logging.getLogger(__name__)

# 64 random bytes -> 512 bits of entropy, 86 url-safe characters.
DEFAULT_TOKEN_BYTES = 64
MIN_TOKEN_BYTES = 32


def utcnow() -> datetime:
    """Return a timezone-aware UTC "now"."""
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class RefreshTokenRecord:
    """
    Immutable snapshot of one refresh token.

    :ivar token: Opaque random token value.
    :ivar user_id: Owner user id.
    :ivar expires_at: Absolute expiration (UTC).
    :ivar created_at: Issuance instant (UTC).
    :ivar revoked_at: Revocation/consumption instant; never cleared once set.
    """

    token: str
    user_id: str
    expires_at: datetime
    created_at: datetime
    revoked_at: datetime | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utcnow()) >= self.expires_at

    def is_active(self, now: datetime | None = None) -> bool:
        return self.revoked_at is None and not self.is_expired(now)


class RefreshTokenStore(Protocol):
    """
    Stateful store of refresh token families, keyed by user id.

    ``rotate`` and ``revoke`` MUST be atomic with respect to each other for
    the same user: two concurrent rotations of one token never both succeed.
    """

    def issue(self, user_id: str, expires_at: datetime) -> RefreshTokenRecord:
        """Create a brand-new refresh token and append it to the user's family."""
        ...

    def rotate(
        self,
        user_id: str,
        presented_token: str | None,
        new_expires_at: datetime,
    ) -> RefreshTokenRecord:
        """
        Atomically consume ``presented_token`` (if any) and issue its successor.

        :raises RefreshTokenNotFoundError: No record matches ``(user_id, token)``.
        :raises RefreshTokenRevokedError: The matched record is no longer active.
        """
        ...

    def revoke(self, user_id: str, token: str | None) -> None:
        """
        Revoke one active token. Unknown tokens are a silent no-op.

        :raises NoTokensForUserError: The user has no token family.
        :raises RefreshTokenRevokedError: The matched record is already inactive.
        """
        ...

    def get(self, token: str) -> RefreshTokenRecord | None:
        """Fetch a single record snapshot (if present)."""
        ...

    def list_user_tokens(self, user_id: str) -> Iterable[RefreshTokenRecord]:
        """List every record of the user's family in issuance order."""
        ...


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    Process-local refresh token store with atomic rotation behavior.

    All reads and writes go through one :class:`threading.Lock`; hold times
    are short since nothing here performs I/O. Records are tombstoned on
    revocation and consumption, never removed, so a replayed token is
    reported as revoked rather than unknown.

    :param clock: Source of the current UTC instant (injectable for tests).
    :param token_bytes: Random bytes per token (at least 32).
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] | None = None,
        token_bytes: int = DEFAULT_TOKEN_BYTES,
    ) -> None:
        if token_bytes < MIN_TOKEN_BYTES:
            raise ValueError(f"token_bytes must be >= {MIN_TOKEN_BYTES}, got {token_bytes}")
        self._families: dict[str, list[RefreshTokenRecord]] = {}
        self._owners: dict[str, str] = {}
        self._lock = threading.Lock()
        self._clock = clock or utcnow
        self._token_bytes = token_bytes

    # ------------------------- helpers -------------------------

    def _new_token(self) -> str:
        # Caller holds the lock; re-draw on the (negligible) chance of a collision.
        token = secrets.token_urlsafe(self._token_bytes)
        while token in self._owners:
            token = secrets.token_urlsafe(self._token_bytes)
        return token

    def _issue_locked(self, user_id: str, expires_at: datetime, now: datetime) -> RefreshTokenRecord:
        record = RefreshTokenRecord(
            token=self._new_token(),
            user_id=user_id,
            expires_at=expires_at,
            created_at=now,
        )
        self._families.setdefault(user_id, []).append(record)
        self._owners[record.token] = user_id
        return record

    def _find_locked(self, user_id: str, token: str) -> tuple[list[RefreshTokenRecord], int] | None:
        if self._owners.get(token) != user_id:
            return None
        family = self._families[user_id]
        for idx, record in enumerate(family):
            if record.token == token:
                return family, idx
        return None

    # -------------------------- API ----------------------------

    def issue(self, user_id: str, expires_at: datetime) -> RefreshTokenRecord:
        with self._lock:
            record = self._issue_locked(user_id, expires_at, self._clock())
        log.debug("refresh_token.issued user_id=%s", user_id)
        return record

    def rotate(
        self,
        user_id: str,
        presented_token: str | None,
        new_expires_at: datetime,
    ) -> RefreshTokenRecord:
        with self._lock:
            now = self._clock()
            if presented_token:
                found = self._find_locked(user_id, presented_token)
                if found is None:
                    log.warning("refresh_token.rotate_rejected user_id=%s reason=not_found", user_id)
                    raise RefreshTokenNotFoundError()

                family, idx = found
                consumed = family[idx]
                if not consumed.is_active(now):
                    log.warning("refresh_token.rotate_rejected user_id=%s reason=inactive", user_id)
                    raise RefreshTokenRevokedError()

                # Tombstone the consumed token so it can never be redeemed twice.
                family[idx] = replace(consumed, revoked_at=now)

            record = self._issue_locked(user_id, new_expires_at, now)

        log.info("refresh_token.rotated user_id=%s consumed=%s", user_id, bool(presented_token))
        return record

    def revoke(self, user_id: str, token: str | None) -> None:
        with self._lock:
            if not self._families.get(user_id):
                log.warning("refresh_token.revoke_rejected user_id=%s reason=no_family", user_id)
                raise NoTokensForUserError()

            found = self._find_locked(user_id, token) if token else None
            if found is None:
                # Unknown and never-issued tokens are indistinguishable on purpose.
                return

            family, idx = found
            record = family[idx]
            now = self._clock()
            if not record.is_active(now):
                log.warning("refresh_token.revoke_rejected user_id=%s reason=inactive", user_id)
                raise RefreshTokenRevokedError()
            family[idx] = replace(record, revoked_at=now)

        log.info("refresh_token.revoked user_id=%s", user_id)

    def get(self, token: str) -> RefreshTokenRecord | None:
        with self._lock:
            user_id = self._owners.get(token)
            if user_id is None:
                return None
            found = self._find_locked(user_id, token)
            return found[0][found[1]] if found else None

    def list_user_tokens(self, user_id: str) -> list[RefreshTokenRecord]:
        with self._lock:
            return list(self._families.get(user_id, ()))

    def active_token(self, user_id: str) -> RefreshTokenRecord | None:
        """Return the most recently issued record that is still active."""
        with self._lock:
            now = self._clock()
            for record in reversed(self._families.get(user_id, ())):
                if record.is_active(now):
                    return record
            return None

    def purge(self, before: datetime) -> int:
        """
        Drop records that were revoked or expired before ``before``.

        Not called by the service layer; a retention policy decides when.
        Purged tokens presented later resolve as not found instead of revoked.

        :returns: Number of records removed.
        """
        removed = 0
        with self._lock:
            for user_id in list(self._families):
                kept: list[RefreshTokenRecord] = []
                for record in self._families[user_id]:
                    ended_at = record.revoked_at or record.expires_at
                    if ended_at < before:
                        self._owners.pop(record.token, None)
                        removed += 1
                    else:
                        kept.append(record)
                if kept:
                    self._families[user_id] = kept
                else:
                    del self._families[user_id]
        log.info("refresh_token.purged count=%s", removed)
        return removed

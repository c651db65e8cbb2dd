"""Deterministic clock for components accepting a ``clock`` callable."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta


class FakeClock:
    """Callable returning a controllable UTC instant."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> datetime:
        self.now = self.now + delta
        return self.now

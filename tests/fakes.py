# tests/fakes.py

from __future__ import annotations

from datetime import datetime, timedelta


class FakeClock:
    """
    Deterministic clock for unit tests.

    - Callable like datetime.now
    - Time only moves when a test moves it
    """

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now = self.now + timedelta(**delta)


class FailingHistoryStore:
    """Wraps a store and makes every history append fail."""

    def __init__(self, inner) -> None:
        self._inner = inner

    def __getattr__(self, name: str):
        return getattr(self._inner, name)

    def append_history(self, entry) -> None:
        raise RuntimeError("history backend unavailable")

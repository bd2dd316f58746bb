"""Cooperative cancellation for long-running stats computations."""

from __future__ import annotations

import threading
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class StatsCancelledError(Exception):
    """Raised when a computation observes a cancelled token."""

    target: str

    def __str__(self) -> str:
        return f"Statistics computation cancelled before {self.target}"


class CancellationToken:
    """Thread-safe flag checked between blob reads and changes."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Return True once cancel() has been called."""
        return self._event.is_set()

    def raise_if_cancelled(self, target: str) -> None:
        """Raise StatsCancelledError when cancellation was requested."""
        if self._event.is_set():
            raise StatsCancelledError(target=target)

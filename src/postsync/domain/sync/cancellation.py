"""Cooperative cancellation for long-running runs."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class CancellationToken:
    """A flag a run checks between steps; setting it never interrupts a call in flight."""

    _cancelled: bool = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

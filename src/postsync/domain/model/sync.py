"""Progress accounting for bulk sync runs."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .enums import BulkSyncOutcome


def progress_percent(current: int, total: int) -> int:
    """Percentage of ``current`` over ``total``, rounding halves up."""

    if total <= 0:
        return 0
    return (current * 200 + total) // (2 * total)


@dataclass(slots=True)
class BulkSyncState:
    """Counters of one bulk run; mutated once per processed item."""

    total: int
    current: int = 0
    success_count: int = 0
    failed_count: int = 0
    progress_percent: int = 0
    cancel_requested: bool = False

    def record(self, *, success: bool) -> None:
        if success:
            self.success_count += 1
        else:
            self.failed_count += 1

    def advance(self, index: int) -> None:
        self.current = index + 1
        self.progress_percent = progress_percent(self.current, self.total)

    def snapshot(self) -> BulkSyncState:
        return replace(self)


@dataclass(slots=True, frozen=True)
class BulkSyncResult:
    """Summary handed back once a run ends or is refused."""

    label: str
    outcome: BulkSyncOutcome
    state: BulkSyncState | None = None

    @property
    def success_count(self) -> int:
        return self.state.success_count if self.state else 0

    @property
    def failed_count(self) -> int:
        return self.state.failed_count if self.state else 0

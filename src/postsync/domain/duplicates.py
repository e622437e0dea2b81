"""Duplicate analysis and deletion, driven against the whole stored corpus."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from postsync.domain.ports.backend import BackendError
from postsync.domain.ports.notify import LoggingNotifier, Notifier

if TYPE_CHECKING:
    from postsync.domain.model import DuplicateDeletion, DuplicateReport
    from postsync.domain.ports.backend import DuplicatePort

log = getLogger(__name__)


@dataclass(slots=True)
class DuplicatePipeline:
    """Request the backend's similarity analysis and optionally delete duplicates.

    Similarity scores and the threshold that produced them belong to the backend;
    records are reported as received.
    """

    backend: DuplicatePort
    notifier: Notifier = field(default_factory=LoggingNotifier)
    last_report: DuplicateReport | None = field(default=None, init=False)

    async def analyze(self) -> DuplicateReport | None:
        try:
            report = await self.backend.analyze_duplicates()
        except BackendError as exc:
            log.warning("Duplicate analysis failed: %s", exc)
            self.notifier.error("Failed to analyze duplicates")
            return None
        self.last_report = report
        log.info(
            "Duplicate analysis: found=%s, scanned=%s, mode=%s",
            report.duplicates_found,
            report.scanned_posts,
            report.mode,
        )
        self.notifier.success(f"Analysis complete: {report.duplicates_found} duplicates found")
        return report

    async def delete_duplicates(self) -> DuplicateDeletion | None:
        try:
            deletion = await self.backend.delete_duplicates()
        except BackendError as exc:
            log.warning("Duplicate deletion failed: %s", exc)
            self.notifier.error("Failed to delete duplicates")
            return None
        self.last_report = None
        self.notifier.success(f"{deletion.deleted_count} duplicates deleted")
        return deletion

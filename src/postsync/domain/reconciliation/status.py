"""Per-URL reconciliation state shared between the resolver, the sync runners and the UI."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from postsync.domain.model import ItemStatus, ReconciliationStatus

if TYPE_CHECKING:
    from collections.abc import Iterable

log = getLogger(__name__)

_LOADING = ItemStatus(ReconciliationStatus.LOADING)
_IDLE = ItemStatus(ReconciliationStatus.IDLE)


@dataclass(slots=True)
class ItemStatusStore:
    """Mapping of URL to ``ItemStatus``.

    Each URL has a single writer at a time: the resolver while a lookup runs, a sync
    runner while a scrape is in flight. Readers receive copies via ``snapshot``.
    """

    _entries: dict[str, ItemStatus] = field(default_factory=dict[str, ItemStatus])

    def get(self, url: str) -> ItemStatus | None:
        return self._entries.get(url)

    def status_of(self, url: str) -> ReconciliationStatus | None:
        entry = self._entries.get(url)
        return entry.status if entry else None

    def mark_loading(self, url: str) -> None:
        self._entries[url] = _LOADING

    def mark_idle(self, url: str) -> None:
        self._entries[url] = _IDLE

    def apply_resolution(self, url: str, resolution: ItemStatus) -> None:
        if not resolution.is_settled:
            raise ValueError(f"Resolver produced unsettled status {resolution.status}")
        self._entries[url] = resolution

    def begin_sync(self, url: str) -> ItemStatus:
        """Move ``url`` to ``scraping`` and return the entry it replaced."""

        previous = self._entries.get(url, ItemStatus(ReconciliationStatus.MISSING))
        self._entries[url] = ItemStatus(
            ReconciliationStatus.SCRAPING,
            record_id=previous.record_id,
            favorite=previous.favorite,
        )
        return previous

    def finish_sync(
        self,
        url: str,
        *,
        previous: ItemStatus,
        success: bool,
        record_id: str | None = None,
        favorite: bool | None = None,
    ) -> ItemStatus:
        if success:
            entry = ItemStatus(
                ReconciliationStatus.PRESENT,
                record_id=record_id or previous.record_id,
                favorite=favorite if favorite is not None else previous.favorite,
            )
        else:
            entry = previous if previous.is_settled else ItemStatus(ReconciliationStatus.MISSING)
        self._entries[url] = entry
        log.debug("Sync of %s finished: %s", url, entry.status)
        return entry

    def set_favorite(self, url: str, favorite: bool) -> None:
        entry = self._entries.get(url)
        if entry is None or entry.status is not ReconciliationStatus.PRESENT:
            return
        self._entries[url] = ItemStatus(entry.status, record_id=entry.record_id, favorite=favorite)

    def urls_with_status(
        self, status: ReconciliationStatus, urls: Iterable[str] | None = None
    ) -> list[str]:
        candidates = self._entries if urls is None else urls
        return [url for url in candidates if self.status_of(url) is status]

    def snapshot(self) -> dict[str, ItemStatus]:
        return dict(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, url: object) -> bool:
        return url in self._entries

    def __len__(self) -> int:
        return len(self._entries)

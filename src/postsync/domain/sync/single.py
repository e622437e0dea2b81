"""Sync of a single post from its row in the dashboard."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from postsync.domain.model import ReconciliationStatus
from postsync.domain.ports.backend import BackendError
from postsync.domain.ports.notify import LoggingNotifier, Notifier

if TYPE_CHECKING:
    from postsync.domain.model import ItemStatus, ScrapedItem
    from postsync.domain.ports.backend import PostSyncPort
    from postsync.domain.reconciliation import ItemStatusStore, ReconciliationResolver

log = getLogger(__name__)


@dataclass(slots=True)
class SingleItemSync:
    backend: PostSyncPort
    status_store: ItemStatusStore
    resolver: ReconciliationResolver | None = None
    notifier: Notifier = field(default_factory=LoggingNotifier)

    async def sync(self, item: ScrapedItem) -> ItemStatus | None:
        """Scrape one post, then double-check the store so the row is not left stale.

        On failure the row returns to the status it had before the sync started.
        """

        url = item.sync_url
        if not url:
            self.notifier.error("This entry has no URL to sync")
            return None

        previous = self.status_store.begin_sync(url)
        is_update = previous.status is ReconciliationStatus.PRESENT
        try:
            receipt = await self.backend.scrape_post(url)
        except BackendError as exc:
            log.warning("Sync failed for %s: %s", url, exc)
            action = "Update" if is_update else "Sync"
            self.notifier.error(f"{action} failed for {item.title or url}")
            return self.status_store.finish_sync(url, previous=previous, success=False)

        record_id = receipt.record_id
        favorite = receipt.favorite
        if self.resolver is not None:
            detail = await self.resolver.resolve(url)
            if detail.status is ReconciliationStatus.PRESENT:
                record_id = detail.record_id or record_id
                favorite = detail.favorite if detail.favorite is not None else favorite

        self.notifier.success("Updated!" if is_update else "Synced!")
        return self.status_store.finish_sync(
            url,
            previous=previous,
            success=True,
            record_id=record_id,
            favorite=favorite,
        )

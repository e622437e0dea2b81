"""Sequential, cancellable bulk sync over a working set of scraped posts."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from postsync.domain.model import (
    BulkSyncOutcome,
    BulkSyncPhase,
    BulkSyncResult,
    BulkSyncState,
)
from postsync.domain.ports.backend import BackendError
from postsync.domain.ports.notify import LoggingNotifier, Notifier

from .cancellation import CancellationToken
from .working_sets import all_items, missing_items, selected_items

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from postsync.domain.model import ScrapedItem
    from postsync.domain.ports.backend import PostSyncPort
    from postsync.domain.reconciliation import ItemStatusStore
    from postsync.domain.selection import SelectionSet

DEFAULT_INTER_ITEM_DELAY_SECONDS = 0.5

log = getLogger(__name__)


@dataclass(slots=True)
class BulkSyncOrchestrator:
    """Run the remote sync call for each post, one at a time.

    Runs are strictly sequential with a fixed pause between posts so the backend
    sees a bounded request rate and progress only ever moves forward. A failed post
    is counted and skipped; it never aborts the run. Cancellation is checked at the
    top of every iteration, so the post currently syncing is allowed to finish.
    Whatever the outcome, ``on_finished`` runs afterwards so the caller can reload
    ground truth instead of trusting the counters.
    """

    backend: PostSyncPort
    notifier: Notifier = field(default_factory=LoggingNotifier)
    status_store: ItemStatusStore | None = None
    inter_item_delay: float = DEFAULT_INTER_ITEM_DELAY_SECONDS
    on_progress: Callable[[BulkSyncState], None] | None = None
    on_finished: Callable[[], Awaitable[None]] | None = None
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    phase: BulkSyncPhase = field(default=BulkSyncPhase.IDLE, init=False)
    state: BulkSyncState | None = field(default=None, init=False)
    _token: CancellationToken | None = field(default=None, init=False)

    @property
    def is_running(self) -> bool:
        return self.phase is BulkSyncPhase.RUNNING

    def request_cancel(self) -> None:
        """Ask the active run to stop before its next post."""

        if self._token is not None:
            self._token.cancel()
        if self.state is not None:
            self.state.cancel_requested = True

    async def sync_all(self, view: Sequence[ScrapedItem]) -> BulkSyncResult:
        return await self.run(all_items(view), "Bulk Sync All")

    async def sync_selected(
        self, view: Sequence[ScrapedItem], selection: SelectionSet
    ) -> BulkSyncResult:
        return await self.run(
            selected_items(view, selection),
            "Sync Selected",
            empty_message="No selected items to sync",
        )

    async def sync_missing(
        self, view: Sequence[ScrapedItem], statuses: ItemStatusStore
    ) -> BulkSyncResult:
        return await self.run(
            missing_items(view, statuses),
            "Sync Missing Only",
            empty_message="No missing items to sync",
        )

    async def run(
        self,
        items: Sequence[ScrapedItem],
        label: str,
        *,
        token: CancellationToken | None = None,
        empty_message: str = "No items to sync",
    ) -> BulkSyncResult:
        if self.is_running:
            self.notifier.error("A sync run is already in progress")
            return BulkSyncResult(label=label, outcome=BulkSyncOutcome.REJECTED)
        if not items:
            self.notifier.error(empty_message)
            return BulkSyncResult(label=label, outcome=BulkSyncOutcome.REJECTED)

        active_token = token or CancellationToken()
        state = BulkSyncState(total=len(items))
        self._token = active_token
        self.state = state
        self.phase = BulkSyncPhase.RUNNING
        outcome = BulkSyncOutcome.COMPLETED
        self.notifier.info(f"{label} started - please wait...")
        log.info("Starting %s over %d posts", label, state.total)

        try:
            for index, item in enumerate(items):
                if active_token.cancelled:
                    state.cancel_requested = True
                    outcome = BulkSyncOutcome.CANCELLED
                    break

                state.record(success=await self._sync_one(item))
                state.advance(index)
                self._emit(state)

                if index + 1 < state.total:
                    await self.sleep(self.inter_item_delay)
        finally:
            self._token = None
            self.state = None
            self.phase = BulkSyncPhase.IDLE

        log.info(
            "%s %s: current=%s/%s, success=%s, failed=%s",
            label,
            outcome,
            state.current,
            state.total,
            state.success_count,
            state.failed_count,
        )
        if outcome is BulkSyncOutcome.CANCELLED:
            self.notifier.info("Sync stopped by user")
        else:
            self.notifier.success(
                f"{label} completed: {state.success_count} synced, {state.failed_count} failed"
            )

        if self.on_finished is not None:
            await self.on_finished()

        return BulkSyncResult(label=label, outcome=outcome, state=state.snapshot())

    async def _sync_one(self, item: ScrapedItem) -> bool:
        url = item.sync_url
        if not url:
            log.warning("Skipping post without URL: %r", item.title)
            return False

        previous = self.status_store.begin_sync(url) if self.status_store is not None else None
        try:
            receipt = await self.backend.scrape_post(url)
        except BackendError as exc:
            log.warning("Sync failed for %s: %s", url, exc)
            if self.status_store is not None and previous is not None:
                self.status_store.finish_sync(url, previous=previous, success=False)
            return False

        if self.status_store is not None and previous is not None:
            self.status_store.finish_sync(
                url,
                previous=previous,
                success=True,
                record_id=receipt.record_id,
                favorite=receipt.favorite,
            )
        return True

    def _emit(self, state: BulkSyncState) -> None:
        if self.on_progress is not None:
            self.on_progress(state.snapshot())

from __future__ import annotations

import asyncio

import pytest

from postsync.domain.model import (
    BulkSyncOutcome,
    BulkSyncPhase,
    BulkSyncState,
    ItemStatus,
    ReconciliationStatus,
    ScrapedItem,
)
from postsync.domain.reconciliation import ItemStatusStore
from postsync.domain.selection import SelectionSet
from postsync.domain.sync import BulkSyncOrchestrator, CancellationToken
from tests.support.backend import FakeBackend, RecordingNotifier, make_items, no_sleep


def _orchestrator(
    backend: FakeBackend,
    notifier: RecordingNotifier,
    **kwargs: object,
) -> BulkSyncOrchestrator:
    return BulkSyncOrchestrator(backend, notifier=notifier, sleep=no_sleep, **kwargs)  # type: ignore[arg-type]


def test_all_items_succeed(backend: FakeBackend, notifier: RecordingNotifier) -> None:
    orchestrator = _orchestrator(backend, notifier)

    result = asyncio.run(orchestrator.run(make_items(5), "Bulk Sync All"))

    assert result.outcome is BulkSyncOutcome.COMPLETED
    assert result.state is not None
    assert result.success_count == 5
    assert result.failed_count == 0
    assert result.state.progress_percent == 100
    assert result.state.current == 5
    assert orchestrator.phase is BulkSyncPhase.IDLE
    assert notifier.texts() == [
        "Bulk Sync All started - please wait...",
        "Bulk Sync All completed: 5 synced, 0 failed",
    ]


def test_failed_item_is_counted_and_run_continues(
    backend: FakeBackend, notifier: RecordingNotifier
) -> None:
    items = make_items(5)
    failing = items[2].sync_url
    assert failing is not None
    backend.failing_scrapes.add(failing)

    result = asyncio.run(_orchestrator(backend, notifier).run(items, "Bulk Sync All"))

    assert result.outcome is BulkSyncOutcome.COMPLETED
    assert result.success_count == 4
    assert result.failed_count == 1
    assert len(backend.calls_named("SCRAPE")) == 5


def test_item_without_url_counts_as_failure(
    backend: FakeBackend, notifier: RecordingNotifier
) -> None:
    items = [ScrapedItem(title="No link"), *make_items(1)]

    result = asyncio.run(_orchestrator(backend, notifier).run(items, "Bulk Sync All"))

    assert result.success_count == 1
    assert result.failed_count == 1
    assert len(backend.calls_named("SCRAPE")) == 1


@pytest.mark.parametrize("stop_after", [0, 1, 3])
def test_cancel_after_k_items_stops_before_the_next_call(
    backend: FakeBackend, notifier: RecordingNotifier, stop_after: int
) -> None:
    items = make_items(5)
    token = CancellationToken()
    if stop_after == 0:
        token.cancel()

    orchestrator: BulkSyncOrchestrator

    def on_progress(state: BulkSyncState) -> None:
        if state.current == stop_after:
            orchestrator.request_cancel()

    orchestrator = _orchestrator(backend, notifier, on_progress=on_progress)

    result = asyncio.run(orchestrator.run(items, "Bulk Sync All", token=token))

    assert result.outcome is BulkSyncOutcome.CANCELLED
    assert result.state is not None
    assert result.state.current == stop_after
    assert result.state.cancel_requested is True
    assert backend.calls_named("SCRAPE") == [item.sync_url for item in items[:stop_after]]
    assert notifier.texts()[-1] == "Sync stopped by user"


def test_empty_working_set_is_rejected(backend: FakeBackend, notifier: RecordingNotifier) -> None:
    orchestrator = _orchestrator(backend, notifier)

    result = asyncio.run(orchestrator.sync_selected(make_items(3), SelectionSet()))

    assert result.outcome is BulkSyncOutcome.REJECTED
    assert result.state is None
    assert notifier.texts("error") == ["No selected items to sync"]
    assert backend.calls == []


def test_second_run_is_rejected_while_one_is_active(
    backend: FakeBackend, notifier: RecordingNotifier
) -> None:
    inner_results: list[BulkSyncOutcome] = []

    async def scenario() -> None:
        orchestrator: BulkSyncOrchestrator

        async def sleep(_seconds: float) -> None:
            if not inner_results:
                inner = await orchestrator.run(make_items(1, prefix="x"), "Again")
                inner_results.append(inner.outcome)

        orchestrator = BulkSyncOrchestrator(backend, notifier=notifier, sleep=sleep)
        await orchestrator.run(make_items(2), "Bulk Sync All")

    asyncio.run(scenario())

    assert inner_results == [BulkSyncOutcome.REJECTED]
    assert "A sync run is already in progress" in notifier.texts("error")


def test_delay_runs_between_items_but_not_after_the_last(
    backend: FakeBackend, notifier: RecordingNotifier
) -> None:
    delays: list[float] = []

    async def sleep(seconds: float) -> None:
        delays.append(seconds)

    orchestrator = BulkSyncOrchestrator(
        backend, notifier=notifier, sleep=sleep, inter_item_delay=0.25
    )

    asyncio.run(orchestrator.run(make_items(3), "Bulk Sync All"))

    assert delays == [0.25, 0.25]


def test_progress_events_are_snapshots(backend: FakeBackend, notifier: RecordingNotifier) -> None:
    events: list[BulkSyncState] = []
    orchestrator = _orchestrator(backend, notifier, on_progress=events.append)

    asyncio.run(orchestrator.run(make_items(3), "Bulk Sync All"))

    assert [event.current for event in events] == [1, 2, 3]
    assert [event.progress_percent for event in events] == [33, 67, 100]
    assert events[0] is not events[1]


def test_status_store_tracks_scraping_then_present(
    backend: FakeBackend, notifier: RecordingNotifier
) -> None:
    items = make_items(2)
    urls = [item.sync_url or "" for item in items]
    store = ItemStatusStore()
    store.apply_resolution(urls[0], ItemStatus(ReconciliationStatus.MISSING))
    store.apply_resolution(urls[1], ItemStatus(ReconciliationStatus.MISSING))
    backend.failing_scrapes.add(urls[1])
    observed: list[ReconciliationStatus | None] = []
    backend.on_scrape = lambda url: observed.append(store.status_of(url))

    orchestrator = _orchestrator(backend, notifier, status_store=store)
    asyncio.run(orchestrator.run(items, "Sync Missing Only"))

    assert observed == [ReconciliationStatus.SCRAPING, ReconciliationStatus.SCRAPING]
    first = store.get(urls[0])
    assert first is not None
    assert first.status is ReconciliationStatus.PRESENT
    assert first.record_id is not None
    assert store.get(urls[1]) == ItemStatus(ReconciliationStatus.MISSING)


def test_sync_missing_only_uses_missing_items(
    backend: FakeBackend, notifier: RecordingNotifier
) -> None:
    items = make_items(3)
    store = ItemStatusStore()
    store.apply_resolution(items[0].sync_url or "", ItemStatus(ReconciliationStatus.PRESENT))
    store.apply_resolution(items[1].sync_url or "", ItemStatus(ReconciliationStatus.MISSING))
    store.mark_loading(items[2].sync_url or "")

    result = asyncio.run(_orchestrator(backend, notifier).sync_missing(items, store))

    assert result.label == "Sync Missing Only"
    assert backend.calls_named("SCRAPE") == [items[1].sync_url]


def test_on_finished_runs_after_completion_and_cancellation(
    backend: FakeBackend, notifier: RecordingNotifier
) -> None:
    finished: list[str] = []

    async def on_finished() -> None:
        finished.append("done")

    orchestrator = _orchestrator(backend, notifier, on_finished=on_finished)
    cancelled = CancellationToken()
    cancelled.cancel()

    asyncio.run(orchestrator.sync_all(make_items(2)))
    asyncio.run(orchestrator.run(make_items(2), "Bulk Sync All", token=cancelled))

    assert finished == ["done", "done"]


def test_run_state_is_discarded_when_the_run_ends(
    backend: FakeBackend, notifier: RecordingNotifier
) -> None:
    live: list[BulkSyncState | None] = []
    orchestrator: BulkSyncOrchestrator

    def on_progress(_state: BulkSyncState) -> None:
        live.append(orchestrator.state)

    orchestrator = _orchestrator(backend, notifier, on_progress=on_progress)

    result = asyncio.run(orchestrator.run(make_items(2), "Bulk Sync All"))
    orchestrator.request_cancel()

    assert all(state is not None for state in live)
    assert orchestrator.state is None
    assert result.state is not None
    assert result.state.cancel_requested is False

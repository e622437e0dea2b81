from __future__ import annotations

import pytest

from postsync.domain.model import ItemStatus, ReconciliationStatus
from postsync.domain.reconciliation import ItemStatusStore

URL = "https://jobs.example/posts/clerk"


def test_item_status_rejects_ids_on_unsettled_and_missing_states() -> None:
    for status in (
        ReconciliationStatus.IDLE,
        ReconciliationStatus.LOADING,
        ReconciliationStatus.MISSING,
    ):
        with pytest.raises(ValueError, match="record id"):
            ItemStatus(status, record_id="rec-1")

    assert ItemStatus(ReconciliationStatus.SCRAPING, record_id="rec-1").record_id == "rec-1"


def test_apply_resolution_rejects_unsettled_status() -> None:
    store = ItemStatusStore()

    with pytest.raises(ValueError, match="unsettled"):
        store.apply_resolution(URL, ItemStatus(ReconciliationStatus.LOADING))


def test_begin_sync_on_unknown_url_restores_missing_on_failure() -> None:
    store = ItemStatusStore()

    previous = store.begin_sync(URL)
    assert store.status_of(URL) is ReconciliationStatus.SCRAPING

    store.finish_sync(URL, previous=previous, success=False)

    assert store.get(URL) == ItemStatus(ReconciliationStatus.MISSING)


def test_failed_resync_of_present_post_restores_previous_entry() -> None:
    store = ItemStatusStore()
    present = ItemStatus(ReconciliationStatus.PRESENT, record_id="rec-1", favorite=True)
    store.apply_resolution(URL, present)

    previous = store.begin_sync(URL)
    scraping = store.get(URL)
    assert scraping is not None
    assert scraping.record_id == "rec-1"

    store.finish_sync(URL, previous=previous, success=False)

    assert store.get(URL) == present


def test_successful_sync_keeps_previous_id_when_backend_sends_none() -> None:
    store = ItemStatusStore()
    store.apply_resolution(URL, ItemStatus(ReconciliationStatus.PRESENT, record_id="rec-1"))

    previous = store.begin_sync(URL)
    entry = store.finish_sync(URL, previous=previous, success=True)

    assert entry == ItemStatus(ReconciliationStatus.PRESENT, record_id="rec-1")


def test_failed_sync_from_loading_falls_back_to_missing() -> None:
    store = ItemStatusStore()
    store.mark_loading(URL)

    previous = store.begin_sync(URL)
    store.finish_sync(URL, previous=previous, success=False)

    assert store.status_of(URL) is ReconciliationStatus.MISSING


def test_set_favorite_only_touches_present_entries() -> None:
    store = ItemStatusStore()
    store.apply_resolution(URL, ItemStatus(ReconciliationStatus.PRESENT, record_id="rec-1"))
    store.apply_resolution("other", ItemStatus(ReconciliationStatus.MISSING))

    store.set_favorite(URL, True)
    store.set_favorite("other", True)
    store.set_favorite("unknown", True)

    entry = store.get(URL)
    assert entry is not None
    assert entry.favorite is True
    assert store.get("other") == ItemStatus(ReconciliationStatus.MISSING)
    assert "unknown" not in store


def test_snapshot_is_a_copy() -> None:
    store = ItemStatusStore()
    store.mark_idle(URL)

    snapshot = store.snapshot()
    snapshot.clear()

    assert len(store) == 1


def test_urls_with_status_filters_given_urls_in_order() -> None:
    store = ItemStatusStore()
    store.apply_resolution("a", ItemStatus(ReconciliationStatus.MISSING))
    store.apply_resolution("b", ItemStatus(ReconciliationStatus.PRESENT))
    store.apply_resolution("c", ItemStatus(ReconciliationStatus.MISSING))

    assert store.urls_with_status(ReconciliationStatus.MISSING) == ["a", "c"]
    assert store.urls_with_status(ReconciliationStatus.MISSING, ["c", "b", "z"]) == ["c"]

    store.clear()
    assert len(store) == 0

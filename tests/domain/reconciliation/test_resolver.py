from __future__ import annotations

import asyncio

from postsync.domain.model import ItemStatus, LookupKey, PostLookup, ReconciliationStatus
from postsync.domain.reconciliation import ItemStatusStore, ReconciliationResolver
from tests.support.backend import FakeBackend

URL = "https://jobs.example/posts/clerk"


def test_resolve_finds_post_stored_under_path_with_link_key() -> None:
    backend = FakeBackend(stored={"/posts/clerk/": "rec-1"}, get_key=LookupKey.LINK)
    resolver = ReconciliationResolver(backend)

    resolution = asyncio.run(resolver.resolve(URL))

    assert resolution == ItemStatus(ReconciliationStatus.PRESENT, record_id="rec-1")
    assert backend.calls[-1] == ("GET link", "/posts/clerk/")
    assert backend.calls_named("POST") == []


def test_resolve_probes_url_key_before_link_key() -> None:
    backend = FakeBackend(stored={URL: "rec-1"})
    resolver = ReconciliationResolver(backend)

    asyncio.run(resolver.resolve(URL))

    assert backend.calls == [("GET url", URL)]


def test_resolve_skips_failing_probes_until_a_hit() -> None:
    backend = FakeBackend(
        stored={"/posts/clerk": "rec-7"},
        failing_lookups={URL, f"{URL}/"},
    )
    resolver = ReconciliationResolver(backend)

    resolution = asyncio.run(resolver.resolve(URL))

    assert resolution.status is ReconciliationStatus.PRESENT
    assert resolution.record_id == "rec-7"
    assert len(backend.calls) == 5


def test_resolve_falls_back_to_post_probe() -> None:
    backend = FakeBackend(stored={f"{URL}/": "rec-2"}, get_enabled=False)
    resolver = ReconciliationResolver(backend)

    resolution = asyncio.run(resolver.resolve(URL))

    assert resolution.record_id == "rec-2"
    assert len(backend.calls_named("GET url")) == 4
    assert len(backend.calls_named("GET link")) == 4
    assert backend.calls_named("POST") == [URL, f"{URL}/"]


def test_resolve_reports_missing_when_every_probe_fails_or_misses() -> None:
    backend = FakeBackend(failing_lookups={URL, "/posts/clerk"})
    resolver = ReconciliationResolver(backend)

    resolution = asyncio.run(resolver.resolve(URL))

    assert resolution == ItemStatus(ReconciliationStatus.MISSING)
    assert len(backend.calls) == 12


def test_resolve_carries_favorite_flag() -> None:
    backend = FakeBackend(stored={URL: "rec-3"}, favorites={"rec-3": True})

    resolution = asyncio.run(ReconciliationResolver(backend).resolve(URL))

    assert resolution.favorite is True


def test_refresh_marks_placeholder_urls_idle_without_calls() -> None:
    backend = FakeBackend()
    store = ItemStatusStore()
    resolver = ReconciliationResolver(backend, status_store=store)

    assert asyncio.run(resolver.refresh("#")) is None

    assert store.status_of("#") is ReconciliationStatus.IDLE
    assert backend.calls == []


def test_refresh_marks_loading_while_probing() -> None:
    store = ItemStatusStore()
    seen: list[ReconciliationStatus | None] = []

    class ObservingBackend(FakeBackend):
        async def lookup_post(self, url: str, *, key: LookupKey) -> PostLookup:
            seen.append(store.status_of(URL))
            return await super().lookup_post(url, key=key)

    backend = ObservingBackend(stored={URL: "rec-1"})
    resolver = ReconciliationResolver(backend, status_store=store)

    asyncio.run(resolver.refresh(URL))

    assert seen == [ReconciliationStatus.LOADING]
    assert store.get(URL) == ItemStatus(ReconciliationStatus.PRESENT, record_id="rec-1")


def test_resolve_many_deduplicates_and_records_every_outcome() -> None:
    other = "https://jobs.example/posts/driver"
    backend = FakeBackend(stored={URL: "rec-1"})
    store = ItemStatusStore()
    resolver = ReconciliationResolver(backend, status_store=store)

    results = asyncio.run(resolver.resolve_many([URL, other, URL, ""]))

    assert set(results) == {URL, other, ""}
    assert results[""] is None
    assert store.status_of(URL) is ReconciliationStatus.PRESENT
    assert store.status_of(other) is ReconciliationStatus.MISSING
    assert store.status_of("") is ReconciliationStatus.IDLE
    assert backend.calls_named("GET url").count(URL) == 1

"""Decide whether a scraped post already exists in the backend store."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from postsync.domain.model import ItemStatus, LookupKey, ReconciliationStatus
from postsync.domain.ports.backend import BackendError
from postsync.domain.urls import url_variants

if TYPE_CHECKING:
    from collections.abc import Awaitable, Iterable

    from postsync.domain.model import PostLookup
    from postsync.domain.ports.backend import PostLookupPort

    from .status import ItemStatusStore

log = getLogger(__name__)

LOOKUP_KEYS: tuple[LookupKey, ...] = (LookupKey.URL, LookupKey.LINK)
PLACEHOLDER_URLS = frozenset({"", "#"})


@dataclass(slots=True)
class ReconciliationResolver:
    """Probe the backend for a post across URL variants and lookup conventions.

    GET probes run first (every variant under every query key), then one POST probe
    per variant. The first hit wins. A failed probe only moves on to the next
    candidate, so absence is reported as ``missing`` and never as an error.
    """

    backend: PostLookupPort
    status_store: ItemStatusStore | None = None

    async def resolve(self, url: str) -> ItemStatus:
        candidates = url_variants(url)

        for candidate in candidates:
            for key in LOOKUP_KEYS:
                lookup = await self._probe(self.backend.lookup_post(candidate, key=key), candidate)
                if lookup is not None and lookup.hit:
                    return _present(lookup)

        for candidate in candidates:
            lookup = await self._probe(self.backend.lookup_post_by_body(candidate), candidate)
            if lookup is not None and lookup.hit:
                return _present(lookup)

        log.debug("No stored post for %s after %d candidates", url, len(candidates))
        return ItemStatus(ReconciliationStatus.MISSING)

    async def refresh(self, url: str) -> ItemStatus | None:
        """Resolve ``url`` and record the outcome in the status store."""

        if url in PLACEHOLDER_URLS:
            if self.status_store is not None:
                self.status_store.mark_idle(url)
            return None
        if self.status_store is not None:
            self.status_store.mark_loading(url)
        resolution = await self.resolve(url)
        if self.status_store is not None:
            self.status_store.apply_resolution(url, resolution)
        return resolution

    async def resolve_many(self, urls: Iterable[str]) -> dict[str, ItemStatus | None]:
        """Check distinct posts concurrently; each post still probes sequentially."""

        unique = list(dict.fromkeys(urls))
        results = await asyncio.gather(*(self.refresh(url) for url in unique))
        return dict(zip(unique, results, strict=True))

    async def _probe(
        self,
        call: Awaitable[PostLookup],
        candidate: str,
    ) -> PostLookup | None:
        try:
            return await call
        except BackendError as exc:
            log.debug("Lookup probe for %s failed: %s", candidate, exc)
            return None


def _present(lookup: PostLookup) -> ItemStatus:
    return ItemStatus(
        ReconciliationStatus.PRESENT,
        record_id=lookup.record_id,
        favorite=lookup.favorite,
    )

"""Application orchestration entry points."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from postsync.config import SyncConfig
from postsync.domain.duplicates import DuplicatePipeline
from postsync.domain.model import BulkSyncOutcome
from postsync.domain.optimistic import FavoriteController, FavoriteStore, MutationOutcome
from postsync.domain.ports.backend import BackendError
from postsync.domain.ports.notify import LoggingNotifier, Notifier
from postsync.domain.reconciliation import ItemStatusStore, ReconciliationResolver
from postsync.domain.selection import SelectionSet
from postsync.domain.sync import BulkSyncOrchestrator, SingleItemSync

if TYPE_CHECKING:
    from collections.abc import Callable

    from postsync.domain.model import (
        BulkSyncResult,
        BulkSyncState,
        DuplicateDeletion,
        DuplicateReport,
        ItemStatus,
        ScrapedItem,
        Section,
    )
    from postsync.domain.ports.backend import PostBackend

log = getLogger(__name__)

TAB_CHANGE_REFUSED = "Please stop syncing before changing tabs."
RUN_IN_PROGRESS = "A sync run is already in progress"


@dataclass(slots=True)
class Dashboard:
    """One operator session over the scraped site and the backend store.

    Holds the section being browsed, its post list, the search filter and the
    per-URL reconciliation state, and routes every action through the domain
    services. Bulk runs reload the post list when they end.
    """

    backend: PostBackend
    notifier: Notifier = field(default_factory=LoggingNotifier)
    sync_config: SyncConfig = field(default_factory=SyncConfig)
    status_store: ItemStatusStore = field(default_factory=ItemStatusStore)
    selection: SelectionSet = field(default_factory=SelectionSet)
    favorites: FavoriteStore = field(default_factory=FavoriteStore)
    on_progress: Callable[[BulkSyncState], None] | None = None

    sections: list[Section] = field(default_factory=list["Section"], init=False)
    current_section: Section | None = field(default=None, init=False)
    items: list[ScrapedItem] = field(default_factory=list["ScrapedItem"], init=False)
    search: str = field(default="", init=False)
    page: int = field(default=1, init=False)

    resolver: ReconciliationResolver = field(init=False)
    orchestrator: BulkSyncOrchestrator = field(init=False)
    single_sync: SingleItemSync = field(init=False)
    favorite_controller: FavoriteController = field(init=False)
    duplicates: DuplicatePipeline = field(init=False)

    def __post_init__(self) -> None:
        self.resolver = ReconciliationResolver(self.backend, status_store=self.status_store)
        self.orchestrator = BulkSyncOrchestrator(
            self.backend,
            notifier=self.notifier,
            status_store=self.status_store,
            inter_item_delay=self.sync_config.inter_item_delay_seconds,
            on_progress=self.on_progress,
            on_finished=self.refresh,
        )
        self.single_sync = SingleItemSync(
            self.backend,
            self.status_store,
            resolver=self.resolver,
            notifier=self.notifier,
        )
        self.favorite_controller = FavoriteController(
            self.backend, favorites=self.favorites, notifier=self.notifier
        )
        self.duplicates = DuplicatePipeline(self.backend, notifier=self.notifier)

    @property
    def is_syncing(self) -> bool:
        return self.orchestrator.is_running

    # Sections and post list

    async def load_sections(self) -> list[Section]:
        try:
            self.sections = await self.backend.list_sections()
        except BackendError as exc:
            log.warning("Loading sections failed: %s", exc)
            self.notifier.error("Failed to load sections")
            return []
        return list(self.sections)

    def find_section(self, name_or_link: str) -> Section | None:
        needle = name_or_link.strip().casefold()
        return next(
            (
                section
                for section in self.sections
                if needle in {section.name.casefold(), section.link.casefold()}
            ),
            None,
        )

    async def open_section(self, section: Section) -> bool:
        """Switch the view to ``section``; refused while a bulk run is active."""

        if self.is_syncing:
            self.notifier.error(TAB_CHANGE_REFUSED)
            return False
        self.current_section = section
        self.selection.clear()
        self.search = ""
        self.page = 1
        await self.refresh()
        return True

    async def refresh(self) -> None:
        """Reload the post list of the open section and re-check every visible post."""

        if self.current_section is None:
            return
        try:
            self.items = await self.backend.list_posts(self.current_section.link)
        except BackendError as exc:
            log.warning("Loading posts of %s failed: %s", self.current_section.name, exc)
            self.notifier.error("Failed to load posts")
            self.items = []
        self.selection.retain_visible(self._visible_urls())
        await self.resolver.resolve_many(self._visible_urls())
        self._adopt_server_favorites()

    def set_search(self, query: str) -> None:
        self.search = query.strip()
        self.page = 1
        dropped = self.selection.retain_visible(self._visible_urls())
        if dropped:
            log.debug("Search dropped %d selected posts from the view", len(dropped))

    def visible_items(self) -> list[ScrapedItem]:
        if not self.search:
            return list(self.items)
        needle = self.search.casefold()
        return [item for item in self.items if needle in item.title.casefold()]

    # Pagination and selection

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(len(self.visible_items()) / self.sync_config.items_per_page))

    def page_items(self, page: int | None = None) -> list[ScrapedItem]:
        number = self.page if page is None else page
        if number < 1:
            raise ValueError(f"Page numbers start at 1, got {number}")
        size = self.sync_config.items_per_page
        start = (number - 1) * size
        return self.visible_items()[start : start + size]

    def toggle_select(self, url: str) -> bool:
        """Flip the selection of a post in the current view; other URLs are ignored."""

        if url not in self._visible_urls():
            log.debug("Not selecting %s, it is not in the current view", url)
            return False
        return self.selection.toggle(url)

    def toggle_select_page(self, page: int | None = None) -> bool:
        page_urls = [url for item in self.page_items(page) if (url := item.sync_url)]
        return self.selection.toggle_page(page_urls)

    def status_of(self, item: ScrapedItem) -> ItemStatus | None:
        url = item.sync_url
        return self.status_store.get(url) if url else None

    # Sync

    async def sync_all(self) -> BulkSyncResult:
        return await self.orchestrator.sync_all(self.visible_items())

    async def sync_selected(self) -> BulkSyncResult:
        return await self.orchestrator.sync_selected(self.visible_items(), self.selection)

    async def sync_missing(self) -> BulkSyncResult:
        return await self.orchestrator.sync_missing(self.visible_items(), self.status_store)

    def request_cancel(self) -> None:
        self.orchestrator.request_cancel()

    async def sync_item(self, item: ScrapedItem) -> ItemStatus | None:
        if self.is_syncing:
            self.notifier.error(RUN_IN_PROGRESS)
            return None
        entry = await self.single_sync.sync(item)
        self._adopt_server_favorites()
        return entry

    async def sync_urls(self, urls: list[str]) -> BulkSyncResult:
        """Select exactly ``urls`` from the current view and sync them."""

        self.selection.clear()
        visible = set(self._visible_urls())
        unknown = [url for url in urls if url not in visible]
        if unknown:
            log.warning("Ignoring %d URLs not in the current view", len(unknown))
        self.selection.select_many(url for url in urls if url in visible)
        return await self.sync_selected()

    # Favorites

    def is_favorite(self, url: str) -> bool:
        record_id = self._record_id_for(url)
        if record_id is None:
            return False
        return self.favorites.get(record_id, default=bool(self._server_favorite(url)))

    async def toggle_favorite(self, url: str) -> MutationOutcome:
        record_id = self._record_id_for(url)
        current = self.is_favorite(url)
        outcome = await self.favorite_controller.toggle_favorite(record_id, current)
        if outcome is MutationOutcome.APPLIED:
            self.status_store.set_favorite(url, not current)
        return outcome

    def _record_id_for(self, url: str) -> str | None:
        entry = self.status_store.get(url)
        if entry is not None and entry.record_id is not None:
            return entry.record_id
        listed = self._listed_item(url)
        return listed.record_id if listed is not None else None

    def _server_favorite(self, url: str) -> bool | None:
        """Favorite flag as last reported by a lookup, else by the post listing."""

        entry = self.status_store.get(url)
        if entry is not None and entry.favorite is not None:
            return entry.favorite
        listed = self._listed_item(url)
        if listed is None or listed.record_id is None:
            return None
        return listed.favorite

    def _adopt_server_favorites(self) -> None:
        # Reconciled flags replace whatever a local toggle left behind.
        for url in self._visible_urls():
            record_id = self._record_id_for(url)
            favorite = self._server_favorite(url)
            if record_id is not None and favorite is not None:
                self.favorites.set(record_id, favorite)

    def _listed_item(self, url: str) -> ScrapedItem | None:
        return next((item for item in self.items if item.sync_url == url), None)

    # Duplicates

    async def analyze_duplicates(self) -> DuplicateReport | None:
        return await self.duplicates.analyze()

    async def delete_duplicates(self) -> DuplicateDeletion | None:
        return await self.duplicates.delete_duplicates()

    # Backend maintenance jobs

    async def sync_categories(self) -> bool:
        try:
            await self.backend.sync_categories()
        except BackendError as exc:
            log.warning("Category sync failed: %s", exc)
            self.notifier.error("Failed to sync categories")
            return False
        self.notifier.success("Categories list updated!")
        await self.load_sections()
        return True

    async def sync_current_section(self) -> bool:
        section = self.current_section
        if section is None:
            self.notifier.error("Open a section first")
            return False
        try:
            await self.backend.scrape_section(section.link)
        except BackendError as exc:
            log.warning("Scraping section %s failed: %s", section.name, exc)
            self.notifier.error("Failed to sync posts")
            return False
        self.notifier.success(f"{section.name} posts updated!")
        await self.refresh()
        return True

    async def fix_all_urls(self) -> int | None:
        try:
            updated = await self.backend.fix_all_urls()
        except BackendError as exc:
            log.warning("URL normalization failed: %s", exc)
            self.notifier.error("Failed to normalize URLs")
            return None
        log.info("Backend normalized %d stored URLs", updated)
        self.notifier.success("URLs normalized")
        await self.refresh()
        return updated

    def _visible_urls(self) -> list[str]:
        return [url for item in self.visible_items() if (url := item.sync_url)]


def summarize(result: BulkSyncResult) -> str:
    if result.outcome is BulkSyncOutcome.REJECTED or result.state is None:
        return f"{result.label}: nothing to do"
    state = result.state
    return (
        f"{result.label} {result.outcome}: {state.current}/{state.total} processed, "
        f"{state.success_count} synced, {state.failed_count} failed"
    )

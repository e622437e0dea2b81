"""Ports for the scraper backend the dashboard drives."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from postsync.domain.model import (
        DuplicateDeletion,
        DuplicateReport,
        LookupKey,
        PostLookup,
        ScrapedItem,
        Section,
    )


class BackendError(RuntimeError):
    """Raised by backend adapters for any failed remote call."""


class BackendRequestError(BackendError):
    """The request never produced a response (network failure, timeout)."""


class BackendStatusError(BackendError):
    """The backend answered with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class BackendPayloadError(BackendError):
    """The backend answered 2xx with a body we cannot interpret."""


@runtime_checkable
class PostLookupPort(Protocol):
    """Find a stored post by one URL representation."""

    async def lookup_post(self, url: str, *, key: LookupKey) -> PostLookup: ...

    async def lookup_post_by_body(self, url: str) -> PostLookup: ...


@runtime_checkable
class PostSyncPort(Protocol):
    """Scrape one post server-side and persist it."""

    async def scrape_post(self, url: str) -> PostLookup: ...


@runtime_checkable
class FavoritePort(Protocol):
    async def mark_favorite(self, record_id: str, *, favorite: bool) -> None: ...


@runtime_checkable
class DuplicatePort(Protocol):
    async def analyze_duplicates(self) -> DuplicateReport: ...

    async def delete_duplicates(self) -> DuplicateDeletion: ...


@runtime_checkable
class CatalogPort(Protocol):
    """Section and post-list reads plus the scraper's bulk maintenance jobs."""

    async def list_sections(self) -> list[Section]: ...

    async def list_posts(self, section_link: str) -> list[ScrapedItem]: ...

    async def sync_categories(self) -> None: ...

    async def scrape_section(self, section_link: str) -> None: ...

    async def fix_all_urls(self) -> int: ...


@runtime_checkable
class PostBackend(
    PostLookupPort, PostSyncPort, FavoritePort, DuplicatePort, CatalogPort, Protocol
):
    """Everything the dashboard needs from the backend."""


__all__ = [
    "BackendError",
    "BackendPayloadError",
    "BackendRequestError",
    "BackendStatusError",
    "CatalogPort",
    "DuplicatePort",
    "FavoritePort",
    "PostBackend",
    "PostLookupPort",
    "PostSyncPort",
]

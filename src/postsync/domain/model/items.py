"""Scraped items, sections and per-item reconciliation entries."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import ReconciliationStatus

_ID_FORBIDDEN = frozenset(
    {ReconciliationStatus.IDLE, ReconciliationStatus.LOADING, ReconciliationStatus.MISSING}
)


@dataclass(slots=True, frozen=True, kw_only=True)
class ScrapedItem:
    """A post listed by the scraper; identified by its URL until reconciled.

    Listings deliver the URL under either ``link`` or ``url``; ``sync_url`` prefers
    ``link``. Some listings already carry the stored record id and favorite flag.
    """

    title: str = ""
    url: str | None = None
    link: str | None = None
    record_id: str | None = None
    favorite: bool = False

    @property
    def sync_url(self) -> str | None:
        return self.link or self.url or None


@dataclass(slots=True, frozen=True)
class Section:
    """A category tab of the scraped site."""

    name: str
    link: str


@dataclass(slots=True, frozen=True)
class PostLookup:
    """Result of a single lookup probe or sync call against the backend."""

    hit: bool
    record_id: str | None = None
    favorite: bool | None = None


@dataclass(slots=True, frozen=True)
class ItemStatus:
    """Reconciliation state of one URL.

    ``present`` and ``scraping`` carry the stored record id when the backend has
    reported one; the other states never do.
    """

    status: ReconciliationStatus
    record_id: str | None = None
    favorite: bool | None = None

    def __post_init__(self) -> None:
        if self.status in _ID_FORBIDDEN and self.record_id is not None:
            raise ValueError(f"A {self.status} status cannot carry a record id")

    @property
    def is_settled(self) -> bool:
        return self.status in {ReconciliationStatus.PRESENT, ReconciliationStatus.MISSING}

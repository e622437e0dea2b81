"""Operator selection of posts across pages of the current view."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(slots=True)
class SelectionSet:
    """URLs chosen by the operator; independent of pagination."""

    _urls: set[str] = field(default_factory=set[str])

    def toggle(self, url: str) -> bool:
        """Flip membership of ``url`` and return whether it is now selected."""

        if url in self._urls:
            self._urls.discard(url)
            return False
        self._urls.add(url)
        return True

    def select_many(self, urls: Iterable[str]) -> None:
        self._urls.update(url for url in urls if url)

    def deselect_many(self, urls: Iterable[str]) -> None:
        self._urls.difference_update(urls)

    def is_page_selected(self, page_urls: Iterable[str]) -> bool:
        urls = [url for url in page_urls if url]
        return bool(urls) and all(url in self._urls for url in urls)

    def toggle_page(self, page_urls: Iterable[str]) -> bool:
        """Select every URL on the page, or clear them all if already selected."""

        urls = [url for url in page_urls if url]
        if self.is_page_selected(urls):
            self.deselect_many(urls)
            return False
        self.select_many(urls)
        return True

    def retain_visible(self, visible_urls: Iterable[str]) -> set[str]:
        """Drop URLs no longer in the view and return the ones dropped."""

        visible = set(visible_urls)
        stale = self._urls - visible
        self._urls &= visible
        return stale

    def clear(self) -> None:
        self._urls.clear()

    def snapshot(self) -> frozenset[str]:
        return frozenset(self._urls)

    def __contains__(self, url: object) -> bool:
        return url in self._urls

    def __len__(self) -> int:
        return len(self._urls)

"""Working sets a bulk run can be started over."""

from __future__ import annotations

from typing import TYPE_CHECKING

from postsync.domain.model import ReconciliationStatus

if TYPE_CHECKING:
    from collections.abc import Iterable

    from postsync.domain.model import ScrapedItem
    from postsync.domain.reconciliation import ItemStatusStore
    from postsync.domain.selection import SelectionSet


def all_items(view: Iterable[ScrapedItem]) -> list[ScrapedItem]:
    return list(view)


def selected_items(view: Iterable[ScrapedItem], selection: SelectionSet) -> list[ScrapedItem]:
    return [item for item in view if item.sync_url and item.sync_url in selection]


def missing_items(view: Iterable[ScrapedItem], statuses: ItemStatusStore) -> list[ScrapedItem]:
    return [
        item
        for item in view
        if item.sync_url and statuses.status_of(item.sync_url) is ReconciliationStatus.MISSING
    ]

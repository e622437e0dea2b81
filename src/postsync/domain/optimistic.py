"""Optimistic local updates with rollback, and favorite toggling built on them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, TypeVar

from postsync.domain.ports.backend import BackendError
from postsync.domain.ports.notify import LoggingNotifier, Notifier

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from postsync.domain.ports.backend import FavoritePort

log = getLogger(__name__)

T = TypeVar("T")


class MutationOutcome(StrEnum):
    APPLIED = "applied"
    ROLLED_BACK = "rolled_back"
    REJECTED = "rejected"


async def optimistic_update(
    *,
    apply: Callable[[T], None],
    previous: T,
    new: T,
    commit: Callable[[T], Awaitable[object]],
) -> MutationOutcome:
    """Show ``new`` immediately, then confirm it remotely.

    ``previous`` is captured by the caller at call time. A failed commit re-applies
    exactly that value, so an interleaved second update is not clobbered with a
    value read later.
    """

    apply(new)
    try:
        await commit(new)
    except BackendError as exc:
        log.warning("Remote update failed, restoring previous value: %s", exc)
        apply(previous)
        return MutationOutcome.ROLLED_BACK
    return MutationOutcome.APPLIED


@dataclass(slots=True)
class FavoriteStore:
    """Local favorite flags keyed by stored record id."""

    _flags: dict[str, bool] = field(default_factory=dict[str, bool])

    def get(self, record_id: str, default: bool = False) -> bool:
        return self._flags.get(record_id, default)

    def set(self, record_id: str, value: bool) -> None:
        self._flags[record_id] = value

    def snapshot(self) -> dict[str, bool]:
        return dict(self._flags)


@dataclass(slots=True)
class FavoriteController:
    backend: FavoritePort
    favorites: FavoriteStore = field(default_factory=FavoriteStore)
    notifier: Notifier = field(default_factory=LoggingNotifier)

    async def toggle_favorite(self, record_id: str | None, current_value: bool) -> MutationOutcome:
        """Flip the favorite flag of a stored post.

        Posts that were never synced have no record id and are refused without any
        remote call.
        """

        if not record_id:
            self.notifier.error("Please sync first to mark as favorite")
            return MutationOutcome.REJECTED

        new_value = not current_value

        def apply(value: bool) -> None:
            self.favorites.set(record_id, value)

        async def commit(value: bool) -> None:
            await self.backend.mark_favorite(record_id, favorite=value)

        outcome = await optimistic_update(
            apply=apply, previous=current_value, new=new_value, commit=commit
        )
        if outcome is MutationOutcome.APPLIED:
            self.notifier.success("Added to favorites" if new_value else "Removed from favorites")
        else:
            self.notifier.error("Could not update favorite, change reverted")
        return outcome

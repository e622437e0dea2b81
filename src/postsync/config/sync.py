"""Synchronization defaults for the dashboard session."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_float_env

DEFAULT_INTER_ITEM_DELAY_SECONDS = 0.5
DEFAULT_ITEMS_PER_PAGE = 12


@dataclass(frozen=True, slots=True)
class SyncConfig:
    inter_item_delay_seconds: float = DEFAULT_INTER_ITEM_DELAY_SECONDS
    items_per_page: int = DEFAULT_ITEMS_PER_PAGE


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        inter_item_delay_seconds=optional_float_env(
            "POSTSYNC_SYNC_DELAY_SECONDS", DEFAULT_INTER_ITEM_DELAY_SECONDS
        )
    )

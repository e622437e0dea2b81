"""Bulk and single-post synchronization against the backend."""

from __future__ import annotations

from .cancellation import CancellationToken
from .orchestrator import DEFAULT_INTER_ITEM_DELAY_SECONDS, BulkSyncOrchestrator
from .single import SingleItemSync
from .working_sets import all_items, missing_items, selected_items

__all__ = [
    "DEFAULT_INTER_ITEM_DELAY_SECONDS",
    "BulkSyncOrchestrator",
    "CancellationToken",
    "SingleItemSync",
    "all_items",
    "missing_items",
    "selected_items",
]

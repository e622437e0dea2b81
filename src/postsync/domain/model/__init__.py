"""Domain model for scraped posts and their reconciliation."""

from __future__ import annotations

from .duplicates import DuplicateAnalysisRecord, DuplicateDeletion, DuplicatePost, DuplicateReport
from .enums import BulkSyncOutcome, BulkSyncPhase, LookupKey, ReconciliationStatus
from .items import ItemStatus, PostLookup, ScrapedItem, Section
from .sync import BulkSyncResult, BulkSyncState, progress_percent

__all__ = [
    "BulkSyncOutcome",
    "BulkSyncPhase",
    "BulkSyncResult",
    "BulkSyncState",
    "DuplicateAnalysisRecord",
    "DuplicateDeletion",
    "DuplicatePost",
    "DuplicateReport",
    "ItemStatus",
    "LookupKey",
    "PostLookup",
    "ReconciliationStatus",
    "ScrapedItem",
    "Section",
    "progress_percent",
]

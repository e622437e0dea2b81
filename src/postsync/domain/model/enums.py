"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ReconciliationStatus(StrEnum):
    """Whether a scraped item is known to the backend store."""

    IDLE = "idle"
    LOADING = "loading"
    PRESENT = "present"
    MISSING = "missing"
    SCRAPING = "scraping"


class BulkSyncPhase(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class BulkSyncOutcome(StrEnum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


class LookupKey(StrEnum):
    """Query-parameter names the lookup endpoint accepts the URL under."""

    URL = "url"
    LINK = "link"

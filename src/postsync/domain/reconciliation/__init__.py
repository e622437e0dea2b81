"""Reconciliation of scraped posts against the backend store."""

from __future__ import annotations

from .resolve import LOOKUP_KEYS, PLACEHOLDER_URLS, ReconciliationResolver
from .status import ItemStatusStore

__all__ = [
    "LOOKUP_KEYS",
    "PLACEHOLDER_URLS",
    "ItemStatusStore",
    "ReconciliationResolver",
]

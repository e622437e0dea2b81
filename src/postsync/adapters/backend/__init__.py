"""Public interface for the scraper backend adapter."""

from __future__ import annotations

from .client import BackendClient
from .schema import LookupResponse, ScrapedItemPayload
from .translator import (
    translate_duplicate_deletion,
    translate_duplicate_report,
    translate_lookup,
    translate_post_list,
    translate_sections,
)

__all__ = [
    "BackendClient",
    "LookupResponse",
    "ScrapedItemPayload",
    "translate_duplicate_deletion",
    "translate_duplicate_report",
    "translate_lookup",
    "translate_post_list",
    "translate_sections",
]

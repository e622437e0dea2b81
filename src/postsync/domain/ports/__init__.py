"""Domain port definitions for adapters."""

from __future__ import annotations

from .backend import (
    BackendError,
    BackendPayloadError,
    BackendRequestError,
    BackendStatusError,
    CatalogPort,
    DuplicatePort,
    FavoritePort,
    PostBackend,
    PostLookupPort,
    PostSyncPort,
)
from .notify import LoggingNotifier, Notifier

__all__ = [
    "BackendError",
    "BackendPayloadError",
    "BackendRequestError",
    "BackendStatusError",
    "CatalogPort",
    "DuplicatePort",
    "FavoritePort",
    "LoggingNotifier",
    "Notifier",
    "PostBackend",
    "PostLookupPort",
    "PostSyncPort",
]

"""Port for user-visible notifications (the dashboard's toasts)."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Protocol, runtime_checkable


@runtime_checkable
class Notifier(Protocol):
    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LoggingNotifier:
    """Route notifications to a logger; the default outside an interactive UI."""

    def __init__(self, name: str = "postsync.notifications") -> None:
        self._log = getLogger(name)

    def info(self, message: str) -> None:
        self._log.info(message)

    def success(self, message: str) -> None:
        self._log.info(message)

    def error(self, message: str) -> None:
        self._log.warning(message)


if TYPE_CHECKING:
    _notifier_check: Notifier = LoggingNotifier()

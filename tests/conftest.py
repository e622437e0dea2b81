from __future__ import annotations

import pytest

from tests.support.backend import FakeBackend, RecordingNotifier

_POSTSYNC_ENV = (
    "POSTSYNC_BACKEND_URL",
    "POSTSYNC_TIMEOUT_SECONDS",
    "POSTSYNC_SYNC_DELAY_SECONDS",
    "POSTSYNC_MAX_REQUESTS_PER_SECOND",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _POSTSYNC_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()

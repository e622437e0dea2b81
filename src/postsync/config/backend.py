"""Scraper backend configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_float_env, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_MAX_REQUESTS_PER_SECOND = 10.0

# Scrape calls are not idempotent on the backend; only reads are replayed.
READ_ONLY_RETRY = RetryPolicy(
    total=2,
    allowed_methods=frozenset({"GET", "HEAD"}),
    status_forcelist=frozenset({429, 502, 503, 504}),
)


@dataclass(frozen=True, slots=True)
class BackendConfig:
    """Holds the scraper backend connection settings."""

    resilience: ResilienceConfig

    @property
    def base_url(self) -> str:
        return self.resilience.base_url or ""


def get_backend_config(*, resilience: ResilienceConfig | None = None) -> BackendConfig:
    values = require_env_vars(("POSTSYNC_BACKEND_URL",))
    base_url = values["POSTSYNC_BACKEND_URL"].strip().rstrip("/")
    if resilience is not None:
        return BackendConfig(resilience=resilience)

    timeout = optional_float_env("POSTSYNC_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)
    max_per_second = optional_float_env(
        "POSTSYNC_MAX_REQUESTS_PER_SECOND", DEFAULT_MAX_REQUESTS_PER_SECOND
    )
    ratelimit = (
        RateLimit(max_calls=max(1, int(max_per_second)), per_seconds=1.0)
        if max_per_second > 0
        else None
    )
    return BackendConfig(
        resilience=ResilienceConfig(
            name="backend",
            base_url=base_url,
            timeout_seconds=timeout,
            retry=READ_ONLY_RETRY,
            ratelimit=ratelimit,
        )
    )

"""HTTP client for the scraper backend."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Unpack

import httpx
from pydantic import ValidationError

from postsync.adapters.http_resilience import RequestOptions, ResilientClient
from postsync.config import BackendConfig, get_backend_config
from postsync.domain.ports.backend import (
    BackendPayloadError,
    BackendRequestError,
    BackendStatusError,
    PostBackend,
)

from .schema import FixUrlsResponse
from .translator import (
    translate_duplicate_deletion,
    translate_duplicate_report,
    translate_lookup,
    translate_post_list,
    translate_sections,
    translate_sync_receipt,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from postsync.config import ResilienceConfig
    from postsync.domain.model import (
        DuplicateDeletion,
        DuplicateReport,
        LookupKey,
        PostLookup,
        ScrapedItem,
        Section,
    )

log = getLogger(__name__)

POST_DETAILS_PATH = "/get-post/details"
SCRAPE_POST_PATH = "/scrapper/scrape-complete"
MARK_FAVORITE_PATH = "/mark-fav/{record_id}"
ANALYZE_DUPLICATES_PATH = "/scrapper/analyze-duplicates"
SECTIONS_PATH = "/get-sections"
POST_LIST_PATH = "/get-postlist"
SYNC_CATEGORIES_PATH = "/scrapper/get-categories"
SCRAPE_SECTION_PATH = "/scrapper/scrape-category"
FIX_URLS_PATH = "/fix-all-urls"


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class BackendClient:
    """Talks to the scraper backend; every failure surfaces as a ``BackendError``."""

    config: BackendConfig = field(default_factory=get_backend_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _client: ResilientClient | None = field(default=None, init=False)

    async def __aenter__(self) -> BackendClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            client, self._client = self._client, None
            await client.aclose()

    # Lookup and sync

    async def lookup_post(self, url: str, *, key: LookupKey) -> PostLookup:
        payload = await self._request_json("GET", POST_DETAILS_PATH, params={str(key): url})
        return translate_lookup(payload)

    async def lookup_post_by_body(self, url: str) -> PostLookup:
        payload = await self._request_json("POST", POST_DETAILS_PATH, json={"url": url})
        return translate_lookup(payload)

    async def scrape_post(self, url: str) -> PostLookup:
        payload = await self._request_json("POST", SCRAPE_POST_PATH, json={"url": url})
        return translate_sync_receipt(payload)

    async def mark_favorite(self, record_id: str, *, favorite: bool) -> None:
        await self._request_json(
            "PUT",
            MARK_FAVORITE_PATH.format(record_id=record_id),
            json={"fav": favorite},
        )

    # Duplicates

    async def analyze_duplicates(self) -> DuplicateReport:
        payload = await self._request_json("GET", ANALYZE_DUPLICATES_PATH)
        return translate_duplicate_report(payload)

    async def delete_duplicates(self) -> DuplicateDeletion:
        payload = await self._request_json(
            "GET", ANALYZE_DUPLICATES_PATH, params={"delete": "true"}
        )
        return translate_duplicate_deletion(payload)

    # Catalog

    async def list_sections(self) -> list[Section]:
        return translate_sections(await self._request_json("GET", SECTIONS_PATH))

    async def list_posts(self, section_link: str) -> list[ScrapedItem]:
        payload = await self._request_json("POST", POST_LIST_PATH, params={"url": section_link})
        return translate_post_list(payload, section_link=section_link)

    async def sync_categories(self) -> None:
        await self._request_json("POST", SYNC_CATEGORIES_PATH)

    async def scrape_section(self, section_link: str) -> None:
        await self._request_json("POST", SCRAPE_SECTION_PATH, json={"url": section_link})

    async def fix_all_urls(self) -> int:
        payload = await self._request_json("POST", FIX_URLS_PATH)
        if payload is None:
            return 0
        try:
            return FixUrlsResponse.model_validate(payload).updated
        except ValidationError as exc:
            raise BackendPayloadError(f"Invalid fix-urls payload: {exc}") from exc

    def _ensure_client(self) -> ResilientClient:
        if self._client is None:
            self._client = self.client_factory(self.config.resilience)
        return self._client

    async def _request_json(
        self,
        method: str,
        path: str,
        **kwargs: Unpack[RequestOptions],
    ) -> object:
        client = self._ensure_client()
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            log.warning("Backend %s %s failed: %s", method, path, exc)
            raise BackendRequestError(f"{method} {path} failed: {exc}") from exc

        if not response.is_success:
            raise BackendStatusError(
                f"{method} {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        if not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise BackendPayloadError(f"{method} {path} returned invalid JSON") from exc


if TYPE_CHECKING:
    _backend_check: PostBackend = BackendClient()

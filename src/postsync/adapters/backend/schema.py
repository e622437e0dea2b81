"""Pydantic models describing the scraper backend payloads."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import ClassVar, cast

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

log = logging.getLogger(__name__)

EXISTING_DATA_ACTION = "EXISTING_DATA"


def _coerce_id(value: object) -> object:
    if value is None or value is False or value == "" or value == 0:
        return None
    if isinstance(value, Mapping):
        oid = cast(Mapping[str, object], value).get("$oid")
        return str(oid) if oid else str(dict(cast(Mapping[str, object], value)))
    return str(value)


def _coerce_text(value: object) -> object:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return None
    return str(value)


def _text_or_blank(value: object) -> object:
    text = _coerce_text(value)
    return "" if text is None else text


def _coerce_truthy(value: object) -> object:
    if value is None:
        return None
    return bool(value)


def _mapping_or_none(value: object) -> object:
    return value if isinstance(value, Mapping) else None


class BackendBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "Backend %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class RecordRef(BackendBaseModel):
    """A stored post as echoed back by the lookup and sync endpoints."""

    mongo_id: str | None = Field(default=None, alias="_id")
    id: str | None = None
    fav: bool | None = None

    _normalize_ids = field_validator("mongo_id", "id", mode="before")(_coerce_id)
    _normalize_fav = field_validator("fav", mode="before")(_coerce_truthy)


class LookupResponse(RecordRef):
    """Answer of the post-details lookup and of the scrape endpoint.

    Servers disagree on where the record lives: at the top level, under ``data`` or
    under ``job``. Any recognizable identifier counts as a hit.
    """

    success: object = None
    action: str | None = None
    data: RecordRef | None = None
    job: RecordRef | None = None

    _normalize_nested = field_validator("data", "job", mode="before")(_mapping_or_none)
    _normalize_action = field_validator("action", mode="before")(_coerce_text)

    @property
    def record_id(self) -> str | None:
        nested_ids = (ref.mongo_id for ref in (self.data, self.job) if ref is not None)
        return self.mongo_id or self.id or next((rid for rid in nested_ids if rid), None)

    @property
    def favorite(self) -> bool | None:
        for fav in (self.fav, self.data and self.data.fav, self.job and self.job.fav):
            if fav is not None:
                return fav
        return None

    @property
    def is_hit(self) -> bool:
        if self.success is True:
            return True
        if self.action == EXISTING_DATA_ACTION:
            return True
        return self.record_id is not None


class ScrapedItemPayload(BackendBaseModel):
    title: str = ""
    link: str | None = None
    url: str | None = None
    mongo_id: str | None = Field(default=None, alias="_id")
    id: str | None = None
    fav: bool = False

    @model_validator(mode="before")
    @classmethod
    def _fallback_title(cls, value: object) -> object:
        if isinstance(value, Mapping):
            data: dict[str, object] = dict(cast(Mapping[str, object], value))
            if not data.get("title") and data.get("postTitle"):
                data["title"] = data["postTitle"]
            return data
        return value

    _normalize_ids = field_validator("mongo_id", "id", mode="before")(_coerce_id)
    _normalize_title = field_validator("title", mode="before")(_text_or_blank)
    _normalize_text = field_validator("link", "url", mode="before")(_coerce_text)

    @field_validator("fav", mode="before")
    @classmethod
    def _truthy_fav(cls, value: object) -> bool:
        return bool(value)


class SectionPostsPayload(BackendBaseModel):
    url: str | None = None
    jobs: list[ScrapedItemPayload] = Field(default_factory=list["ScrapedItemPayload"])


class CategoryPayload(BackendBaseModel):
    name: str
    link: str


class SectionGroupPayload(BackendBaseModel):
    categories: list[CategoryPayload] = Field(default_factory=list["CategoryPayload"])


class DuplicatePostPayload(BackendBaseModel):
    title: str | None = None
    url: str | None = None
    path: str | None = None
    id: str | None = None
    organization: str | None = None
    created_at: str | None = Field(default=None, alias="createdAt")

    _normalize_text = field_validator(
        "title", "url", "path", "organization", "created_at", mode="before"
    )(_coerce_text)
    _normalize_id = field_validator("id", mode="before")(_coerce_id)

    @model_validator(mode="before")
    @classmethod
    def _accept_mongo_id(cls, value: object) -> object:
        if isinstance(value, Mapping):
            data: dict[str, object] = dict(cast(Mapping[str, object], value))
            if data.get("id") is None and data.get("_id") is not None:
                data["id"] = data.pop("_id")
            return data
        return value


def _coerce_similarity(value: object) -> object:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    try:
        return float(cast(str, value))
    except (TypeError, ValueError):
        return None


class DuplicateAnalysisPayload(BackendBaseModel):
    """One entry of the canonical ``analysis`` array."""

    similarity: float | None = None
    will_delete: DuplicatePostPayload | None = Field(default=None, alias="willDelete")
    will_keep: DuplicatePostPayload | None = Field(default=None, alias="willKeep")
    deleted: bool = Field(default=False, validation_alias=AliasChoices("deleted", "alreadyDeleted"))
    decision: str | None = None
    reason: str | None = None

    _normalize_similarity = field_validator("similarity", mode="before")(_coerce_similarity)
    _normalize_posts = field_validator("will_delete", "will_keep", mode="before")(
        _mapping_or_none
    )
    _normalize_text = field_validator("decision", "reason", mode="before")(_coerce_text)

    @field_validator("deleted", mode="before")
    @classmethod
    def _truthy_deleted(cls, value: object) -> bool:
        return bool(value)


class DuplicateResultPayload(DuplicateAnalysisPayload):
    """One entry of the ``results`` array the newer analyzer returns."""

    similarity_percent: float | None = Field(default=None, alias="similarityPercent")
    keep: str | None = None
    deleted_post: DuplicatePostPayload | None = Field(default=None, alias="deletedPost")
    kept_post: DuplicatePostPayload | None = Field(default=None, alias="keptPost")

    _normalize_percent = field_validator("similarity_percent", mode="before")(
        _coerce_similarity
    )
    _normalize_result_posts = field_validator("deleted_post", "kept_post", mode="before")(
        _mapping_or_none
    )
    _normalize_keep = field_validator("keep", mode="before")(_coerce_text)


class DuplicateReportPayload(BackendBaseModel):
    duplicates_found: int | None = Field(default=None, alias="duplicatesFound")
    scanned_posts: int | None = Field(default=None, alias="scannedPosts")
    deleted_count: int | None = Field(default=None, alias="deletedCount")
    duplicates_deleted: int | None = Field(default=None, alias="duplicatesDeleted")
    mode: str | None = None
    message: str | None = None

    @property
    def explicit_deleted_count(self) -> int | None:
        if self.deleted_count is not None:
            return self.deleted_count
        return self.duplicates_deleted


class ResultsReportPayload(DuplicateReportPayload):
    results: list[DuplicateResultPayload]


class AnalysisReportPayload(DuplicateReportPayload):
    analysis: list[DuplicateAnalysisPayload]


class FixUrlsResponse(BackendBaseModel):
    updated: int = 0
    message: str | None = None

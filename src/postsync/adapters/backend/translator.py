"""Translate backend payloads into domain objects."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from logging import getLogger
from typing import TypeAlias, cast

from pydantic import ValidationError

from postsync.domain.model import (
    DuplicateAnalysisRecord,
    DuplicateDeletion,
    DuplicatePost,
    DuplicateReport,
    PostLookup,
    ScrapedItem,
    Section,
)
from postsync.domain.ports.backend import BackendPayloadError

from .schema import (
    AnalysisReportPayload,
    DuplicateAnalysisPayload,
    DuplicatePostPayload,
    DuplicateReportPayload,
    DuplicateResultPayload,
    LookupResponse,
    ResultsReportPayload,
    ScrapedItemPayload,
    SectionGroupPayload,
    SectionPostsPayload,
)

log = getLogger(__name__)

JsonObject: TypeAlias = Mapping[str, object]


def translate_lookup(payload: object) -> PostLookup:
    """Judge a lookup answer; anything unrecognizable is a miss, not an error."""

    if not isinstance(payload, Mapping):
        return PostLookup(hit=False)
    try:
        response = LookupResponse.model_validate(payload)
    except ValidationError as exc:
        log.debug("Unreadable lookup payload: %s", exc)
        return PostLookup(hit=False)
    if not response.is_hit:
        return PostLookup(hit=False)
    return PostLookup(hit=True, record_id=response.record_id, favorite=response.favorite)


def translate_sync_receipt(payload: object) -> PostLookup:
    """Read the identifier and favorite flag a successful scrape may echo back."""

    lookup = translate_lookup(payload)
    return PostLookup(hit=True, record_id=lookup.record_id, favorite=lookup.favorite)


def translate_scraped_item(payload: ScrapedItemPayload) -> ScrapedItem:
    return ScrapedItem(
        title=payload.title,
        url=payload.url or None,
        link=payload.link or None,
        record_id=payload.mongo_id or payload.id,
        favorite=payload.fav,
    )


def translate_post_list(payload: object, *, section_link: str = "") -> list[ScrapedItem]:
    """Extract the posts of one section from any of the post-list response shapes.

    The endpoint answers with a flat list of posts, a list of sections each holding
    ``jobs``, or an object with a ``jobs`` array.
    """

    try:
        if isinstance(payload, Mapping):
            data = cast(JsonObject, payload)
            jobs = data.get("jobs")
            if isinstance(jobs, list):
                return _translate_items(cast(list[object], jobs))
            nested = data.get("data")
            if isinstance(nested, list):
                return translate_post_list(nested, section_link=section_link)
            return []

        if not isinstance(payload, list):
            raise BackendPayloadError("Unexpected post list payload")

        entries = cast(list[object], payload)
        if all(_is_flat_post(entry) for entry in entries):
            return _translate_items(entries)

        sections = [
            SectionPostsPayload.model_validate(entry)
            for entry in entries
            if isinstance(entry, Mapping)
        ]
        chosen = next(
            (
                section
                for section in sections
                if section.url and section_link and section.url in section_link
            ),
            sections[0] if sections else None,
        )
        if chosen is None:
            return []
        return [translate_scraped_item(job) for job in chosen.jobs]
    except ValidationError as exc:
        raise BackendPayloadError(f"Invalid post list payload: {exc}") from exc


def translate_sections(payload: object) -> list[Section]:
    if isinstance(payload, Mapping):
        payload = cast(JsonObject, payload).get("data")
    if not isinstance(payload, list) or not payload:
        return []
    try:
        group = SectionGroupPayload.model_validate(cast(list[object], payload)[0])
    except ValidationError as exc:
        raise BackendPayloadError(f"Invalid sections payload: {exc}") from exc
    return [Section(name=category.name, link=category.link) for category in group.categories]


def translate_duplicate_report(payload: object) -> DuplicateReport:
    """Normalize either duplicate-analysis shape into the canonical report.

    An ``analysis`` array is taken as already canonical; otherwise a ``results``
    array from the newer analyzer is mapped field by field. ``duplicates_found``
    uses the explicit count when the backend sends one.
    """

    data = _require_mapping(payload)
    try:
        if isinstance(data.get("analysis"), list):
            analysis_report = AnalysisReportPayload.model_validate(data)
            records = tuple(_translate_analysis_entry(entry) for entry in analysis_report.analysis)
            meta: DuplicateReportPayload = analysis_report
        elif isinstance(data.get("results"), list):
            results_report = ResultsReportPayload.model_validate(data)
            records = tuple(_translate_result_entry(entry) for entry in results_report.results)
            meta = results_report
        else:
            meta = DuplicateReportPayload.model_validate(data)
            records = ()
    except ValidationError as exc:
        raise BackendPayloadError(f"Invalid duplicate analysis payload: {exc}") from exc

    duplicates_found = meta.duplicates_found if meta.duplicates_found is not None else len(records)
    return DuplicateReport(
        duplicates_found=duplicates_found,
        records=records,
        scanned_posts=meta.scanned_posts,
        mode=meta.mode,
        message=meta.message,
    )


def translate_duplicate_deletion(payload: object) -> DuplicateDeletion:
    report = translate_duplicate_report(payload)
    try:
        meta = DuplicateReportPayload.model_validate(_require_mapping(payload))
    except ValidationError as exc:
        raise BackendPayloadError(f"Invalid duplicate deletion payload: {exc}") from exc
    deleted_count = meta.explicit_deleted_count
    if deleted_count is None:
        deleted_count = sum(1 for record in report.records if record.already_deleted)
    return DuplicateDeletion(deleted_count=deleted_count, report=report)


def _translate_items(entries: Sequence[object]) -> list[ScrapedItem]:
    return [
        translate_scraped_item(ScrapedItemPayload.model_validate(entry))
        for entry in entries
        if isinstance(entry, Mapping)
    ]


def _is_flat_post(entry: object) -> bool:
    if not isinstance(entry, Mapping):
        return False
    data = cast(JsonObject, entry)
    return bool(data.get("title")) and bool(data.get("link"))


def _translate_analysis_entry(entry: DuplicateAnalysisPayload) -> DuplicateAnalysisRecord:
    return DuplicateAnalysisRecord(
        similarity=entry.similarity if entry.similarity is not None else 0.0,
        deleted_item=_translate_post(entry.will_delete),
        kept_item=_translate_post(entry.will_keep),
        already_deleted=entry.deleted,
        decision=entry.decision or "",
        reason=entry.reason or "",
    )


def _translate_result_entry(entry: DuplicateResultPayload) -> DuplicateAnalysisRecord:
    similarity = entry.similarity if entry.similarity is not None else entry.similarity_percent
    return DuplicateAnalysisRecord(
        similarity=similarity if similarity is not None else 0.0,
        deleted_item=_translate_post(entry.deleted_post or entry.will_delete),
        kept_item=_translate_post(entry.kept_post or entry.will_keep),
        already_deleted=entry.deleted,
        decision=entry.decision or entry.keep or "",
        reason=entry.reason or "",
    )


def _translate_post(post: DuplicatePostPayload | None) -> DuplicatePost:
    if post is None:
        return DuplicatePost()
    return DuplicatePost(
        title=post.title or "",
        url=post.url or post.path or post.id or "",
        organization=post.organization or "",
        created_at=post.created_at or "",
    )


def _require_mapping(payload: object) -> JsonObject:
    if not isinstance(payload, Mapping):
        raise BackendPayloadError("Expected a JSON object from the backend")
    return cast(JsonObject, payload)

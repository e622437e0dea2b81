"""Canonical duplicate-analysis records."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True, frozen=True, kw_only=True)
class DuplicatePost:
    title: str = ""
    url: str = ""
    organization: str = ""
    created_at: str = ""

    def to_canonical(self) -> dict[str, str]:
        payload = {"title": self.title, "url": self.url}
        if self.organization:
            payload["organization"] = self.organization
        if self.created_at:
            payload["createdAt"] = self.created_at
        return payload


@dataclass(slots=True, frozen=True, kw_only=True)
class DuplicateAnalysisRecord:
    """One pair of near-identical posts as judged by the backend."""

    similarity: float
    deleted_item: DuplicatePost = field(default_factory=DuplicatePost)
    kept_item: DuplicatePost = field(default_factory=DuplicatePost)
    already_deleted: bool = False
    decision: str = ""
    reason: str = ""

    def to_canonical(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "similarity": self.similarity,
            "willDelete": self.deleted_item.to_canonical(),
            "willKeep": self.kept_item.to_canonical(),
            "deleted": self.already_deleted,
        }
        if self.decision:
            payload["decision"] = self.decision
        if self.reason:
            payload["reason"] = self.reason
        return payload


@dataclass(slots=True, frozen=True, kw_only=True)
class DuplicateReport:
    duplicates_found: int
    records: tuple[DuplicateAnalysisRecord, ...] = ()
    scanned_posts: int | None = None
    mode: str | None = None
    message: str | None = None

    def to_canonical(self) -> dict[str, object]:
        return {
            "duplicatesFound": self.duplicates_found,
            "scannedPosts": self.scanned_posts,
            "mode": self.mode,
            "analysis": [record.to_canonical() for record in self.records],
        }


@dataclass(slots=True, frozen=True, kw_only=True)
class DuplicateDeletion:
    deleted_count: int
    report: DuplicateReport

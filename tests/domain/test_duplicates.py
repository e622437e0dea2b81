from __future__ import annotations

import asyncio

from postsync.domain.duplicates import DuplicatePipeline
from postsync.domain.model import (
    DuplicateAnalysisRecord,
    DuplicateDeletion,
    DuplicatePost,
    DuplicateReport,
)
from tests.support.backend import FakeBackend, RecordingNotifier


def _report() -> DuplicateReport:
    return DuplicateReport(
        duplicates_found=1,
        records=(
            DuplicateAnalysisRecord(
                similarity=75.0,
                deleted_item=DuplicatePost(title="A", url="/a"),
                kept_item=DuplicatePost(title="B", url="/b"),
            ),
        ),
    )


def test_analyze_keeps_last_report(backend: FakeBackend, notifier: RecordingNotifier) -> None:
    backend.report = _report()
    pipeline = DuplicatePipeline(backend, notifier=notifier)

    report = asyncio.run(pipeline.analyze())

    assert report == backend.report
    assert pipeline.last_report == report
    assert notifier.texts("success") == ["Analysis complete: 1 duplicates found"]


def test_analyze_failure_is_notified(backend: FakeBackend, notifier: RecordingNotifier) -> None:
    backend.fail_duplicates = True
    pipeline = DuplicatePipeline(backend, notifier=notifier)

    assert asyncio.run(pipeline.analyze()) is None
    assert notifier.texts("error") == ["Failed to analyze duplicates"]


def test_delete_reports_zero_deletions_as_success(
    backend: FakeBackend, notifier: RecordingNotifier
) -> None:
    pipeline = DuplicatePipeline(backend, notifier=notifier)
    asyncio.run(pipeline.analyze())

    deletion = asyncio.run(pipeline.delete_duplicates())

    assert deletion == DuplicateDeletion(deleted_count=0, report=backend.report)
    assert pipeline.last_report is None
    assert notifier.texts("success")[-1] == "0 duplicates deleted"


def test_delete_failure_is_notified(backend: FakeBackend, notifier: RecordingNotifier) -> None:
    backend.fail_duplicates = True

    assert asyncio.run(DuplicatePipeline(backend, notifier=notifier).delete_duplicates()) is None
    assert notifier.texts("error") == ["Failed to delete duplicates"]

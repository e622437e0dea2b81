from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from postsync.adapters.backend import BackendClient
from postsync.app import Dashboard, summarize
from postsync.config import (
    ConfigurationError,
    configure_logging,
    get_backend_config,
    get_sync_config,
)
from postsync.domain.model import BulkSyncOutcome, ReconciliationStatus
from postsync.domain.optimistic import MutationOutcome

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from postsync.domain.model import BulkSyncState

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile scraped posts with the backend store")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every backend request",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("sections", help="List the sections of the scraped site")

    status = subparsers.add_parser("status", help="Show which posts of a section are stored")
    _add_section_argument(status)
    status.add_argument(
        "--search",
        type=str,
        default="",
        help="Only show posts whose title contains this text",
    )
    status.add_argument(
        "--page",
        type=int,
        help="Only show this page of the result (12 posts per page)",
    )

    sync = subparsers.add_parser("sync", help="Sync posts of a section into the backend")
    _add_section_argument(sync)
    sync.add_argument(
        "--search",
        type=str,
        default="",
        help="Restrict the working set to posts whose title contains this text",
    )
    mode = sync.add_mutually_exclusive_group(required=True)
    mode.add_argument("--all", action="store_true", help="Sync every post in the view")
    mode.add_argument(
        "--missing-only",
        action="store_true",
        help="Sync only posts the backend does not have yet",
    )
    mode.add_argument(
        "--select",
        nargs="+",
        metavar="URL",
        help="Sync only the given post URLs",
    )

    favorite = subparsers.add_parser("favorite", help="Toggle the favorite flag of a stored post")
    favorite.add_argument("url", type=str, help="URL of the post")

    duplicates = subparsers.add_parser("duplicates", help="Duplicate analysis commands")
    duplicates_sub = duplicates.add_subparsers(dest="duplicates_command", required=True)
    duplicates_sub.add_parser("analyze", help="Report duplicate posts without deleting")
    duplicates_sub.add_parser("delete", help="Delete the duplicates the backend finds")

    subparsers.add_parser("fix-urls", help="Normalize the URLs of every stored post")
    subparsers.add_parser("categories", help="Re-scrape the section list of the site")

    scrape = subparsers.add_parser("scrape-section", help="Scrape every post of a section")
    _add_section_argument(scrape)

    return parser.parse_args(list(argv))


def _add_section_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--section",
        type=str,
        required=True,
        help="Section name or link as listed by the sections command",
    )


def _log_progress(state: BulkSyncState) -> None:
    log.info(
        "Progress %s%% (%s/%s): %s synced, %s failed",
        state.progress_percent,
        state.current,
        state.total,
        state.success_count,
        state.failed_count,
    )


async def _open_section(dashboard: Dashboard, name: str) -> None:
    await dashboard.load_sections()
    section = dashboard.find_section(name)
    if section is None:
        raise ValueError(f"Unknown section: {name}")
    await dashboard.open_section(section)


def _show_status(dashboard: Dashboard, page: int | None) -> None:
    items = dashboard.visible_items() if page is None else dashboard.page_items(page)
    for item in items:
        entry = dashboard.status_of(item)
        status = entry.status if entry else ReconciliationStatus.IDLE
        marker = " *" if item.sync_url and dashboard.is_favorite(item.sync_url) else ""
        log.info("[%s] %s%s (%s)", status, item.title or "<untitled>", marker, item.sync_url)
    missing = dashboard.status_store.urls_with_status(
        ReconciliationStatus.MISSING,
        [url for item in items if (url := item.sync_url)],
    )
    log.info("%d posts shown, %d missing from the backend", len(items), len(missing))


async def _run_sync(dashboard: Dashboard, args: argparse.Namespace) -> int:
    loop = asyncio.get_running_loop()
    # Ctrl+C stops the run after the post in flight instead of killing it.
    with contextlib.suppress(NotImplementedError):
        loop.add_signal_handler(SIGINT, dashboard.request_cancel)
    try:
        if args.all:
            result = await dashboard.sync_all()
        elif args.missing_only:
            result = await dashboard.sync_missing()
        else:
            result = await dashboard.sync_urls(list(args.select))
    finally:
        with contextlib.suppress(NotImplementedError):
            loop.remove_signal_handler(SIGINT)
    log.info(summarize(result))
    return 1 if result.outcome is BulkSyncOutcome.REJECTED else 0


async def _dispatch(args: argparse.Namespace) -> int:  # noqa: C901, PLR0911
    async with BackendClient(get_backend_config()) as backend:
        dashboard = Dashboard(backend, sync_config=get_sync_config(), on_progress=_log_progress)

        if args.command == "sections":
            sections = await dashboard.load_sections()
            for section in sections:
                log.info("%s: %s", section.name, section.link)
            return 0

        if args.command == "status":
            await _open_section(dashboard, args.section)
            dashboard.set_search(args.search)
            _show_status(dashboard, args.page)
            return 0

        if args.command == "sync":
            await _open_section(dashboard, args.section)
            dashboard.set_search(args.search)
            return await _run_sync(dashboard, args)

        if args.command == "favorite":
            await dashboard.resolver.refresh(args.url)
            outcome = await dashboard.toggle_favorite(args.url)
            log.info("Favorite toggle %s", outcome)
            return 0 if outcome is MutationOutcome.APPLIED else 1

        if args.command == "duplicates":
            if args.duplicates_command == "analyze":
                report = await dashboard.analyze_duplicates()
                if report is None:
                    return 1
                for record in report.records:
                    log.info(
                        "%.2f%% delete %r keep %r",
                        record.similarity,
                        record.deleted_item.url,
                        record.kept_item.url,
                    )
                return 0
            deletion = await dashboard.delete_duplicates()
            return 0 if deletion is not None else 1

        if args.command == "fix-urls":
            return 0 if await dashboard.fix_all_urls() is not None else 1

        if args.command == "categories":
            return 0 if await dashboard.sync_categories() else 1

        if args.command == "scrape-section":
            await _open_section(dashboard, args.section)
            return 0 if await dashboard.sync_current_section() else 1

    raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        status = asyncio.run(_dispatch(parsed_args))
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)

    if status:
        sys.exit(status)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()

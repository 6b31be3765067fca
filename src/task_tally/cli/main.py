# src/task_tally/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then either:
- runs one sync cycle over the registered projects (`once`), or
- runs the recurring scheduler until SIGINT/SIGTERM (`run`).
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal

from ..cli.bootstrap import AppState, create_initial_state
from ..config import get_settings
from ..logging_setup import setup_logging
from ..tally.scheduler import run_sync_scheduler
from ..tally.sync import sync_all

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PROJECT_FAILED = 1
EXIT_NO_PROJECTS = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="task-tally",
        description="Count total and completed Asana tasks (with all subtasks) per project "
        "and write them to Google Sheets.",
    )
    parser.add_argument("command", choices=("once", "run"), help="one sync cycle, or sync on a schedule")
    parser.add_argument(
        "--project",
        action="append",
        dest="projects",
        metavar="GID",
        help="only sync this registered project (repeatable)",
    )
    parser.add_argument("--dry-run", action="store_true", help="print results instead of writing the sheet")
    parser.add_argument("--log-level", default=None, help="console log level (default: TALLY_LOG_LEVEL)")
    return parser


def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        close = getattr(state.source, "close", None)
        if callable(close):
            close()
    except Exception:
        logger.debug("Upstream client close failed.", exc_info=True)


async def _run_forever(state: AppState) -> None:
    settings = state.settings
    runner = asyncio.ensure_future(
        run_sync_scheduler(
            state.source,
            state.sink,
            state.projects,
            interval_seconds=settings.sync_interval_seconds,
            page_limit=settings.page_limit,
            completed_since=settings.completed_since,
        )
    )

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Some platforms do not support signal handlers on the loop.
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(sig, runner.cancel)

    with contextlib.suppress(asyncio.CancelledError):
        await runner


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    level_name = str(args.log_level or settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    log_file = setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s (%s), full log in %s", settings.app_name, args.command, log_file)

    state = create_initial_state(settings=settings, dry_run=args.dry_run, only_projects=args.projects)
    if not state.projects:
        logger.error("No projects to sync. Register them in TALLY_PROJECTS (gid=Sheet!row; ...).")
        _shutdown(state)
        return EXIT_NO_PROJECTS

    try:
        if args.command == "once":
            results = sync_all(
                state.source,
                state.sink,
                state.projects,
                page_limit=settings.page_limit,
                completed_since=settings.completed_since,
            )
            if len(results) < len(state.projects):
                return EXIT_PROJECT_FAILED
            return EXIT_OK

        logger.info(
            "Scheduler started: %d projects every %.0fs. Press Ctrl+C to stop.",
            len(state.projects),
            settings.sync_interval_seconds,
        )
        asyncio.run(_run_forever(state))
        return EXIT_OK
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    raise SystemExit(main())

# src/task_tally/tally/scheduler.py

from __future__ import annotations

"""
Sync scheduler.

A small loop that, every interval:
- runs one sync cycle over all registered projects (sequentially),
- logs a summary,
- sleeps until the next trigger.

Where results are written belongs to the sink, not the scheduler.
"""

import asyncio
import logging
import time
from collections.abc import Sequence

from ..asana.pagination import DEFAULT_PAGE_LIMIT
from ..config import DEFAULT_COMPLETED_SINCE
from ..core.models import ProjectConfig
from ..core.ports import ResultSink, TaskSource
from .sync import sync_all

logger = logging.getLogger(__name__)


async def run_sync_scheduler(
        source: TaskSource,
        sink: ResultSink,
        projects: Sequence[ProjectConfig],
        *,
        interval_seconds: float = 3600.0,
        page_limit: int = DEFAULT_PAGE_LIMIT,
        completed_since: str = DEFAULT_COMPLETED_SINCE,
) -> None:
    """
    Run sync_all forever with a fixed pause between cycles.

    The blocking cycle runs in a worker thread so the loop stays cancellable;
    cycles never overlap. To stop the scheduler, cancel the coroutine/task.
    """
    sleep_s = max(0.5, float(interval_seconds))
    cycle = 0

    while True:
        cycle += 1
        t0 = time.monotonic()

        try:
            results = await asyncio.to_thread(
                sync_all,
                source,
                sink,
                projects,
                page_limit=page_limit,
                completed_since=completed_since,
            )
            logger.info(
                "Sync cycle %d: %d/%d projects in %.1fs",
                cycle,
                len(results),
                len(projects),
                time.monotonic() - t0,
            )
        except Exception:
            logger.exception("Sync cycle %d failed", cycle)

        await asyncio.sleep(sleep_s)

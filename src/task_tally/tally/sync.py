# src/task_tally/tally/sync.py

from __future__ import annotations

"""
Sync orchestration.

One project sync:
- list the project's top-level tasks (completed and incomplete),
- expand every top-level task into its full subtask tree,
- count the combined collection,
- hand (timestamp, total, completed) to the result sink.

Projects are data (ProjectConfig); sync_all drives the same function over the
registry, one project at a time, isolating failures per project.
"""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from ..asana.pagination import DEFAULT_PAGE_LIMIT, fetch_all_tasks, project_tasks_request
from ..config import DEFAULT_COMPLETED_SINCE
from ..core.models import ProjectConfig, SyncResult, TaskRecord
from ..core.ports import ResultSink, TaskSource
from .aggregate import count_tasks
from .tree import TaskTreeCycleError, walk_subtasks

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _now_local() -> datetime:
    return datetime.now().astimezone()


def collect_project_tasks(
    source: TaskSource,
    project_gid: str,
    *,
    page_limit: int = DEFAULT_PAGE_LIMIT,
    completed_since: str = DEFAULT_COMPLETED_SINCE,
) -> list[TaskRecord]:
    """
    Top-level tasks followed by the descendants of each, in top-level order.

    When a top-level task's subtree contains a cycle, the walk of that subtree
    stops there; descendants found before the cycle are kept.
    """
    top_level = fetch_all_tasks(
        source,
        project_tasks_request(project_gid, completed_since=completed_since, limit=page_limit),
    )

    descendants: list[TaskRecord] = []
    for task in top_level:
        if not task.gid:
            logger.warning("Top-level task in project %s has no gid; its subtasks are skipped", project_gid)
            continue
        try:
            descendants.extend(walk_subtasks(source, task.gid, page_limit=page_limit))
        except TaskTreeCycleError as e:
            logger.error(
                "Subtask walk of %s in project %s stopped at a cycle; keeping %d subtasks found before it",
                task.gid,
                project_gid,
                len(e.collected),
            )
            descendants.extend(e.collected)

    logger.debug(
        "Project %s: %d top-level tasks, %d subtasks", project_gid, len(top_level), len(descendants)
    )
    return top_level + descendants


def sync_project(
    source: TaskSource,
    sink: ResultSink,
    project: ProjectConfig,
    *,
    page_limit: int = DEFAULT_PAGE_LIMIT,
    completed_since: str = DEFAULT_COMPLETED_SINCE,
    clock: Clock = _now_local,
) -> SyncResult:
    """Run one full sync cycle for `project` and publish the result."""
    started_at = clock()

    tasks = collect_project_tasks(
        source,
        project.project_gid,
        page_limit=page_limit,
        completed_since=completed_since,
    )
    counts = count_tasks(tasks)

    result = SyncResult(
        project=project,
        timestamp=started_at,
        total=counts.total,
        completed=counts.completed,
    )
    sink.write_result(result, project.destination)

    logger.info(
        "Synced project=%s total=%d completed=%d -> %s!%s",
        project.label,
        result.total,
        result.completed,
        project.destination.sheet_name,
        project.destination.row,
    )
    return result


def sync_all(
    source: TaskSource,
    sink: ResultSink,
    projects: Iterable[ProjectConfig],
    *,
    page_limit: int = DEFAULT_PAGE_LIMIT,
    completed_since: str = DEFAULT_COMPLETED_SINCE,
    clock: Clock = _now_local,
) -> list[SyncResult]:
    """
    Sync every project in order; a failing project is logged and skipped.

    Returns results for the projects that completed.
    """
    results: list[SyncResult] = []
    for project in projects:
        try:
            results.append(
                sync_project(
                    source,
                    sink,
                    project,
                    page_limit=page_limit,
                    completed_since=completed_since,
                    clock=clock,
                )
            )
        except Exception:
            logger.exception("Sync failed for project=%s", project.label)
    return results

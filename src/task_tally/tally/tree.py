# src/task_tally/tally/tree.py

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from ..asana.pagination import DEFAULT_PAGE_LIMIT, fetch_all_tasks, subtasks_request
from ..core.models import TaskRecord
from ..core.ports import TaskSource

logger = logging.getLogger(__name__)


class TaskTreeCycleError(RuntimeError):
    """
    A task showed up among its own ancestors while walking subtasks.

    `collected` holds the descendants found before the cycle, in walk order.
    """

    def __init__(
        self,
        task_gid: str,
        path: tuple[str, ...],
        collected: list[TaskRecord] | None = None,
    ) -> None:
        super().__init__(f"Subtask cycle at task {task_gid}: {' -> '.join(path + (task_gid,))}")
        self.task_gid = task_gid
        self.path = path
        self.collected = list(collected or [])


@dataclass(slots=True)
class _Frame:
    gid: str
    children: Iterator[TaskRecord]


def walk_subtasks(
    source: TaskSource,
    task_gid: str | None,
    *,
    page_limit: int = DEFAULT_PAGE_LIMIT,
) -> list[TaskRecord]:
    """
    Return every descendant of `task_gid`, depth-first pre-order.

    Siblings keep API response order and each subtask precedes its own
    descendants. The task itself is not included.

    A subtask without a gid is returned but not expanded. Only the current
    ancestor path is checked for cycles, so a task reachable through two
    different parents is expanded (and returned) once per parent.

    The walk uses an explicit stack; tree depth is not limited by the
    interpreter's recursion limit.
    """
    if not task_gid:
        return []

    def children_of(gid: str) -> Iterator[TaskRecord]:
        return iter(fetch_all_tasks(source, subtasks_request(gid, limit=page_limit)))

    out: list[TaskRecord] = []
    stack: list[_Frame] = [_Frame(task_gid, children_of(task_gid))]
    on_path: set[str] = {task_gid}

    while stack:
        frame = stack[-1]
        sub = next(frame.children, None)
        if sub is None:
            stack.pop()
            on_path.discard(frame.gid)
            continue

        if not sub.gid:
            out.append(sub)
            logger.warning("Subtask of %s has no gid; its subtasks are skipped", frame.gid)
            continue

        if sub.gid in on_path:
            path = tuple(f.gid for f in stack)
            logger.error("Subtask cycle detected: %s", " -> ".join(path + (sub.gid,)))
            raise TaskTreeCycleError(sub.gid, path, out)

        out.append(sub)
        stack.append(_Frame(sub.gid, children_of(sub.gid)))
        on_path.add(sub.gid)

    return out

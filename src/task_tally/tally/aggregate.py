# src/task_tally/tally/aggregate.py

from __future__ import annotations

from collections.abc import Iterable

from ..core.models import TaskCounts, TaskRecord


def count_tasks(tasks: Iterable[TaskRecord] | None) -> TaskCounts:
    """Total and completed counts over a task collection (None counts as empty)."""
    total = 0
    completed = 0
    for task in tasks or ():
        total += 1
        if task.completed:
            completed += 1
    return TaskCounts(total=total, completed=completed)

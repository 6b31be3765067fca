# src/task_tally/asana/pagination.py

from __future__ import annotations

"""
Cursor pagination over Asana task collections.

A listing call returns {"data": [...], "next_page": {"uri": "..."} | null}.
fetch_all_tasks follows next_page.uri until it is absent and concatenates
every page in response order.

Failure policy is fail-soft: the first page that cannot be fetched or parsed
ends pagination for that call, and whatever earlier pages produced is returned.
Nothing is retried and nothing is raised to the caller. A next_page.uri that
was already followed within the same call also ends pagination.
"""

import logging
from typing import Any

from ..core.models import TaskRecord
from ..core.ports import TaskSource
from .client import UpstreamError

logger = logging.getLogger(__name__)

TASK_OPT_FIELDS = "gid,completed,completed_at"
DEFAULT_PAGE_LIMIT = 100

TaskRequest = tuple[str, dict[str, Any]]


def project_tasks_request(
    project_gid: str,
    *,
    completed_since: str,
    limit: int = DEFAULT_PAGE_LIMIT,
) -> TaskRequest:
    """Top-level tasks of a project, completed or not."""
    return (
        "tasks",
        {
            "project": project_gid,
            "completed_since": completed_since,
            "opt_fields": TASK_OPT_FIELDS,
            "limit": limit,
        },
    )


def subtasks_request(task_gid: str, *, limit: int = DEFAULT_PAGE_LIMIT) -> TaskRequest:
    """Direct subtasks of one task."""
    return (
        f"tasks/{task_gid}/subtasks",
        {
            "opt_fields": TASK_OPT_FIELDS,
            "limit": limit,
        },
    )


def _parse_page(body: Any) -> tuple[list[TaskRecord], str | None]:
    if not isinstance(body, dict):
        raise TypeError(f"page body must be an object, got {type(body).__name__}")

    data = body.get("data")
    if not isinstance(data, list):
        raise ValueError("page body has no 'data' list")

    records = [TaskRecord.from_api(raw) for raw in data]

    next_page = body.get("next_page")
    next_uri = next_page.get("uri") if isinstance(next_page, dict) else None
    return records, (str(next_uri) if next_uri else None)


def fetch_all_tasks(source: TaskSource, request: TaskRequest) -> list[TaskRecord]:
    """
    Fetch every page of a task collection.

    The starting request carries opt_fields and limit; follow-up requests use
    next_page.uri verbatim (it already encodes the query and the cursor).
    """
    url, params = request
    next_params: dict[str, Any] | None = dict(params)
    tasks: list[TaskRecord] = []
    seen_uris: set[str] = set()
    page_no = 0

    while True:
        page_no += 1
        try:
            body = source.get_json(url, next_params)
            records, next_uri = _parse_page(body)
        except (UpstreamError, ValueError, TypeError) as e:
            logger.warning(
                "Pagination stopped at page %d of %s (%s); keeping %d tasks from earlier pages",
                page_no,
                url,
                e,
                len(tasks),
            )
            return tasks

        tasks.extend(records)
        logger.debug("Page %d of %s: %d tasks (total %d)", page_no, url, len(records), len(tasks))

        if not next_uri:
            return tasks

        if next_uri in seen_uris:
            logger.warning(
                "Pagination stopped at page %d of %s: next_page.uri repeats; keeping %d tasks",
                page_no,
                url,
                len(tasks),
            )
            return tasks

        seen_uris.add(next_uri)
        url, next_params = next_uri, None

# src/task_tally/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the concrete upstream client and result sink into AppState,
- narrows the project registry to the selection given on the command line.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..asana.client import AsanaClient
from ..config import Settings, get_settings
from ..core.models import ProjectConfig
from ..core.ports import ResultSink, TaskSource
from ..sinks.console import ConsoleSink
from ..sinks.sheets import GspreadSheetSink

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    settings: Settings
    source: TaskSource
    sink: ResultSink
    projects: list[ProjectConfig] = field(default_factory=list)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def select_projects(projects: Iterable[ProjectConfig], wanted: Iterable[str] | None) -> list[ProjectConfig]:
    """Keep registry order; unknown gids in `wanted` are logged."""
    projects = list(projects)
    wanted_set = {w.strip() for w in (wanted or []) if w and w.strip()}
    if not wanted_set:
        return projects

    known = {p.project_gid for p in projects}
    for gid in sorted(wanted_set - known):
        logger.warning("Project %s is not registered; ignoring", gid)
    return [p for p in projects if p.project_gid in wanted_set]


def create_initial_state(
    *,
    settings=None,
    dry_run: bool = False,
    only_projects: Iterable[str] | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    source = AsanaClient(
        settings.asana_access_token,
        base_url=settings.asana_base_url,
        timeout_seconds=settings.http_timeout_seconds,
    )

    sink: ResultSink
    if dry_run:
        sink = ConsoleSink()
    else:
        sink = GspreadSheetSink(
            settings.spreadsheet_key,
            credentials_path=settings.google_credentials_path,
        )

    return AppState(
        settings=settings,
        source=source,
        sink=sink,
        projects=select_projects(settings.projects, only_projects),
    )

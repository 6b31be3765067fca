# src/task_tally/core/models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(slots=True, frozen=True)
class TaskRecord:
    """
    One task as returned by a listing call.

    Only the fields requested via opt_fields are kept. `gid` may be None when the
    upstream omits it; such a record is still counted but never expanded.
    """

    gid: str | None
    completed: bool
    completed_at: str | None = None

    @classmethod
    def from_api(cls, raw: Any) -> TaskRecord:
        if not isinstance(raw, dict):
            raise TypeError(f"task record must be an object, got {type(raw).__name__}")

        gid_any = raw.get("gid", raw.get("id"))
        gid = str(gid_any).strip() if gid_any is not None else ""

        completed_at = raw.get("completed_at")
        return cls(
            gid=gid or None,
            completed=bool(raw.get("completed", False)),
            completed_at=str(completed_at) if completed_at else None,
        )


@dataclass(slots=True, frozen=True)
class TaskCounts:
    total: int
    completed: int


@dataclass(slots=True, frozen=True)
class Destination:
    """Where a project's numbers land: a worksheet name and a 1-based row."""

    sheet_name: str
    row: int

    def cell(self, column: str) -> str:
        return f"{column}{self.row}"


@dataclass(slots=True, frozen=True)
class ProjectConfig:
    project_gid: str
    destination: Destination
    name: str | None = None

    @property
    def label(self) -> str:
        return self.name or self.project_gid


@dataclass(slots=True, frozen=True)
class SyncResult:
    """
    The triple handed to a sink after one project sync.

    `timestamp` is the moment the run started (timezone-aware, local time).
    """

    project: ProjectConfig
    timestamp: datetime
    total: int
    completed: int

# src/task_tally/sinks/console.py

from __future__ import annotations

import sys
from typing import TextIO

from ..core.models import Destination, SyncResult
from .sheets import TIMESTAMP_FORMAT


class ConsoleSink:
    """Prints results instead of writing them (used for --dry-run)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def write_result(self, result: SyncResult, destination: Destination) -> None:
        stream = self._stream or sys.stdout
        ts = result.timestamp.strftime(TIMESTAMP_FORMAT)
        print(
            f"[{ts}] {destination.sheet_name}!A{destination.row} "
            f"project={result.project.label} total={result.total} completed={result.completed}",
            file=stream,
            flush=True,
        )

# src/task_tally/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the tally core.

The core depends on Protocols instead of concrete implementations.
This keeps the upstream API and the destination swappable and makes testing easier.
"""

from typing import Any, Protocol

from .models import Destination, SyncResult


class TaskSource(Protocol):
    """
    Upstream-side port: one authenticated JSON GET.

    `url` is either a path relative to the API base or an absolute URL
    (as handed out in `next_page.uri`). Implementations raise UpstreamError
    on transport, status or decoding failures.
    """

    def get_json(self, url: str, params: dict[str, Any] | None = None) -> Any: ...


class ResultSink(Protocol):
    """
    Destination-side port: how a finished sync is published.

    The sink decides how to render the timestamp and numbers; the core only
    guarantees one (timestamp, total, completed) triple per project per run.
    """

    def write_result(self, result: SyncResult, destination: Destination) -> None: ...

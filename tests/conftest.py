# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

from task_tally.core.models import Destination, ProjectConfig

from .fakes import FakeSink, FakeTaskSource

FIXED_NOW = datetime(2024, 5, 17, 9, 30, 0, tzinfo=timezone.utc)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="task-tally-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        asana_access_token="test-token",
        asana_base_url="https://app.asana.test/api/1.0",
        page_limit=100,
        completed_since="1970-01-01T00:00:00.000Z",
        http_timeout_seconds=5.0,
        google_credentials_path=tmp_path / "credentials.json",
        spreadsheet_key="sheet-key",
        sync_interval_seconds=0.01,
        projects=[
            ProjectConfig(project_gid="p1", destination=Destination("Progress", 4), name="Alpha"),
            ProjectConfig(project_gid="p2", destination=Destination("Progress", 5)),
        ],
    )


@pytest.fixture()
def source() -> FakeTaskSource:
    return FakeTaskSource()


@pytest.fixture()
def sink() -> FakeSink:
    return FakeSink()


@pytest.fixture()
def project() -> ProjectConfig:
    return ProjectConfig(project_gid="p1", destination=Destination("Progress", 4), name="Alpha")


@pytest.fixture()
def clock():
    return lambda: FIXED_NOW

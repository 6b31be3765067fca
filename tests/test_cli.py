# tests/test_cli.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from task_tally.asana.client import AsanaClient
from task_tally.cli import main as cli_main
from task_tally.cli.bootstrap import AppState, create_initial_state, select_projects
from task_tally.sinks.console import ConsoleSink
from task_tally.sinks.sheets import GspreadSheetSink

from .fakes import FakeSink, FakeTaskSource, page, task


def test_select_projects_keeps_registry_order(settings: SimpleNamespace) -> None:
    assert select_projects(settings.projects, None) == settings.projects
    assert [p.project_gid for p in select_projects(settings.projects, ["p2", "p1", "nope"])] == ["p1", "p2"]


def test_create_initial_state_wires_components(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings, only_projects=["p2"])
    try:
        assert isinstance(state.source, AsanaClient)
        assert isinstance(state.sink, GspreadSheetSink)
        assert [p.project_gid for p in state.projects] == ["p2"]
        assert settings.data_dir.is_dir()
    finally:
        state.source.close()


def test_dry_run_uses_console_sink(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings, dry_run=True)
    try:
        assert isinstance(state.sink, ConsoleSink)
    finally:
        state.source.close()


@pytest.fixture()
def fake_state(settings: SimpleNamespace, monkeypatch: pytest.MonkeyPatch) -> AppState:
    source = FakeTaskSource()
    state = AppState(settings=settings, source=source, sink=FakeSink(), projects=list(settings.projects))
    monkeypatch.setattr(cli_main, "get_settings", lambda: settings)
    monkeypatch.setattr(cli_main, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(cli_main, "create_initial_state", lambda **kwargs: state)
    return state


def test_once_writes_every_project(fake_state: AppState) -> None:
    fake_state.source.set_project("p1", page([task("a", completed=True)]))
    fake_state.source.set_project("p2", page([task("b"), task("c")]))

    assert cli_main.main(["once"]) == cli_main.EXIT_OK
    assert [(w.result.total, w.result.completed) for w in fake_state.sink.written] == [(1, 1), (2, 0)]


def test_once_reports_project_failure(fake_state: AppState) -> None:
    fake_state.sink.fail_for.add("p2")

    assert cli_main.main(["once"]) == cli_main.EXIT_PROJECT_FAILED
    assert len(fake_state.sink.written) == 1


def test_no_projects_exit_code(fake_state: AppState) -> None:
    fake_state.projects.clear()

    assert cli_main.main(["once", "--dry-run"]) == cli_main.EXIT_NO_PROJECTS

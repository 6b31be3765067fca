# tests/test_sync.py

from __future__ import annotations

from task_tally.core.models import Destination, ProjectConfig
from task_tally.tally.sync import collect_project_tasks, sync_all, sync_project

from .conftest import FIXED_NOW
from .fakes import FakeSink, FakeTaskSource, page, task, upstream_failure


def _two_task_project(source: FakeTaskSource, project_gid: str = "p1") -> None:
    # task1: completed, no subtasks; task2: incomplete with one completed subtask
    source.set_project(project_gid, page([task(f"{project_gid}-t1", completed=True), task(f"{project_gid}-t2")]))
    source.set_subtasks(f"{project_gid}-t2", page([task(f"{project_gid}-s1", completed=True)]))


def test_end_to_end_counts(source: FakeTaskSource, sink: FakeSink, project: ProjectConfig, clock) -> None:
    _two_task_project(source)

    result = sync_project(source, sink, project, clock=clock)

    assert (result.timestamp, result.total, result.completed) == (FIXED_NOW, 3, 2)
    assert len(sink.written) == 1
    assert sink.written[0].result == result
    assert sink.written[0].destination == Destination("Progress", 4)


def test_top_level_listing_uses_since_filter(source: FakeTaskSource, sink: FakeSink, project: ProjectConfig) -> None:
    _two_task_project(source)

    sync_project(source, sink, project, completed_since="1970-01-01T00:00:00.000Z", page_limit=50)

    url, params = source.calls[0]
    assert url == "tasks"
    assert params == {
        "project": "p1",
        "completed_since": "1970-01-01T00:00:00.000Z",
        "opt_fields": "gid,completed,completed_at",
        "limit": 50,
    }


def test_collection_is_top_level_then_descendants(source: FakeTaskSource) -> None:
    source.set_project("p1", page([task("t1"), task("t2")]))
    source.set_subtasks("t1", page([task("a")]))
    source.set_subtasks("a", page([task("a1")]))
    source.set_subtasks("t2", page([task("b")]))

    tasks = collect_project_tasks(source, "p1")

    assert [t.gid for t in tasks] == ["t1", "t2", "a", "a1", "b"]


def test_paged_top_level_listing(source: FakeTaskSource, sink: FakeSink, project: ProjectConfig) -> None:
    source.set_project(
        "p1",
        page([task(f"a{i}", completed=i % 2 == 0) for i in range(100)]),
        page([task(f"b{i}") for i in range(5)]),
    )

    result = sync_project(source, sink, project)

    assert result.total == 105
    assert result.completed == 50
    assert source.calls_to("/subtasks") == 105


def test_top_level_task_without_gid_is_counted_not_expanded(source: FakeTaskSource) -> None:
    source.set_project("p1", page([task(None, completed=True), task("t2")]))

    tasks = collect_project_tasks(source, "p1")

    assert len(tasks) == 2
    assert source.calls_to("/subtasks") == 1


def test_failed_listing_still_writes_zero_counts(source: FakeTaskSource, sink: FakeSink, project: ProjectConfig) -> None:
    source.set_project("p1", upstream_failure(429))

    result = sync_project(source, sink, project)

    assert (result.total, result.completed) == (0, 0)
    assert len(sink.written) == 1


def test_cycle_keeps_subtasks_found_before_it(source: FakeTaskSource, sink: FakeSink, project: ProjectConfig) -> None:
    source.set_project("p1", page([task("t1"), task("t2", completed=True)]))
    source.set_subtasks("t1", page([task("done", completed=True), task("loop")]))
    source.set_subtasks("loop", page([task("t1")]))
    source.set_subtasks("t2", page([task("ok", completed=True)]))

    tasks = collect_project_tasks(source, "p1")
    result = sync_project(source, sink, project)

    assert [t.gid for t in tasks] == ["t1", "t2", "done", "loop", "ok"]
    assert (result.total, result.completed) == (5, 3)
    assert len(sink.written) == 1


def test_very_deep_subtask_chain_still_writes(source: FakeTaskSource, sink: FakeSink, project: ProjectConfig) -> None:
    source.set_project("p1", page([task("t0")]))
    for i in range(1200):
        source.set_subtasks(f"t{i}", page([task(f"t{i + 1}", completed=True)]))

    result = sync_project(source, sink, project)

    assert (result.total, result.completed) == (1201, 1200)
    assert len(sink.written) == 1


def test_repeated_runs_are_stable(source: FakeTaskSource, sink: FakeSink, project: ProjectConfig) -> None:
    _two_task_project(source)

    first = sync_project(source, sink, project)
    second = sync_project(source, sink, project)

    assert (first.total, first.completed) == (second.total, second.completed) == (3, 2)
    assert len(sink.written) == 2


def test_sync_all_isolates_project_failures(source: FakeTaskSource, settings, clock) -> None:
    _two_task_project(source, "p1")
    _two_task_project(source, "p2")
    p1, p2 = settings.projects
    p3 = ProjectConfig(project_gid="p3", destination=Destination("Other", 2))
    source.set_project("p3", page([task("x", completed=True)]))
    sink = FakeSink(fail_for={"p2"})

    results = sync_all(source, sink, [p1, p2, p3], clock=clock)

    assert [r.project.project_gid for r in results] == ["p1", "p3"]
    assert [w.destination for w in sink.written] == [Destination("Progress", 4), Destination("Other", 2)]
    assert (results[1].total, results[1].completed) == (1, 1)


def test_projects_do_not_share_state(source: FakeTaskSource, sink: FakeSink, settings) -> None:
    _two_task_project(source, "p1")
    source.set_project("p2", page([task("only")]))

    results = sync_all(source, sink, settings.projects)

    assert [(r.total, r.completed) for r in results] == [(3, 2), (1, 0)]

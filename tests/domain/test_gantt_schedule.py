from __future__ import annotations

from datetime import date

import pytest

from domain.diagrams.schedule import GanttDiagram, GanttSection, GanttTask
from domain.layout_details import GanttMetadata
from domain.services.gantt_schedule import (
    add_duration,
    add_months,
    assign_task_keys,
    parse_task_date,
    resolve_schedule,
)
from domain.services.transforms.gantt import GanttTransform
from tests.helpers.diagram_fixtures import load_diagram_fixture


def _diagram(*tasks: GanttTask, date_format: str = "YYYY-MM-DD") -> GanttDiagram:
    return GanttDiagram(date_format=date_format, sections=[GanttSection(name="Work", tasks=list(tasks))])


def test_explicit_dates_resolve_without_dependency_rounds() -> None:
    diagram = _diagram(
        GanttTask(id="a", start_date="2024-03-01", end_date="2024-03-05"),
        GanttTask(id="b", start_date="2024-03-02", duration="2w"),
        GanttTask(id="c", start_date="2024-03-10", end_date="2024-03-08"),
    )
    resolution = resolve_schedule(diagram)

    assert resolution.rounds_used == 0
    assert resolution.unresolved == ()
    for schedule in resolution.schedules.values():
        assert schedule.end >= schedule.start
    assert resolution.get("b").end == date(2024, 3, 16)
    assert resolution.get("c").end == date(2024, 3, 10)


def test_after_dependency_chain() -> None:
    diagram = _diagram(
        GanttTask(id="A", start_date="2024-01-01", duration="10d"),
        GanttTask(id="B", after_task="A", duration="5d"),
    )
    resolution = resolve_schedule(diagram)

    assert resolution.get("B").start == date(2024, 1, 11)
    assert resolution.get("B").end == date(2024, 1, 16)
    assert resolution.rounds_used >= 1


def test_chain_declared_in_reverse_order_needs_more_rounds() -> None:
    diagram = _diagram(
        GanttTask(id="C", after_task="B", duration="1d"),
        GanttTask(id="B", after_task="A", duration="1d"),
        GanttTask(id="A", start_date="2024-01-01", duration="1d"),
    )
    resolution = resolve_schedule(diagram)

    assert resolution.get("C").start == date(2024, 1, 3)
    assert resolution.rounds_used == 2


def test_round_cap_leaves_tail_unresolved() -> None:
    diagram = _diagram(
        GanttTask(id="C", after_task="B", duration="1d"),
        GanttTask(id="B", after_task="A", duration="1d"),
        GanttTask(id="A", start_date="2024-01-01", duration="1d"),
    )
    resolution = resolve_schedule(diagram, round_cap=1)

    assert "B" in resolution.schedules
    assert resolution.unresolved == ("C",)


def test_missing_and_cyclic_references_stay_unresolved() -> None:
    diagram = _diagram(
        GanttTask(id="x", after_task="y", duration="1d"),
        GanttTask(id="y", after_task="x", duration="1d"),
        GanttTask(id="z", after_task="nowhere", duration="1d"),
        GanttTask(id="ok", start_date="2024-05-01", duration="1d"),
    )
    resolution = resolve_schedule(diagram)

    assert set(resolution.unresolved) == {"x", "y", "z"}
    assert resolution.rounds_used == 1


def test_until_task_ends_when_referenced_task_starts() -> None:
    diagram = _diagram(
        GanttTask(id="prep", start_date="2024-02-01", until_task="launch"),
        GanttTask(id="launch", start_date="2024-02-10", duration="1d"),
    )
    resolution = resolve_schedule(diagram)

    assert resolution.get("prep").end == date(2024, 2, 10)


def test_date_helpers() -> None:
    assert parse_task_date("01/02/2024", "DD/MM/YYYY") == date(2024, 2, 1)
    assert parse_task_date("2024-02-01", "DD/MM/YYYY") == date(2024, 2, 1)
    assert parse_task_date("not a date", "YYYY-MM-DD") is None
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_duration(date(2024, 1, 1), "36h") == date(2024, 1, 3)
    assert add_duration(date(2024, 1, 1), "soon") is None


def test_gantt_layout_positions_resolved_tasks() -> None:
    model = load_diagram_fixture("gantt.json")
    result = GanttTransform().transform(model)

    assert isinstance(result.metadata, GanttMetadata)
    assert result.metadata.unresolved_task_ids == ()
    assert result.metadata.min_date == date(2023, 12, 31)
    assert result.metadata.max_date == date(2024, 1, 17)
    sections = result.nodes_with_role("section")
    assert [node.label for node in sections] == ["Build", "Ship"]
    task_a = result.node_by_id("A")
    task_b = result.node_by_id("B")
    assert task_a.right == pytest.approx(task_b.x)
    assert task_b.y > task_a.y
    assert result.node_by_id("C").role == "milestone"


def test_gantt_layout_reports_unresolved_tasks(caplog: pytest.LogCaptureFixture) -> None:
    diagram = _diagram(
        GanttTask(id="a", start_date="2024-01-01", duration="3d"),
        GanttTask(id="b", after_task="missing", duration="3d"),
    )
    with caplog.at_level("WARNING"):
        result = GanttTransform().transform(diagram)

    assert result.metadata.unresolved_task_ids == ("b",)
    assert result.node_by_id("b") is None
    assert "unresolved" in caplog.text


def test_generated_keys_never_shadow_explicit_ids() -> None:
    diagram = _diagram(
        GanttTask(description="auto", start_date="2024-01-01", duration="1d"),
        GanttTask(id="task_0_0", description="explicit", start_date="2024-03-01", duration="1d"),
    )
    assert assign_task_keys(diagram) == {(0, 0): "task_0_0_1", (0, 1): "task_0_0"}

    result = GanttTransform().transform(diagram)
    auto = result.node_by_id("task_0_0_1")
    explicit = result.node_by_id("task_0_0")

    assert auto.label == "auto"
    assert auto.detail.start == date(2024, 1, 1)
    assert explicit.detail.start == date(2024, 3, 1)
    assert len({node.id for node in result.nodes}) == len(result.nodes)


def test_axis_format_and_excludes_reach_metadata() -> None:
    diagram = GanttDiagram(
        axis_format="%b %d",
        excludes=["weekends", "2024-01-05"],
        sections=[GanttSection(name="Work", tasks=[GanttTask(id="a", start_date="2024-01-01", duration="3d")])],
    )
    metadata = GanttTransform().transform(diagram).metadata

    assert metadata.axis_format == "%b %d"
    assert metadata.excludes == ("weekends", "2024-01-05")
    assert GanttTransform().transform(GanttDiagram(excludes=["sunday"])).metadata.excludes == ("sunday",)

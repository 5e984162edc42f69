from __future__ import annotations

import pytest
from pydantic import ValidationError

from domain.diagram_model import MODEL_BY_KIND, empty_diagram, parse_diagram
from domain.diagrams.base import DiagramKind, arena_problems, duplicate_ids
from domain.diagrams.board import Block, BlockDiagram, PacketDiagram, PacketField
from domain.diagrams.chart import XyChartDiagram
from domain.diagrams.graph import ArchitectureDiagram, FlowchartDiagram, FlowchartNode, RequirementDiagram
from domain.diagrams.history import GitGraphDiagram
from domain.diagrams.message import ErrorDiagram, InfoDiagram
from domain.diagrams.tree import MindmapDiagram, MindmapNode
from domain.errors import InvalidDiagramError, UnsupportedDiagramKindError
from domain.services.transforms.base import DiagramTransform
from domain.services.transforms.mindmap import MindmapTransform
from domain.services.transforms.pie import PieTransform
from domain.services.transforms.registry import transform_for


@pytest.mark.parametrize("kind", list(DiagramKind))
def test_empty_model_lays_out_to_minimum_canvas(
    kind: DiagramKind,
    transform_table: dict[DiagramKind, DiagramTransform],
) -> None:
    result = transform_for(transform_table, kind).transform(empty_diagram(kind))

    assert result.kind == kind.value
    assert result.nodes == []
    assert result.edges == []
    assert result.width == 800
    assert result.height == 600


def test_every_kind_has_a_model_and_a_strategy(transform_table: dict[DiagramKind, DiagramTransform]) -> None:
    assert set(MODEL_BY_KIND) == set(DiagramKind)
    assert set(transform_table) == set(DiagramKind)
    for kind, transform in transform_table.items():
        assert transform.kind is kind


def test_unknown_kind_is_rejected(transform_table: dict[DiagramKind, DiagramTransform]) -> None:
    with pytest.raises(UnsupportedDiagramKindError) as exc_info:
        transform_for(transform_table, "venn")
    assert exc_info.value.kind == "venn"

    partial = {DiagramKind.PIE: transform_table[DiagramKind.PIE]}
    with pytest.raises(UnsupportedDiagramKindError):
        transform_for(partial, DiagramKind.GANTT)


def test_missing_or_mismatched_model_is_invalid() -> None:
    with pytest.raises(InvalidDiagramError, match="No mindmap diagram"):
        MindmapTransform().transform(None)
    with pytest.raises(InvalidDiagramError, match="Expected a pie diagram"):
        PieTransform().transform(MindmapDiagram())


def test_mindmap_needs_exactly_one_root() -> None:
    model = MindmapDiagram(nodes=[MindmapNode(id="a", content="A"), MindmapNode(id="b", content="B")])
    with pytest.raises(InvalidDiagramError) as exc_info:
        MindmapTransform().transform(model)
    assert exc_info.value.problems == ["Mindmap must have exactly one root, found 2"]


def test_arena_parents_must_precede_children() -> None:
    assert arena_problems([None, 0, 1], "Node") == []
    assert arena_problems([None, 2, 0], "Node") == [
        "Node #1 references parent #2; parents must precede children"
    ]
    assert arena_problems([None, 1], "Node") == ["Node #1 references parent #1; parents must precede children"]


def test_validation_problems_are_collected() -> None:
    assert duplicate_ids(["a", "b", "a", "c", "b"]) == ["a", "b"]

    flowchart = FlowchartDiagram(nodes=[FlowchartNode(id="x"), FlowchartNode(id="x")])
    assert flowchart.validation_problems() == ["Duplicate node id: x"]

    block = BlockDiagram(blocks=[Block(id="gap", block_type="space"), Block(id="inner", parent=0)])
    assert block.validation_problems() == ["Block inner is nested inside a space block"]

    packet = PacketDiagram(fields=[PacketField(bit_start=9, bit_end=3, label="bad")])
    assert len(packet.validation_problems()) == 1


def test_parse_diagram_dispatches_on_kind() -> None:
    model = parse_diagram({"kind": "flowchart", "direction": "lr", "nodes": [{"id": "a"}]})
    assert isinstance(model, FlowchartDiagram)
    assert model.direction == "LR"
    assert model.diagram_kind is DiagramKind.FLOWCHART

    with pytest.raises(ValidationError):
        parse_diagram({"kind": "venn"})
    with pytest.raises(ValidationError):
        parse_diagram({"kind": "flowchart", "direction": "sideways"})


@pytest.mark.parametrize(
    ("payload", "model_type"),
    [
        ({"kind": "architecture", "services": [{"id": "api"}]}, ArchitectureDiagram),
        ({"kind": "requirement", "requirements": [{"name": "r1", "risk": "Medium"}]}, RequirementDiagram),
        ({"kind": "git_graph", "commits": [{"message": "init"}]}, GitGraphDiagram),
        ({"kind": "xy_chart", "datasets": [{"id": "d", "values": [1, 2]}]}, XyChartDiagram),
        ({"kind": "error", "message": "Parse error on line 3"}, ErrorDiagram),
        ({"kind": "info", "show_info": True}, InfoDiagram),
    ],
)
def test_parse_diagram_covers_auxiliary_kinds(payload: dict[str, object], model_type: type) -> None:
    model = parse_diagram(payload)

    assert isinstance(model, model_type)
    assert model.diagram_kind.value == payload["kind"]
    assert model.validation_problems() == []


def test_requirement_enumerations_are_checked() -> None:
    with pytest.raises(ValidationError):
        parse_diagram({"kind": "requirement", "requirements": [{"name": "r1", "risk": "extreme"}]})
    with pytest.raises(ValidationError):
        parse_diagram({"kind": "git_graph", "orientation": "RL"})

from __future__ import annotations

import pytest

from adapters.layout.grid import GridFallbackLayoutEngine
from adapters.text.char_width import CharWidthTextMeasurer
from domain.diagrams.base import DiagramKind
from domain.diagrams.graph import (
    C4Boundary,
    C4Diagram,
    C4Element,
    C4Relationship,
    ClassDiagram,
    ClassEntity,
    ClassMember,
    ErAttribute,
    ErDiagram,
    ErEntity,
    FlowchartDiagram,
    JourneySection,
    JourneyTask,
    SequenceDiagram,
    SequenceMessage,
    SequenceNote,
    SequenceParticipant,
    StateNode,
    UserJourneyDiagram,
)
from domain.layout_details import GraphMetadata, SequenceMetadata
from domain.layout_graph import LAYER_SPACING_KEY, NODE_PLACEMENT_KEY, NODE_SPACING_KEY
from domain.models import Size
from domain.services.transforms.base import (
    ALGORITHM_FORCE,
    ALGORITHM_LAYERED,
    build_layout_options,
    map_direction,
    padded_size,
)
from domain.services.transforms.c4 import C4Transform, boundary_size
from domain.services.transforms.class_diagram import ClassDiagramTransform
from domain.services.transforms.er_diagram import ErDiagramTransform
from domain.services.transforms.flowchart import FlowchartTransform
from domain.services.transforms.sequence import SequenceTransform
from domain.services.transforms.state_diagram import StateDiagramTransform
from domain.services.transforms.user_journey import UserJourneyTransform
from tests.helpers.diagram_fixtures import load_diagram_fixture


@pytest.fixture
def engine() -> GridFallbackLayoutEngine:
    return GridFallbackLayoutEngine()


def test_flowchart_nodes_are_padded_by_shape(engine: GridFallbackLayoutEngine, measurer: CharWidthTextMeasurer) -> None:
    model = load_diagram_fixture("flowchart.json")
    result = FlowchartTransform(engine, text_measurer=measurer).transform(model)
    by_id = {node.id: node for node in result.nodes}

    assert (by_id["cart"].width, by_id["cart"].height) == (28 + 30, 14 + 20)
    assert (by_id["pay"].width, by_id["pay"].height) == (21 + 40, 14 + 40)
    assert (by_id["done"].width, by_id["done"].height) == (28 + 30, 14 + 30)
    assert by_id["pay"].detail.shape == "rhombus"


def test_flowchart_edges_skip_unknown_endpoints(engine: GridFallbackLayoutEngine) -> None:
    model = load_diagram_fixture("flowchart.json")
    result = FlowchartTransform(engine).transform(model)

    assert [edge.id for edge in result.edges] == ["cart_to_pay_0", "pay_to_done_1"]
    assert result.edges[1].label == "ok"
    assert isinstance(result.metadata, GraphMetadata)
    assert result.metadata.engine == "grid"
    assert result.metadata.direction == "RIGHT"
    assert result.metadata.layout_options["elk.direction"] == "RIGHT"
    assert result.title == "Checkout"


def test_empty_flowchart_keeps_minimum_canvas(engine: GridFallbackLayoutEngine) -> None:
    result = FlowchartTransform(engine).transform(FlowchartDiagram())
    assert result.nodes == []
    assert (result.width, result.height) == (800, 600)
    assert result.metadata.direction == "DOWN"


def test_sequence_participants_have_fixed_size(engine: GridFallbackLayoutEngine) -> None:
    model = SequenceDiagram(
        participants=[SequenceParticipant(id="alice"), SequenceParticipant(id="bob", actor_type="actor")],
        messages=[SequenceMessage(from_id="alice", to_id="bob", text="hi"), SequenceMessage(from_id="bob", to_id="alice")],
    )
    result = SequenceTransform(engine).transform(model)

    for node in result.nodes:
        assert (node.width, node.height) == (120, 40)
    assert [edge.id for edge in result.edges] == ["msg_0", "msg_1"]
    assert result.edges[0].label == "hi"
    assert result.edges[1].label is None


def test_sequence_lifeline_grows_with_messages_and_notes(engine: GridFallbackLayoutEngine) -> None:
    model = SequenceDiagram(
        participants=[SequenceParticipant(id="alice"), SequenceParticipant(id="bob")],
        messages=[SequenceMessage(from_id="alice", to_id="bob"), SequenceMessage(from_id="bob", to_id="alice")],
        notes=[SequenceNote(text="think", participant_ids=["alice"])],
    )
    metadata = SequenceTransform(engine).transform(model).metadata

    assert isinstance(metadata, SequenceMetadata)
    assert metadata.lifeline_length == 2 * 60 + 30
    assert metadata.note_count == 1
    assert metadata.engine == "grid"


def test_class_entity_size_counts_compartments(engine: GridFallbackLayoutEngine, measurer: CharWidthTextMeasurer) -> None:
    entity = ClassEntity(
        id="Account",
        attributes=[ClassMember(name="balance", member_type="int", visibility="+")],
        methods=[ClassMember(name="deposit", parameters="amount", is_method=True)],
    )
    transform = ClassDiagramTransform(engine, text_measurer=measurer)
    size = transform.entity_size(entity)

    assert size.width == 120 + 2 * 10
    assert size.height == 3 * 20 + 2 * 2 + 2 * 10
    result = transform.transform(ClassDiagram(entities=[entity]))
    assert result.nodes[0].detail.lines == ("+int balance", "deposit(amount)")


def test_state_sizes_by_type(engine: GridFallbackLayoutEngine, measurer: CharWidthTextMeasurer) -> None:
    transform = StateDiagramTransform(engine, text_measurer=measurer)

    assert transform.state_size(StateNode(id="s", state_type="start")) == Size(30, 30)
    assert transform.state_size(StateNode(id="f", state_type="fork")) == Size(100, 10)
    assert transform.state_size(StateNode(id="check", state_type="choice")) == Size(75, 75)
    assert transform.state_size(StateNode(id="Idle")) == Size(100, 50)


def test_er_entity_width_covers_attributes(engine: GridFallbackLayoutEngine, measurer: CharWidthTextMeasurer) -> None:
    entity = ErEntity(id="Customer", attributes=[ErAttribute(name="id", attribute_type="string", key_type="PK")])
    transform = ErDiagramTransform(engine, text_measurer=measurer)

    assert transform.entity_size(entity) == Size(150 + 20, 2 * 20 + 20)
    result = transform.transform(ErDiagram(entities=[entity]))
    assert result.nodes[0].detail.lines == ("PK id string",)
    assert result.metadata.direction == "RIGHT"


def test_c4_boundary_holds_its_elements(engine: GridFallbackLayoutEngine) -> None:
    model = C4Diagram(
        boundaries=[C4Boundary(id="bank", label="Bank")],
        elements=[
            C4Element(id="customer", element_type="Person", boundary_id="bank"),
            C4Element(id="core", element_type="System", boundary_id="bank"),
            C4Element(id="mail", element_type="System_Ext"),
        ],
        relationships=[C4Relationship(from_id="core", to_id="mail", label="Sends", technology="SMTP")],
    )
    result = C4Transform(engine).transform(model)
    bank = result.node_by_id("bank")

    assert bank.role == "boundary"
    assert (bank.width, bank.height) == (580, 410)
    for child in bank.children:
        assert bank.x < child.x
        assert child.right <= bank.right
        assert bank.y + 30 < child.y
        assert child.bottom <= bank.bottom
    assert result.node_by_id("mail").detail.classes == ("external",)
    assert result.edges[0].label == "Sends [SMTP]"
    assert result.edges[0].id == "rel_0"


def test_c4_boundary_size_has_a_floor() -> None:
    assert boundary_size([]) == Size(300, 200)


def test_user_journey_tasks_chain_in_order(engine: GridFallbackLayoutEngine) -> None:
    model = UserJourneyDiagram(
        sections=[
            JourneySection(name="Morning", tasks=[JourneyTask(name="Wake", score=2), JourneyTask(name="Coffee", score=5)]),
            JourneySection(name="Work", tasks=[JourneyTask(name="Commute", actors=["me", "cat"])]),
        ]
    )
    result = UserJourneyTransform(engine).transform(model)

    assert [node.id for node in result.nodes] == ["task_0", "task_1", "task_2"]
    assert [(edge.source_id, edge.target_id) for edge in result.edges] == [("task_0", "task_1"), ("task_1", "task_2")]
    assert result.node_by_id("task_2").detail.section == "Work"
    assert result.node_by_id("task_2").detail.actors == ("me", "cat")
    assert result.node_by_id("task_0").height == 80


@pytest.mark.parametrize(
    ("direction", "expected"),
    [("TD", "DOWN"), ("tb", "DOWN"), ("BT", "UP"), ("lr", "RIGHT"), ("RL", "LEFT"), (None, "DOWN"), ("XX", "DOWN")],
)
def test_map_direction(direction: str | None, expected: str) -> None:
    assert map_direction(direction) == expected


def test_layout_options_by_algorithm() -> None:
    layered = build_layout_options(ALGORITHM_LAYERED, node_spacing=80.0).to_dict()
    assert layered[NODE_SPACING_KEY] == "80"
    assert layered[LAYER_SPACING_KEY] == "50"
    assert layered[NODE_PLACEMENT_KEY] == "SIMPLE"

    force = build_layout_options(ALGORITHM_FORCE).to_dict()
    assert force[NODE_SPACING_KEY] == "75"
    assert LAYER_SPACING_KEY not in force
    assert NODE_PLACEMENT_KEY not in force

    radial = build_layout_options("radial", node_spacing=12.5).to_dict()
    assert radial == {"algorithm": "radial", "elk.direction": "DOWN", NODE_SPACING_KEY: "12.5"}


def test_padded_size_falls_back_to_rect_padding() -> None:
    assert padded_size(Size(10, 10), "unknown") == Size(40, 30)
    assert padded_size(Size(10, 10), "hexagon") == Size(50, 50)


def test_graph_transforms_declare_their_kind(engine: GridFallbackLayoutEngine) -> None:
    assert FlowchartTransform(engine).kind is DiagramKind.FLOWCHART
    assert C4Transform(engine).kind is DiagramKind.C4

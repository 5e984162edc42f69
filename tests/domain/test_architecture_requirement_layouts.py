from __future__ import annotations

import pytest

from adapters.layout.grid import GridFallbackLayoutEngine
from adapters.text.char_width import CharWidthTextMeasurer
from domain.diagrams.graph import (
    ArchitectureDiagram,
    ArchitectureEdge,
    ArchitectureGroup,
    ArchitectureService,
    Requirement,
    RequirementDiagram,
    RequirementElement,
    RequirementRelationship,
)
from domain.errors import InvalidDiagramError
from domain.layout_details import ArchitectureEdgeDetail, GraphMetadata, RequirementMetadata
from domain.models import Point
from domain.services.transforms.architecture import ArchitectureTransform
from domain.services.transforms.requirement import RequirementTransform, build_dependency_levels


@pytest.fixture
def architecture(measurer: CharWidthTextMeasurer) -> ArchitectureTransform:
    return ArchitectureTransform(GridFallbackLayoutEngine(), text_measurer=measurer)


@pytest.fixture
def cloud() -> ArchitectureDiagram:
    return ArchitectureDiagram(
        groups=[ArchitectureGroup(id="cloud", label="Cloud"), ArchitectureGroup(id="idle")],
        services=[
            ArchitectureService(id="api", group_id="cloud"),
            ArchitectureService(id="db", label="Database", group_id="cloud"),
            ArchitectureService(id="cdn"),
        ],
        edges=[
            ArchitectureEdge(from_id="api", to_id="db"),
            ArchitectureEdge(from_id="cdn", to_id="api", from_side="B", to_side="T", label="static"),
        ],
    )


def test_services_sit_inside_their_group(architecture: ArchitectureTransform, cloud: ArchitectureDiagram) -> None:
    result = architecture.transform(cloud)
    group = result.node_by_id("cloud")

    assert [node.id for node in result.nodes] == ["cloud", "cdn"]
    assert group is not None and group.role == "group"
    assert [child.id for child in group.children] == ["api", "db"]
    for child in group.children:
        assert child.role == "service"
        assert group.x <= child.x and child.right <= group.right
        assert group.y <= child.y and child.bottom <= group.bottom
    assert result.node_by_id("idle") is None


def test_edges_leave_and_enter_through_named_sides(
    architecture: ArchitectureTransform,
    cloud: ArchitectureDiagram,
) -> None:
    result = architecture.transform(cloud)
    api, db, cdn = (result.node_by_id(node_id) for node_id in ("api", "db", "cdn"))
    by_id = {edge.id: edge for edge in result.edges}

    assert by_id["edge_0"].start == Point(api.right, api.y + api.height / 2)
    assert by_id["edge_0"].end == Point(db.x, db.y + db.height / 2)
    assert by_id["edge_1"].start == Point(cdn.x + cdn.width / 2, cdn.bottom)
    assert by_id["edge_1"].end == Point(api.x + api.width / 2, api.y)
    assert by_id["edge_1"].label == "static"
    assert by_id["edge_1"].detail == ArchitectureEdgeDetail(from_side="B", to_side="T")


def test_service_width_follows_its_label(architecture: ArchitectureTransform) -> None:
    assert architecture.service_width(ArchitectureService(id="db")) == 120
    assert architecture.service_width(ArchitectureService(id="pay", label="Payments Gateway Service")) == 24 * 7 + 40


def test_architecture_asks_for_a_force_layout(architecture: ArchitectureTransform, cloud: ArchitectureDiagram) -> None:
    metadata = architecture.transform(cloud).metadata

    assert isinstance(metadata, GraphMetadata)
    assert metadata.layout_options["algorithm"] == "force"
    assert metadata.layout_options["elk.hierarchyHandling"] == "INCLUDE_CHILDREN"


def test_unknown_group_and_nesting_cycles_are_rejected(architecture: ArchitectureTransform) -> None:
    model = ArchitectureDiagram(services=[ArchitectureService(id="api", group_id="nowhere")])
    with pytest.raises(InvalidDiagramError) as exc_info:
        architecture.transform(model)
    assert exc_info.value.problems == ["Service api references unknown group nowhere"]

    looped = ArchitectureDiagram(
        groups=[ArchitectureGroup(id="a", parent_id="b"), ArchitectureGroup(id="b", parent_id="a")],
    )
    assert any("nesting cycle" in problem for problem in looped.validation_problems())


@pytest.fixture
def traceability() -> RequirementDiagram:
    return RequirementDiagram(
        requirements=[
            Requirement(name="core", id="REQ-1", text="x" * 60, risk="High", verify_method="Test"),
            Requirement(name="perf", requirement_type="performanceRequirement"),
            Requirement(name="orphan"),
        ],
        elements=[RequirementElement(name="sim", element_type="simulation", docref="docs/sim.md")],
        relationships=[
            RequirementRelationship(source="core", target="sim", relationship_type="satisfies"),
            RequirementRelationship(source="perf", target="core", relationship_type="derives"),
            RequirementRelationship(source="orphan", target="ghost"),
        ],
    )


def test_dependency_levels(traceability: RequirementDiagram) -> None:
    assert build_dependency_levels(traceability) == {"core": 1, "perf": 2, "orphan": 1, "sim": 0}


def test_requirement_cycles_fall_back_to_level_one() -> None:
    model = RequirementDiagram(
        requirements=[Requirement(name="a"), Requirement(name="b")],
        relationships=[
            RequirementRelationship(source="a", target="b"),
            RequirementRelationship(source="b", target="a"),
        ],
    )
    assert build_dependency_levels(model) == {"a": 1, "b": 1}


def test_requirement_rows_follow_levels(traceability: RequirementDiagram) -> None:
    result = RequirementTransform().transform(traceability)
    positions = {node.id: (node.x, node.y, node.width, node.height) for node in result.nodes}

    assert positions == {
        "sim": (20, 20, 150, 80),
        "core": (20, 180, 180, 180),
        "orphan": (300, 180, 180, 140),
        "perf": (20, 440, 180, 140),
    }
    assert result.metadata == RequirementMetadata(level_count=3)

    core = result.node_by_id("core")
    assert core.role == "requirement"
    assert (core.detail.risk, core.detail.verify_method, core.detail.requirement_id) == ("high", "test", "REQ-1")
    sim = result.node_by_id("sim")
    assert (sim.role, sim.detail.node_type, sim.detail.docref) == ("element", "simulation", "docs/sim.md")


def test_relationships_connect_facing_sides(traceability: RequirementDiagram) -> None:
    edges = RequirementTransform().transform(traceability).edges

    assert [edge.id for edge in edges] == ["rel_0", "rel_1"]
    satisfies, derives = edges
    assert (satisfies.start, satisfies.end) == (Point(110, 180), Point(95, 100))
    assert satisfies.label == "<<satisfies>>"
    assert (derives.start, derives.end) == (Point(110, 440), Point(110, 360))
    assert derives.detail.relation == "derives"


def test_requirements_in_one_row_connect_side_by_side() -> None:
    model = RequirementDiagram(
        requirements=[Requirement(name="left"), Requirement(name="right")],
        relationships=[
            RequirementRelationship(source="left", target="right"),
            RequirementRelationship(source="right", target="left", relationship_type="refines"),
        ],
    )
    result = RequirementTransform().transform(model)
    left, right = result.nodes
    forward, backward = result.edges

    assert left.y == right.y
    assert (forward.start, forward.end) == (Point(left.right, left.center.y), Point(right.x, right.center.y))
    assert (backward.start, backward.end) == (Point(right.x, right.center.y), Point(left.right, left.center.y))


def test_requirement_names_are_unique() -> None:
    model = RequirementDiagram(requirements=[Requirement(name="sim")], elements=[RequirementElement(name="sim")])
    with pytest.raises(InvalidDiagramError) as exc_info:
        RequirementTransform().transform(model)
    assert exc_info.value.problems == ["Duplicate requirement or element name: sim"]

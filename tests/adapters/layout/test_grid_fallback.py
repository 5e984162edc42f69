from __future__ import annotations

from itertools import combinations

from adapters.layout.grid import GridFallbackLayoutEngine, GridLayoutConfig
from domain.layout_graph import GraphEdgeSpec, GraphNodeSpec, LayoutGraph
from domain.models import Point, PositionedNode


def _leaf(node_id: str, width: float = 100.0, height: float = 50.0, **kwargs: object) -> GraphNodeSpec:
    return GraphNodeSpec(id=node_id, width=width, height=height, role="node", **kwargs)


def _overlaps(left: PositionedNode, right: PositionedNode) -> bool:
    return left.x < right.right and right.x < left.right and left.y < right.bottom and right.y < left.bottom


def test_siblings_fill_rows_without_overlap() -> None:
    graph = LayoutGraph(kind="flowchart", nodes=tuple(_leaf(f"n{index}") for index in range(5)))
    result = GridFallbackLayoutEngine().layout(graph)

    assert [(node.x, node.y) for node in result.nodes[:4]] == [(20, 20), (270, 20), (520, 20), (20, 220)]
    for left, right in combinations(result.nodes, 2):
        assert not _overlaps(left, right)
    assert (result.width, result.height) == (800, 600)


def test_pitch_grows_with_the_largest_sibling() -> None:
    engine = GridFallbackLayoutEngine(GridLayoutConfig(columns=2))
    graph = LayoutGraph(kind="flowchart", nodes=(_leaf("big", 700, 300), _leaf("small"), _leaf("third")))
    result = engine.layout(graph)
    by_id = {node.id: node for node in result.nodes}

    assert by_id["small"].x == 20 + 750
    assert by_id["third"].y == 20 + 350
    assert result.width == by_id["small"].right + 20


def test_containers_grow_around_children() -> None:
    container = GraphNodeSpec(
        id="box",
        width=50,
        height=50,
        role="container",
        padding=10,
        header=20,
        children=(_leaf("a"), _leaf("b")),
    )
    result = GridFallbackLayoutEngine().layout(LayoutGraph(kind="c4", nodes=(container,)))
    box = result.nodes[0]

    assert (box.width, box.height) == (370, 90)
    first, second = box.children
    assert (first.x, first.y) == (box.x + 10, box.y + 30)
    for child in box.children:
        assert child.right <= box.right
        assert child.bottom <= box.bottom
    assert not _overlaps(first, second)


def test_explicit_positions_are_relative_to_the_origin() -> None:
    graph = LayoutGraph(kind="block", nodes=(_leaf("fixed", position=Point(5, 40)),))
    node = GridFallbackLayoutEngine().layout(graph).nodes[0]
    assert (node.x, node.y) == (25, 60)


def test_edges_are_straight_between_centres() -> None:
    graph = LayoutGraph(
        kind="flowchart",
        nodes=(_leaf("a"), _leaf("b", 60, 60)),
        edges=(
            GraphEdgeSpec(id="a_b", source_id="a", target_id="b", label="go"),
            GraphEdgeSpec(id="a_ghost", source_id="a", target_id="ghost"),
        ),
    )
    result = GridFallbackLayoutEngine().layout(graph)
    a, b = result.nodes

    assert [edge.id for edge in result.edges] == ["a_b"]
    edge = result.edges[0]
    assert edge.start == a.center
    assert edge.end == b.center
    assert edge.bend_points == ()
    assert edge.label == "go"


def test_edges_reach_nested_nodes() -> None:
    container = GraphNodeSpec(id="box", width=50, height=50, role="container", children=(_leaf("inner"),))
    graph = LayoutGraph(
        kind="c4",
        nodes=(container, _leaf("outer")),
        edges=(GraphEdgeSpec(id="link", source_id="inner", target_id="outer"),),
    )
    result = GridFallbackLayoutEngine().layout(graph)

    assert result.edges[0].start == result.node_by_id("inner").center

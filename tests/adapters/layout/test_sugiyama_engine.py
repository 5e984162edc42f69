from __future__ import annotations

from itertools import combinations

import pytest

from domain.layout_graph import GraphEdgeSpec, GraphNodeSpec, LayoutGraph, LayoutOptions
from domain.models import PositionedNode

pytest.importorskip("grandalf")

from adapters.layout.sugiyama import SugiyamaLayoutEngine  # noqa: E402


def _leaf(node_id: str) -> GraphNodeSpec:
    return GraphNodeSpec(id=node_id, width=80, height=40, role="node")


def _edge(source: str, target: str) -> GraphEdgeSpec:
    return GraphEdgeSpec(id=f"{source}_{target}", source_id=source, target_id=target)


def _overlaps(left: PositionedNode, right: PositionedNode) -> bool:
    return left.x < right.right and right.x < left.right and left.y < right.bottom and right.y < left.bottom


def _chain(direction: str) -> LayoutGraph:
    return LayoutGraph(
        kind="flowchart",
        nodes=(_leaf("a"), _leaf("b"), _leaf("c")),
        edges=(_edge("a", "b"), _edge("b", "c")),
        options=LayoutOptions(direction=direction),
    )


def test_chain_ranks_follow_edges_downwards() -> None:
    result = SugiyamaLayoutEngine().layout(_chain("DOWN"))
    by_id = {node.id: node for node in result.nodes}

    assert by_id["a"].center.y < by_id["b"].center.y < by_id["c"].center.y
    for node in result.nodes:
        assert node.x >= 0
        assert node.y >= 0
    assert [edge.id for edge in result.edges] == ["a_b", "b_c"]
    assert result.edges[0].start == by_id["a"].center


def test_horizontal_direction_swaps_axes() -> None:
    result = SugiyamaLayoutEngine().layout(_chain("RIGHT"))
    by_id = {node.id: node for node in result.nodes}

    assert by_id["a"].center.x < by_id["b"].center.x < by_id["c"].center.x
    for node in result.nodes:
        assert (node.width, node.height) == (80, 40)


def test_components_are_placed_side_by_side() -> None:
    graph = LayoutGraph(
        kind="flowchart",
        nodes=(_leaf("a"), _leaf("b"), _leaf("lonely"), _leaf("c"), _leaf("d")),
        edges=(_edge("a", "b"), _edge("c", "d")),
    )
    result = SugiyamaLayoutEngine().layout(graph)

    for left, right in combinations(result.nodes, 2):
        assert not _overlaps(left, right)
    assert result.width >= 800
    assert result.height >= 600


def test_nested_nodes_are_packed_inside_their_container() -> None:
    container = GraphNodeSpec(
        id="box",
        width=100,
        height=100,
        role="container",
        padding=20,
        header=30,
        children=(_leaf("inner_a"), _leaf("inner_b")),
    )
    graph = LayoutGraph(
        kind="c4",
        nodes=(container, _leaf("outer")),
        edges=(_edge("inner_a", "outer"), _edge("outer", "ghost"), _edge("inner_a", "inner_b")),
    )
    result = SugiyamaLayoutEngine().layout(graph)
    box = result.node_by_id("box")

    for child in box.children:
        assert box.x < child.x
        assert child.right <= box.right
        assert box.y < child.y
        assert child.bottom <= box.bottom
    assert [edge.id for edge in result.edges] == ["inner_a_outer", "inner_a_inner_b"]
    assert not _overlaps(box, result.node_by_id("outer"))

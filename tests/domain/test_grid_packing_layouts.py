from __future__ import annotations

from itertools import pairwise

from domain.diagrams.board import (
    Block,
    BlockConnection,
    BlockDiagram,
    KanbanCard,
    KanbanColumn,
    KanbanDiagram,
    PacketDiagram,
    PacketField,
)
from domain.services.transforms.block import BlockTransform
from domain.services.transforms.kanban import KanbanTransform, card_height, column_height
from domain.services.transforms.packet import PacketTransform, split_field
from tests.helpers.diagram_fixtures import load_diagram_fixture


def test_block_rows_wrap_when_span_overflows() -> None:
    model = BlockDiagram(
        columns=3,
        blocks=[Block(id="a"), Block(id="b"), Block(id="c", width=2), Block(id="d")],
    )
    result = BlockTransform().transform(model)
    by_id = {node.id: node for node in result.nodes}

    assert (by_id["a"].detail.row, by_id["a"].detail.column) == (0, 0)
    assert (by_id["b"].detail.row, by_id["b"].detail.column) == (0, 1)
    assert (by_id["c"].detail.row, by_id["c"].detail.column) == (1, 0)
    assert (by_id["d"].detail.row, by_id["d"].detail.column) == (1, 2)
    assert by_id["c"].y > by_id["a"].bottom
    assert by_id["c"].width == 100 * 2 + 20
    assert result.metadata.rows == 2


def test_space_blocks_advance_without_geometry() -> None:
    model = BlockDiagram(
        columns=3,
        blocks=[Block(id="a"), Block(id="gap", block_type="space"), Block(id="b")],
    )
    result = BlockTransform().transform(model)

    assert [node.id for node in result.nodes] == ["a", "b"]
    assert result.node_by_id("b").detail.column == 2


def test_arrow_blocks_are_half_size() -> None:
    model = BlockDiagram(columns=2, blocks=[Block(id="a"), Block(id="next", block_type="arrow")])
    arrow = BlockTransform().transform(model).node_by_id("next")
    assert (arrow.width, arrow.height) == (50, 30)


def test_compound_blocks_stack_children_inside() -> None:
    model = BlockDiagram(
        columns=2,
        blocks=[
            Block(id="group", label="Group"),
            Block(id="x", parent=0),
            Block(id="y", parent=0),
            Block(id="solo"),
        ],
        connections=[
            BlockConnection(from_id="x", to_id="solo"),
            BlockConnection(from_id="y", to_id="missing"),
        ],
    )
    result = BlockTransform().transform(model)
    group = result.node_by_id("group")

    assert group.role == "compound"
    assert [child.id for child in group.children] == ["x", "y"]
    for child in group.children:
        assert group.x < child.x
        assert child.right <= group.right
        assert group.y < child.y
        assert child.bottom <= group.bottom
    first, second = group.children
    assert second.y >= first.bottom + 20
    assert [edge.id for edge in result.edges] == ["conn_0"]
    assert result.edges[0].start.y == first.bottom


def test_kanban_columns_and_card_heights() -> None:
    model = KanbanDiagram(
        columns=[
            KanbanColumn(
                id="todo",
                title="To do",
                cards=[
                    KanbanCard(id="c1", text="Write docs"),
                    KanbanCard(id="c2", text="Fix bug", assigned="sam", priority="High"),
                ],
            ),
            KanbanColumn(id="done", title="Done"),
        ]
    )
    result = KanbanTransform().transform(model)
    todo, done = result.nodes

    assert (todo.x, done.x) == (0, 260)
    assert todo.width == 200
    first, second = todo.children
    assert first.y == 60
    assert card_height(model.columns[0].cards[1]) == 80 + 2 * 18
    assert second.y == first.bottom + 15
    assert second.detail.metadata == (("assigned", "sam"), ("priority", "High"))
    assert todo.bottom == second.bottom + 10
    assert column_height(model.columns[1]) == 60
    assert result.metadata.card_count == 2


def test_packet_fields_spanning_rows_are_partitioned() -> None:
    model = load_diagram_fixture("packet.json")
    result = PacketTransform().transform(model)
    spanning = [node for node in result.nodes if node.label == "Spanning field"]

    assert [(node.detail.bit_start, node.detail.bit_end) for node in spanning] == [(100, 127), (128, 140)]
    assert [(node.detail.continuation, node.detail.final) for node in spanning] == [(False, False), (True, True)]
    assert spanning[0].x == 40 + 4 * 30
    assert spanning[1].x == 40
    assert spanning[1].y - spanning[0].y == 40
    assert result.metadata.rows == 5


def test_split_field_partitions_bit_range() -> None:
    field = PacketField(bit_start=20, bit_end=99, label="payload")
    segments = list(split_field(field, 32))

    assert segments[0].bit_start == field.bit_start
    assert segments[-1].bit_end == field.bit_end
    for left, right in pairwise(segments):
        assert right.bit_start == left.bit_end + 1
    assert [segment.final for segment in segments] == [False, False, False, True]
    assert [segment.continuation for segment in segments] == [False, True, True, True]
    assert sum(segment.bit_end - segment.bit_start + 1 for segment in segments) == field.size


def test_packet_single_row_field_is_one_final_segment() -> None:
    result = PacketTransform().transform(PacketDiagram(fields=[PacketField(bit_start=0, bit_end=7, label="flags")]))
    (node,) = result.nodes
    assert node.width == 8 * 30
    assert node.detail.final is True
    assert node.detail.continuation is False


def test_middle_segments_continue_without_finishing() -> None:
    segments = list(split_field(PacketField(bit_start=16, bit_end=79, label="body"), 32))

    assert [(s.bit_start, s.bit_end) for s in segments] == [(16, 31), (32, 63), (64, 79)]
    assert [(s.continuation, s.final) for s in segments] == [(False, False), (True, False), (True, True)]

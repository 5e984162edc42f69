from __future__ import annotations

from domain.diagrams.base import DiagramKind
from domain.diagrams.board import BlockDiagram
from domain.layout_details import BlockDetail, BlockMetadata, GraphEdgeDetail
from domain.models import LayoutResult, Point, PositionedEdge, PositionedNode, Size
from domain.services.transforms.base import DiagramTransform

BLOCK_WIDTH = 100.0
BLOCK_HEIGHT = 60.0
SPACING = 20.0
COMPOUND_PADDING = 20.0
LABEL_PADDING_X = 40.0
LABEL_PADDING_Y = 30.0


class BlockTransform(DiagramTransform):
    """Column grid with wrap-on-overflow; compound blocks stack their children vertically inside."""

    kind = DiagramKind.BLOCK

    def layout(self, model: BlockDiagram) -> LayoutResult:
        children = model.children_index()
        sizes = self._sizes(model, children)
        top_level = [index for index, block in enumerate(model.blocks) if block.parent is None]
        measured = [index for index in top_level if not model.blocks[index].space]
        cell_width = max((sizes[index].width for index in measured), default=BLOCK_WIDTH)
        cell_height = max((sizes[index].height for index in measured), default=BLOCK_HEIGHT)

        nodes: list[PositionedNode] = []
        column = row = 0
        y = SPACING
        row_height = 0.0
        for index in top_level:
            block = model.blocks[index]
            span = min(block.width, model.columns)
            if column > 0 and column + span > model.columns:
                column, row = 0, row + 1
                y += row_height + SPACING
                row_height = 0.0
            if not block.space:
                x = SPACING + column * (cell_width + SPACING)
                width = sizes[index].width if block.arrow else cell_width * span + SPACING * (span - 1)
                node = self._node(model, children, sizes, index, x, y, width, row, column)
                nodes.append(node)
                row_height = max(row_height, node.height)
            column += span
            if column >= model.columns:
                column, row = 0, row + 1
                y += row_height + SPACING
                row_height = 0.0

        rows = row + 1 if column > 0 else row
        metadata = BlockMetadata(columns=model.columns, rows=rows, cell_width=cell_width, cell_height=cell_height)
        edges = self._connections(model, nodes)
        return self.finalize(nodes, edges, metadata, model.title)

    def _sizes(self, model: BlockDiagram, children: list[list[int]]) -> list[Size]:
        sizes: list[Size] = [Size(0.0, 0.0)] * len(model.blocks)
        # Children always follow their parent in the arena.
        for index in reversed(range(len(model.blocks))):
            block = model.blocks[index]
            if block.space:
                continue
            if block.arrow:
                sizes[index] = Size(BLOCK_WIDTH / 2, BLOCK_HEIGHT / 2)
                continue
            label = self.measure(block.label or block.id)
            width = max(label.width + LABEL_PADDING_X, BLOCK_WIDTH)
            height = max(label.height + LABEL_PADDING_Y, BLOCK_HEIGHT)
            nested = [sizes[child] for child in children[index] if not model.blocks[child].space]
            if nested:
                stacked = sum(size.height + SPACING for size in nested) - SPACING
                height = max(height, stacked + COMPOUND_PADDING * 2)
                width = max(width, max(size.width for size in nested) + COMPOUND_PADDING * 2)
            sizes[index] = Size(width, height)
        return sizes

    def _node(
        self,
        model: BlockDiagram,
        children: list[list[int]],
        sizes: list[Size],
        index: int,
        x: float,
        y: float,
        width: float,
        row: int,
        column: int,
    ) -> PositionedNode:
        block = model.blocks[index]
        nested: list[PositionedNode] = []
        child_y = y + COMPOUND_PADDING
        for child in children[index]:
            if model.blocks[child].space:
                continue
            size = sizes[child]
            node = self._node(model, children, sizes, child, x + COMPOUND_PADDING, child_y, size.width, row, column)
            nested.append(node)
            child_y = node.bottom + SPACING
        return PositionedNode(
            id=block.id,
            x=x,
            y=y,
            width=width,
            height=sizes[index].height,
            role="compound" if nested else block.block_type,
            label=block.label or block.id,
            source=block,
            detail=BlockDetail(
                block_type=block.block_type,
                shape=block.shape,
                span=block.width,
                row=row,
                column=column,
            ),
            children=tuple(nested),
        )

    def _connections(self, model: BlockDiagram, nodes: list[PositionedNode]) -> list[PositionedEdge]:
        placed = {node.id: node for top in nodes for node in top.walk()}
        edges: list[PositionedEdge] = []
        for index, connection in enumerate(model.connections):
            source = placed.get(connection.from_id)
            target = placed.get(connection.to_id)
            if source is None or target is None:
                continue
            edges.append(
                PositionedEdge(
                    id=f"conn_{index}",
                    source_id=connection.from_id,
                    target_id=connection.to_id,
                    start=Point(source.x + source.width / 2, source.bottom),
                    end=Point(target.x + target.width / 2, target.y),
                    label=connection.label,
                    source=connection,
                    detail=GraphEdgeDetail(relation=connection.connection_type),
                )
            )
        return edges

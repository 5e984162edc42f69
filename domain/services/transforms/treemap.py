from __future__ import annotations

from domain.diagrams.base import DiagramKind
from domain.diagrams.tree import TreemapDiagram
from domain.layout_details import TreemapCellDetail, TreemapMetadata
from domain.models import LayoutResult, PositionedNode
from domain.services.transforms.base import DiagramTransform

CELL_PADDING = 10.0
MIN_CELL_SIZE = 40.0
LABEL_HEIGHT = 20.0
HEADER_HEIGHT = 40.0
CHART_WIDTH = 800.0
BASE_HEIGHT = 400.0
HEIGHT_PER_NODE = 30.0
MAX_EXTRA_HEIGHT = 200.0


class TreemapTransform(DiagramTransform):
    kind = DiagramKind.TREEMAP

    def layout(self, model: TreemapDiagram) -> LayoutResult:
        totals = model.total_values()
        roots = [index for index, node in enumerate(model.nodes) if node.parent is None]
        total = sum(totals[index] for index in roots)
        if total <= 0:
            return self.finalize([], [], TreemapMetadata(total_value=0.0), model.title)

        height = BASE_HEIGHT + min(len(model.nodes) * HEIGHT_PER_NODE, MAX_EXTRA_HEIGHT)
        top = HEADER_HEIGHT + CELL_PADDING if model.title else CELL_PADDING
        available_height = height - top - CELL_PADDING

        packer = _CellPacker(model, totals, model.children_index())
        nodes: list[PositionedNode] = []
        y = top
        for index in roots:
            cell = packer.cell(index, 0, CELL_PADDING, y, CHART_WIDTH - 2 * CELL_PADDING, available_height, total)
            if cell is not None:
                nodes.append(cell)
                y = cell.bottom + CELL_PADDING
        return self.finalize(nodes, [], TreemapMetadata(total_value=total), model.title)


class _CellPacker:
    def __init__(self, model: TreemapDiagram, totals: list[float], children: list[list[int]]) -> None:
        self.model = model
        self.totals = totals
        self.children = children

    def cell(
        self,
        index: int,
        depth: int,
        x: float,
        y: float,
        width: float,
        available_height: float,
        parent_total: float,
    ) -> PositionedNode | None:
        value = self.totals[index]
        if value <= 0:
            return None
        height = max(available_height * value / parent_total, MIN_CELL_SIZE)
        children: list[PositionedNode] = []
        child_y = y + LABEL_HEIGHT
        inner_height = height - LABEL_HEIGHT - CELL_PADDING
        inner_width = max(width - 2 * CELL_PADDING, MIN_CELL_SIZE)
        for child in self.children[index]:
            cell = self.cell(child, depth + 1, x + CELL_PADDING, child_y, inner_width, inner_height, value)
            if cell is not None:
                children.append(cell)
                child_y = cell.bottom + CELL_PADDING
        if children:
            height = max(height, child_y - y)
        node = self.model.nodes[index]
        return PositionedNode(
            id=f"cell_{index}",
            x=x,
            y=y,
            width=width,
            height=height,
            role="branch" if children else "leaf",
            label=node.label,
            source=node,
            detail=TreemapCellDetail(value=value, depth=depth, css_class=node.css_class),
            children=tuple(children),
        )

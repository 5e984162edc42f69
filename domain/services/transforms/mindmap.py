from __future__ import annotations

from domain.diagrams.base import DiagramKind
from domain.diagrams.tree import MindmapDiagram, MindmapNode
from domain.layout_details import MindmapMetadata, MindmapNodeDetail, TreeConnectionDetail
from domain.models import LayoutResult, Point, PositionedEdge, PositionedNode, content_bounds
from domain.services.transforms.base import DiagramTransform

SIBLING_SPACING = 120.0
LEVEL_SPACING = 80.0
MIN_NODE_WIDTH = 100.0
NODE_HEIGHT = 40.0
CHAR_WIDTH = 8.0
TEXT_MARGIN = 20.0
ROOT_PADDING = 20.0
WIDE_SHAPES = {"circle", "hexagon"}
WIDE_SHAPE_FACTOR = 1.2


def node_width(node: MindmapNode) -> float:
    width = max(len(node.content) * CHAR_WIDTH + TEXT_MARGIN, MIN_NODE_WIDTH)
    if node.shape in WIDE_SHAPES:
        return width * WIDE_SHAPE_FACTOR
    return width


def subtree_widths(model: MindmapDiagram) -> list[float]:
    """Bottom-up widths; children always follow their parent in the arena."""
    children = model.children_index()
    widths = [0.0] * len(model.nodes)
    for index in reversed(range(len(model.nodes))):
        own = node_width(model.nodes[index])
        kids = children[index]
        if not kids:
            widths[index] = own
            continue
        span = sum(widths[child] for child in kids) + (len(kids) - 1) * SIBLING_SPACING
        widths[index] = max(own, span)
    return widths


class MindmapTransform(DiagramTransform):
    kind = DiagramKind.MINDMAP

    def layout(self, model: MindmapDiagram) -> LayoutResult:
        root = model.root_index
        if root is None:
            return self.finalize([], [], MindmapMetadata(0.0, 0.0, 0), model.title)

        children = model.children_index()
        widths = subtree_widths(model)
        tree_width = widths[root] + ROOT_PADDING * 2

        centers: dict[int, Point] = {root: Point(tree_width / 2, ROOT_PADDING)}
        depths: dict[int, int] = {root: 0}
        order: list[int] = []
        stack = [root]
        while stack:
            index = stack.pop()
            order.append(index)
            kids = children[index]
            if not kids:
                continue
            parent = centers[index]
            span = sum(widths[child] for child in kids) + (len(kids) - 1) * SIBLING_SPACING
            cursor = parent.x - span / 2
            child_y = parent.y + NODE_HEIGHT + LEVEL_SPACING
            for child in kids:
                centers[child] = Point(cursor + widths[child] / 2, child_y)
                depths[child] = depths[index] + 1
                cursor += widths[child] + SIBLING_SPACING
            stack.extend(reversed(kids))

        nodes: list[PositionedNode] = []
        edges: list[PositionedEdge] = []
        for index in order:
            node = model.nodes[index]
            width = node_width(node)
            center = centers[index]
            nodes.append(
                PositionedNode(
                    id=node.id,
                    x=center.x - width / 2,
                    y=center.y,
                    width=width,
                    height=NODE_HEIGHT,
                    role="root" if index == root else "branch",
                    label=node.content,
                    source=node,
                    detail=MindmapNodeDetail(depth=depths[index], shape=node.shape, icon=node.icon),
                )
            )
            if node.parent is not None:
                parent = model.nodes[node.parent]
                parent_center = centers[node.parent]
                edges.append(
                    PositionedEdge(
                        id=f"{parent.id}_to_{node.id}",
                        source_id=parent.id,
                        target_id=node.id,
                        start=Point(parent_center.x, parent_center.y + NODE_HEIGHT),
                        end=Point(center.x, center.y),
                        detail=TreeConnectionDetail(depth=depths[index]),
                    )
                )

        bounds = content_bounds(nodes, edges)
        metadata = MindmapMetadata(
            content_width=bounds.right + ROOT_PADDING,
            content_height=bounds.bottom + ROOT_PADDING,
            max_depth=max(depths.values()),
        )
        return self.finalize(nodes, edges, metadata, model.title)

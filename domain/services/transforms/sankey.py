from __future__ import annotations

from collections import defaultdict, deque

from domain.diagrams.base import DiagramKind
from domain.diagrams.chart import SankeyDiagram
from domain.layout_details import SankeyFlowDetail, SankeyMetadata, SankeyNodeDetail
from domain.models import LayoutResult, Point, PositionedEdge, PositionedNode
from domain.services.transforms.base import DiagramTransform

NODE_HEIGHT = 40.0
NODE_SPACING = 30.0
LAYER_SPACING = 150.0
MIN_NODE_WIDTH = 20.0
MAX_NODE_WIDTH = 40.0
MIN_FLOW_WIDTH = 2.0
MAX_FLOW_WIDTH = 50.0


def assign_layers(model: SankeyDiagram) -> dict[str, int]:
    """Breadth-first layering from nodes without inflow; each node is visited once."""
    node_ids = model.all_node_ids()
    outgoing: dict[str, list[str]] = defaultdict(list)
    has_inflow: set[str] = set()
    for flow in model.flows:
        outgoing[flow.source].append(flow.target)
        has_inflow.add(flow.target)

    layers: dict[str, int] = {}
    queue: deque[str] = deque()
    for node_id in node_ids:
        if node_id not in has_inflow:
            layers[node_id] = 0
            queue.append(node_id)
    visited = set(queue)
    while queue:
        current = queue.popleft()
        for target in outgoing[current]:
            if target in visited:
                continue
            layers[target] = max(layers.get(target, 0), layers[current] + 1)
            visited.add(target)
            queue.append(target)
    for node_id in node_ids:
        layers.setdefault(node_id, 0)
    return layers


def flow_width(value: float, max_flow: float) -> float:
    if max_flow <= 0:
        return MIN_FLOW_WIDTH
    return max(MIN_FLOW_WIDTH + value / max_flow * (MAX_FLOW_WIDTH - MIN_FLOW_WIDTH), MIN_FLOW_WIDTH)


def control_points(start: Point, end: Point) -> tuple[Point, Point]:
    offset = (end.x - start.x) / 2
    return Point(start.x + offset, start.y), Point(end.x - offset, end.y)


class SankeyTransform(DiagramTransform):
    kind = DiagramKind.SANKEY

    def layout(self, model: SankeyDiagram) -> LayoutResult:
        node_ids = model.all_node_ids()
        if not node_ids:
            return self.finalize([], [], SankeyMetadata(layer_count=0, max_flow=0.0), model.title)

        totals: dict[str, float] = defaultdict(float)
        for flow in model.flows:
            totals[flow.source] += flow.value
            totals[flow.target] += flow.value
        max_flow = max((flow.value for flow in model.flows), default=0.0)
        layers = assign_layers(model)

        by_layer: dict[int, list[str]] = defaultdict(list)
        for node_id in node_ids:
            by_layer[layers[node_id]].append(node_id)

        positioned: dict[str, PositionedNode] = {}
        for layer, members in sorted(by_layer.items()):
            members.sort(key=lambda node_id: -totals[node_id])
            for row, node_id in enumerate(members):
                positioned[node_id] = PositionedNode(
                    id=node_id,
                    x=layer * LAYER_SPACING,
                    y=row * (NODE_HEIGHT + NODE_SPACING),
                    width=self._node_width(totals[node_id], max_flow),
                    height=NODE_HEIGHT,
                    role="node",
                    label=model.label_for(node_id),
                    detail=SankeyNodeDetail(layer=layer, total_flow=totals[node_id]),
                )

        edges: list[PositionedEdge] = []
        for index, flow in enumerate(model.flows):
            source = positioned[flow.source]
            target = positioned[flow.target]
            start = Point(source.right, source.y + source.height / 2)
            end = Point(target.x, target.y + target.height / 2)
            first, second = control_points(start, end)
            edges.append(
                PositionedEdge(
                    id=f"flow_{index}",
                    source_id=flow.source,
                    target_id=flow.target,
                    start=start,
                    end=end,
                    label=flow.label,
                    source=flow,
                    detail=SankeyFlowDetail(
                        value=flow.value,
                        stroke_width=flow_width(flow.value, max_flow),
                        control_1=first,
                        control_2=second,
                    ),
                )
            )

        metadata = SankeyMetadata(layer_count=max(layers.values()) + 1, max_flow=max_flow)
        nodes = [positioned[node_id] for node_id in node_ids]
        return self.finalize(nodes, edges, metadata, model.title)

    def _node_width(self, total: float, max_flow: float) -> float:
        if total <= 0 or max_flow <= 0:
            return MIN_NODE_WIDTH
        ratio = total / (max_flow * 2)
        return min(MIN_NODE_WIDTH + ratio * (MAX_NODE_WIDTH - MIN_NODE_WIDTH), MAX_NODE_WIDTH)

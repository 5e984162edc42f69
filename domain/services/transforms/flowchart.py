from __future__ import annotations

from domain.diagrams.base import DiagramKind
from domain.diagrams.graph import FlowchartDiagram, FlowchartNode
from domain.layout_details import GraphEdgeDetail, GraphNodeDetail
from domain.layout_graph import GraphEdgeSpec, GraphNodeSpec, LayoutGraph
from domain.services.transforms.base import (
    ALGORITHM_LAYERED,
    GraphTransform,
    build_layout_options,
    map_direction,
    padded_size,
)


class FlowchartTransform(GraphTransform):
    kind = DiagramKind.FLOWCHART

    def to_graph(self, model: FlowchartDiagram) -> LayoutGraph:
        nodes = [self._node_spec(node) for node in model.nodes]
        edges = [
            GraphEdgeSpec(
                id=f"{edge.source_id}_to_{edge.target_id}_{index}",
                source_id=edge.source_id,
                target_id=edge.target_id,
                label=edge.label or None,
                source=edge,
                detail=GraphEdgeDetail(relation=edge.arrow_type),
            )
            for index, edge in enumerate(model.edges)
        ]
        options = build_layout_options(
            ALGORITHM_LAYERED,
            map_direction(model.direction),
            node_spacing=50.0,
            layer_spacing=50.0,
            edge_node_spacing=30.0,
            edge_edge_spacing=20.0,
            node_placement="SIMPLE",
        )
        return self.build_graph(model, nodes, edges, options)

    def _node_spec(self, node: FlowchartNode) -> GraphNodeSpec:
        size = padded_size(self.measure(node.display_label), node.shape)
        return GraphNodeSpec(
            id=node.id,
            width=size.width,
            height=size.height,
            role="node",
            label=node.display_label,
            source=node,
            detail=GraphNodeDetail(shape=node.shape, classes=tuple(node.classes)),
        )

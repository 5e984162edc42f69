from __future__ import annotations

from domain.diagrams.base import DiagramKind
from domain.diagrams.graph import ErDiagram, ErEntity
from domain.layout_details import GraphEdgeDetail, GraphNodeDetail
from domain.layout_graph import GraphEdgeSpec, GraphNodeSpec, LayoutGraph
from domain.models import Size
from domain.services.transforms.base import (
    ALGORITHM_LAYERED,
    DIRECTION_RIGHT,
    GraphTransform,
    build_layout_options,
)

MIN_ENTITY_WIDTH = 150.0
LINE_HEIGHT = 20.0
ENTITY_PADDING = 10.0
ENTITY_SPACING = 100.0


class ErDiagramTransform(GraphTransform):
    kind = DiagramKind.ER

    def to_graph(self, model: ErDiagram) -> LayoutGraph:
        nodes = []
        for entity in model.entities:
            size = self.entity_size(entity)
            nodes.append(
                GraphNodeSpec(
                    id=entity.id,
                    width=size.width,
                    height=size.height,
                    role="entity",
                    label=entity.display_name,
                    source=entity,
                    detail=GraphNodeDetail(
                        shape="entity",
                        lines=tuple(attribute.display_text() for attribute in entity.attributes),
                    ),
                )
            )
        edges = [
            GraphEdgeSpec(
                id=f"{rel.from_id}_to_{rel.to_id}_{index}",
                source_id=rel.from_id,
                target_id=rel.to_id,
                label=rel.label or None,
                source=rel,
                detail=GraphEdgeDetail(
                    relation="identifying" if rel.identifying else "non_identifying",
                    source_label=rel.cardinality_from,
                    target_label=rel.cardinality_to,
                ),
            )
            for index, rel in enumerate(model.relationships)
        ]
        options = build_layout_options(
            ALGORITHM_LAYERED,
            DIRECTION_RIGHT,
            node_spacing=ENTITY_SPACING,
            layer_spacing=ENTITY_SPACING,
            edge_node_spacing=50.0,
            edge_edge_spacing=30.0,
            node_placement="NETWORK_SIMPLEX",
            hierarchy_handling="INCLUDE_CHILDREN",
        )
        return self.build_graph(model, nodes, edges, options)

    def entity_size(self, entity: ErEntity) -> Size:
        widest = max(MIN_ENTITY_WIDTH, self.measure(entity.display_name, self.font_size + 2).width)
        for attribute in entity.attributes:
            widest = max(widest, self.measure(attribute.display_text()).width)
        lines = 1 + len(entity.attributes)
        return Size(widest + ENTITY_PADDING * 2, lines * LINE_HEIGHT + ENTITY_PADDING * 2)

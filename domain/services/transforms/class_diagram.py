from __future__ import annotations

from domain.diagrams.base import DiagramKind
from domain.diagrams.graph import ClassDiagram, ClassEntity
from domain.layout_details import GraphEdgeDetail, GraphNodeDetail
from domain.layout_graph import GraphEdgeSpec, GraphNodeSpec, LayoutGraph
from domain.models import Size
from domain.services.transforms.base import (
    ALGORITHM_LAYERED,
    GraphTransform,
    build_layout_options,
    map_direction,
)

MIN_CLASS_WIDTH = 120.0
LINE_HEIGHT = 20.0
COMPARTMENT_PADDING = 10.0
SEPARATOR_HEIGHT = 2.0
CLASS_SPACING = 80.0


class ClassDiagramTransform(GraphTransform):
    kind = DiagramKind.CLASS

    def to_graph(self, model: ClassDiagram) -> LayoutGraph:
        nodes = []
        for entity in model.entities:
            size = self.entity_size(entity)
            nodes.append(
                GraphNodeSpec(
                    id=entity.id,
                    width=size.width,
                    height=size.height,
                    role="class",
                    label=entity.display_name,
                    source=entity,
                    detail=GraphNodeDetail(shape="class", lines=tuple(_compartment_lines(entity))),
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
                    relation=rel.relationship_type,
                    source_label=rel.source_cardinality,
                    target_label=rel.target_cardinality,
                ),
            )
            for index, rel in enumerate(model.relationships)
        ]
        options = build_layout_options(
            ALGORITHM_LAYERED,
            map_direction(model.direction),
            node_spacing=CLASS_SPACING,
            layer_spacing=CLASS_SPACING,
            edge_node_spacing=40.0,
            edge_edge_spacing=20.0,
            node_placement="NETWORK_SIMPLEX",
            hierarchy_handling="INCLUDE_CHILDREN",
        )
        return self.build_graph(model, nodes, edges, options)

    def entity_size(self, entity: ClassEntity) -> Size:
        header = _header_text(entity)
        texts = [header, *(member.signature() for member in entity.attributes)]
        texts.extend(member.signature() for member in entity.methods)
        widest = max(self.measure(text).width for text in texts)
        width = max(MIN_CLASS_WIDTH, widest) + COMPARTMENT_PADDING * 2

        compartments = 1 + bool(entity.attributes) + bool(entity.methods)
        name_lines = 2 if entity.stereotype else 1
        height = (
            (name_lines + len(entity.attributes) + len(entity.methods)) * LINE_HEIGHT
            + (compartments - 1) * SEPARATOR_HEIGHT
            + COMPARTMENT_PADDING * 2
        )
        return Size(width, height)


def _header_text(entity: ClassEntity) -> str:
    if entity.stereotype:
        return f"<<{entity.stereotype}>>\n{entity.display_name}"
    return entity.display_name


def _compartment_lines(entity: ClassEntity) -> list[str]:
    lines = [member.signature() for member in entity.attributes]
    lines.extend(member.signature() for member in entity.methods)
    return lines

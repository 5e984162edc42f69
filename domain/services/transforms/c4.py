from __future__ import annotations

import math

from domain.diagrams.base import DiagramKind
from domain.diagrams.graph import C4Boundary, C4Diagram, C4Element
from domain.layout_details import GraphEdgeDetail, GraphNodeDetail
from domain.layout_graph import GraphEdgeSpec, GraphNodeSpec, LayoutGraph
from domain.models import Size
from domain.services.transforms.base import (
    ALGORITHM_LAYERED,
    DIRECTION_DOWN,
    DIRECTION_RIGHT,
    GraphTransform,
    build_layout_options,
)

PERSON_SIZE = Size(140.0, 180.0)
SYSTEM_SIZE = Size(160.0, 120.0)
CONTAINER_SIZE = Size(160.0, 120.0)
COMPONENT_SIZE = Size(160.0, 100.0)

ELEMENT_SPACING = 60.0
BOUNDARY_PADDING = 40.0
BOUNDARY_TITLE_HEIGHT = 30.0
LEVEL_SPACING = 80.0
MIN_BOUNDARY_SIZE = Size(300.0, 200.0)

_SIZES_BY_PREFIX = (
    ("Person", PERSON_SIZE),
    ("System", SYSTEM_SIZE),
    ("Container", CONTAINER_SIZE),
    ("Component", COMPONENT_SIZE),
)


def element_size(element: C4Element) -> Size:
    for prefix, size in _SIZES_BY_PREFIX:
        if element.base_type.startswith(prefix):
            return size
    return SYSTEM_SIZE


def boundary_size(children: list[GraphNodeSpec]) -> Size:
    """Square-ish grid estimate of the space a boundary needs for its children."""
    if not children:
        return MIN_BOUNDARY_SIZE
    count = len(children)
    cols = math.ceil(math.sqrt(count))
    rows = math.ceil(count / cols)
    widest = max(child.width for child in children)
    tallest = max(child.height for child in children)
    width = cols * widest + (cols + 1) * ELEMENT_SPACING + 2 * BOUNDARY_PADDING
    height = rows * tallest + (rows + 1) * ELEMENT_SPACING + 2 * BOUNDARY_PADDING + BOUNDARY_TITLE_HEIGHT
    return Size(max(width, MIN_BOUNDARY_SIZE.width), max(height, MIN_BOUNDARY_SIZE.height))


class C4Transform(GraphTransform):
    kind = DiagramKind.C4

    def to_graph(self, model: C4Diagram) -> LayoutGraph:
        nodes = [self._boundary_spec(model, boundary) for boundary in model.boundaries_in(None)]
        nodes.extend(self._element_spec(element) for element in model.elements_in(None))
        edges = []
        for index, rel in enumerate(model.relationships):
            label = rel.label
            if rel.technology:
                label = f"{label or ''} [{rel.technology}]".strip()
            edges.append(
                GraphEdgeSpec(
                    id=f"rel_{index}",
                    source_id=rel.from_id,
                    target_id=rel.to_id,
                    label=label or None,
                    source=rel,
                    detail=GraphEdgeDetail(relation="bidirectional" if rel.bidirectional else rel.rel_type),
                )
            )
        direction = DIRECTION_RIGHT if model.level in {"Component", "Code"} else DIRECTION_DOWN
        options = build_layout_options(
            ALGORITHM_LAYERED,
            direction,
            node_spacing=ELEMENT_SPACING,
            layer_spacing=LEVEL_SPACING,
            edge_node_spacing=25.0,
            edge_edge_spacing=20.0,
            node_placement="NETWORK_SIMPLEX",
            hierarchy_handling="INCLUDE_CHILDREN",
        )
        return self.build_graph(model, nodes, edges, options)

    def _boundary_spec(self, model: C4Diagram, boundary: C4Boundary) -> GraphNodeSpec:
        children = [self._boundary_spec(model, child) for child in model.boundaries_in(boundary.id)]
        children.extend(self._element_spec(element) for element in model.elements_in(boundary.id))
        size = boundary_size(children)
        return GraphNodeSpec(
            id=boundary.id,
            width=size.width,
            height=size.height,
            role="boundary",
            label=boundary.label or boundary.id,
            source=boundary,
            detail=GraphNodeDetail(shape=boundary.boundary_type, container=True),
            padding=BOUNDARY_PADDING,
            header=BOUNDARY_TITLE_HEIGHT,
            children=tuple(children),
        )

    def _element_spec(self, element: C4Element) -> GraphNodeSpec:
        size = element_size(element)
        lines = [line for line in (element.description, element.technology and f"[{element.technology}]") if line]
        classes = ("external",) if element.external else ()
        return GraphNodeSpec(
            id=element.id,
            width=size.width,
            height=size.height,
            role="element",
            label=element.label or element.id,
            source=element,
            detail=GraphNodeDetail(shape=element.base_type, lines=tuple(lines), classes=classes),
        )

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from domain.layout_details import EdgeDetail, NodeDetail
from domain.models import Point

ALGORITHM_KEY = "algorithm"
DIRECTION_KEY = "elk.direction"
NODE_SPACING_KEY = "elk.spacing.nodeNode"
EDGE_NODE_SPACING_KEY = "elk.spacing.edgeNode"
EDGE_EDGE_SPACING_KEY = "elk.spacing.edgeEdge"
LAYER_SPACING_KEY = "elk.layered.spacing.nodeNodeBetweenLayers"
NODE_PLACEMENT_KEY = "elk.layered.nodePlacement.strategy"
MODEL_ORDER_KEY = "elk.layered.considerModelOrder.strategy"
HIERARCHY_KEY = "elk.hierarchyHandling"


@dataclass(frozen=True)
class LayoutOptions:
    algorithm: str = "layered"
    direction: str = "DOWN"
    node_spacing: float = 50.0
    edge_node_spacing: float = 30.0
    edge_edge_spacing: float = 30.0
    layer_spacing: float = 50.0
    node_placement: str | None = "SIMPLE"
    model_order: str | None = "NODES_AND_EDGES"
    hierarchy_handling: str | None = None

    @property
    def horizontal(self) -> bool:
        return self.direction in {"RIGHT", "LEFT"}

    def to_dict(self) -> dict[str, str]:
        options = {
            ALGORITHM_KEY: self.algorithm,
            DIRECTION_KEY: self.direction,
            NODE_SPACING_KEY: _format_number(self.node_spacing),
        }
        if self.algorithm in {"layered", "force", "stress"}:
            options[EDGE_NODE_SPACING_KEY] = _format_number(self.edge_node_spacing)
            options[EDGE_EDGE_SPACING_KEY] = _format_number(self.edge_edge_spacing)
        if self.algorithm == "layered":
            options[LAYER_SPACING_KEY] = _format_number(self.layer_spacing)
            if self.node_placement:
                options[NODE_PLACEMENT_KEY] = self.node_placement
            if self.model_order:
                options[MODEL_ORDER_KEY] = self.model_order
        if self.hierarchy_handling:
            options[HIERARCHY_KEY] = self.hierarchy_handling
        return options


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


@dataclass(frozen=True)
class GraphNodeSpec:
    id: str
    width: float
    height: float
    role: str
    label: str | None = None
    source: Any = None
    detail: NodeDetail | None = None
    position: Point | None = None
    padding: float = 0.0
    header: float = 0.0
    children: tuple[GraphNodeSpec, ...] = ()

    def walk(self) -> list[GraphNodeSpec]:
        specs = [self]
        for child in self.children:
            specs.extend(child.walk())
        return specs


@dataclass(frozen=True)
class GraphEdgeSpec:
    id: str
    source_id: str
    target_id: str
    label: str | None = None
    source: Any = None
    detail: EdgeDetail | None = None


@dataclass(frozen=True)
class LayoutGraph:
    """Dimension-annotated graph handed to a GraphLayoutEngine."""

    kind: str
    nodes: tuple[GraphNodeSpec, ...] = ()
    edges: tuple[GraphEdgeSpec, ...] = ()
    options: LayoutOptions = field(default_factory=LayoutOptions)
    title: str | None = None

    def all_nodes(self) -> list[GraphNodeSpec]:
        specs: list[GraphNodeSpec] = []
        for node in self.nodes:
            specs.extend(node.walk())
        return specs

    def node_ids(self) -> set[str]:
        return {node.id for node in self.all_nodes()}

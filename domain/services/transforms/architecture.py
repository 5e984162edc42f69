from __future__ import annotations

from dataclasses import replace

from domain.diagrams.base import DiagramKind
from domain.diagrams.graph import ArchitectureDiagram, ArchitectureGroup, ArchitectureService
from domain.layout_details import ArchitectureEdgeDetail, GraphNodeDetail
from domain.layout_graph import GraphEdgeSpec, GraphNodeSpec, LayoutGraph
from domain.models import LayoutResult, Point, PositionedEdge, PositionedNode
from domain.services.transforms.base import ALGORITHM_FORCE, DIRECTION_RIGHT, GraphTransform, build_layout_options

SERVICE_WIDTH = 120.0
SERVICE_HEIGHT = 80.0
LABEL_PADDING = 20.0
GROUP_PADDING = 30.0
ICON_SIZE = 24.0
SPACING = 40.0


def side_anchor(node: PositionedNode, side: str) -> Point:
    """Midpoint of the named side: L, R, T or B."""
    if side == "L":
        return Point(node.x, node.y + node.height / 2)
    if side == "T":
        return Point(node.x + node.width / 2, node.y)
    if side == "B":
        return Point(node.x + node.width / 2, node.bottom)
    return Point(node.right, node.y + node.height / 2)


class ArchitectureTransform(GraphTransform):
    """Services nested in groups, placed by a force-directed engine and wired side to side."""

    kind = DiagramKind.ARCHITECTURE

    def to_graph(self, model: ArchitectureDiagram) -> LayoutGraph:
        nodes: list[GraphNodeSpec] = []
        for group in model.groups_in(None):
            spec = self._group_spec(model, group)
            if spec is not None:
                nodes.append(spec)
        nodes.extend(self._service_spec(service) for service in model.services_in(None))
        edges = [
            GraphEdgeSpec(
                id=f"edge_{index}",
                source_id=edge.from_id,
                target_id=edge.to_id,
                label=edge.label,
                source=edge,
                detail=ArchitectureEdgeDetail(from_side=edge.from_side, to_side=edge.to_side),
            )
            for index, edge in enumerate(model.edges)
        ]
        options = build_layout_options(
            ALGORITHM_FORCE,
            DIRECTION_RIGHT,
            node_spacing=SPACING,
            edge_node_spacing=SPACING / 2,
            hierarchy_handling="INCLUDE_CHILDREN",
        )
        return self.build_graph(model, nodes, edges, options)

    def layout(self, model: ArchitectureDiagram) -> LayoutResult:
        result = super().layout(model)
        if not result.edges:
            return result
        placed = {node.id: node for node in result.all_nodes()}
        return replace(result, edges=[self._attach(edge, placed) for edge in result.edges])

    def service_width(self, service: ArchitectureService) -> float:
        return max(self.measure(service.display_label).width + LABEL_PADDING * 2, SERVICE_WIDTH)

    def _group_spec(self, model: ArchitectureDiagram, group: ArchitectureGroup) -> GraphNodeSpec | None:
        children: list[GraphNodeSpec] = []
        for child in model.groups_in(group.id):
            spec = self._group_spec(model, child)
            if spec is not None:
                children.append(spec)
        children.extend(self._service_spec(service) for service in model.services_in(group.id))
        if not children:
            return None
        return GraphNodeSpec(
            id=group.id,
            width=0.0,
            height=0.0,
            role="group",
            label=group.label or group.id,
            source=group,
            detail=GraphNodeDetail(shape="group", classes=(group.icon,) if group.icon else (), container=True),
            padding=GROUP_PADDING,
            header=ICON_SIZE,
            children=tuple(children),
        )

    def _service_spec(self, service: ArchitectureService) -> GraphNodeSpec:
        return GraphNodeSpec(
            id=service.id,
            width=self.service_width(service),
            height=SERVICE_HEIGHT,
            role="service",
            label=service.display_label,
            source=service,
            detail=GraphNodeDetail(shape="service", classes=(service.icon,) if service.icon else ()),
        )

    @staticmethod
    def _attach(edge: PositionedEdge, placed: dict[str, PositionedNode]) -> PositionedEdge:
        detail = edge.detail
        source = placed.get(edge.source_id)
        target = placed.get(edge.target_id)
        if not isinstance(detail, ArchitectureEdgeDetail) or source is None or target is None:
            return edge
        return replace(
            edge,
            start=side_anchor(source, detail.from_side),
            end=side_anchor(target, detail.to_side),
        )

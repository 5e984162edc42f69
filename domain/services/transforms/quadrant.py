from __future__ import annotations

from domain.diagrams.base import DiagramKind
from domain.diagrams.chart import QuadrantDiagram
from domain.layout_details import QuadrantMetadata, QuadrantPointDetail, QuadrantRegionDetail
from domain.models import LayoutResult, Point, PositionedNode
from domain.services.transforms.base import DiagramTransform

CHART_WIDTH = 800.0
CHART_HEIGHT = 600.0
CHART_MARGIN = 80.0
POINT_RADIUS = 6.0


def resolve_quadrant(x: float, y: float) -> int:
    """1 top-right, 2 top-left, 3 bottom-left, 4 bottom-right."""
    if y >= 0.5:
        return 1 if x >= 0.5 else 2
    return 4 if x >= 0.5 else 3


def chart_area() -> tuple[float, float]:
    return CHART_WIDTH - CHART_MARGIN * 2, CHART_HEIGHT - CHART_MARGIN * 2


def map_point(x: float, y: float) -> Point:
    """Unit-square point to canvas coordinates; y grows upward in chart space."""
    width, height = chart_area()
    return Point(CHART_MARGIN + x * width, CHART_MARGIN + (1.0 - y) * height)


def quadrant_origin(quadrant: int) -> Point:
    width, height = chart_area()
    right = quadrant in {1, 4}
    bottom = quadrant in {3, 4}
    return Point(
        CHART_MARGIN + (width / 2 if right else 0.0),
        CHART_MARGIN + (height / 2 if bottom else 0.0),
    )


class QuadrantTransform(DiagramTransform):
    kind = DiagramKind.QUADRANT

    def layout(self, model: QuadrantDiagram) -> LayoutResult:
        width, height = chart_area()
        metadata = QuadrantMetadata(
            chart_width=width,
            chart_height=height,
            margin=CHART_MARGIN,
            x_axis=(model.x_axis_left, model.x_axis_right),
            y_axis=(model.y_axis_bottom, model.y_axis_top),
        )
        has_content = bool(model.points) or any(model.quadrant_labels)
        if not has_content:
            return self.finalize([], [], metadata, model.title)

        nodes: list[PositionedNode] = []
        for quadrant in (1, 2, 3, 4):
            origin = quadrant_origin(quadrant)
            label = model.quadrant_labels[quadrant - 1]
            nodes.append(
                PositionedNode(
                    id=f"quadrant_{quadrant}",
                    x=origin.x,
                    y=origin.y,
                    width=width / 2,
                    height=height / 2,
                    role="quadrant",
                    label=label,
                    detail=QuadrantRegionDetail(quadrant=quadrant, label=label),
                )
            )
        for index, point in enumerate(model.points):
            radius = point.radius or POINT_RADIUS
            center = map_point(point.x, point.y)
            nodes.append(
                PositionedNode(
                    id=f"point_{index}",
                    x=max(center.x - radius, 0.0),
                    y=max(center.y - radius, 0.0),
                    width=radius * 2,
                    height=radius * 2,
                    role="point",
                    label=point.label,
                    source=point,
                    detail=QuadrantPointDetail(
                        quadrant=resolve_quadrant(point.x, point.y),
                        x_value=point.x,
                        y_value=point.y,
                        radius=radius,
                        color=point.color,
                    ),
                )
            )
        return self.finalize(nodes, [], metadata, model.title)

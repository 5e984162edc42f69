from __future__ import annotations

import math

from domain.diagrams.base import DiagramKind
from domain.diagrams.chart import RadarDiagram
from domain.layout_details import RadarAxisDetail, RadarAxisLabelDetail, RadarCurveDetail, RadarGridRing, RadarMetadata
from domain.models import LayoutResult, Point, PositionedEdge, PositionedNode
from domain.services.transforms.base import DiagramTransform

CHART_RADIUS = 200.0
CHART_PADDING = 80.0
LABEL_OFFSET = 30.0
LABEL_FONT_SIZE = 12.0
DEFAULT_MIN = 0.0
DEFAULT_MAX = 100.0


def value_range(model: RadarDiagram) -> tuple[float, float]:
    values = [value for curve in model.curves for value in curve.values.values()]
    low = model.min_value if model.min_value is not None else min(values, default=DEFAULT_MIN)
    high = model.max_value if model.max_value is not None else max(values, default=DEFAULT_MAX)
    if high <= low:
        high = low + 1
    return low, high


def normalize_value(value: float, min_value: float, max_value: float) -> float:
    if max_value == min_value:
        return 0.0
    return min(max((value - min_value) / (max_value - min_value), 0.0), 1.0)


def denormalize_value(normalized: float, min_value: float, max_value: float) -> float:
    return min_value + normalized * (max_value - min_value)


def grid_rings(ticks: int, min_value: float, max_value: float) -> tuple[RadarGridRing, ...]:
    rings = []
    for level in range(ticks):
        fraction = (level + 1) / ticks
        rings.append(
            RadarGridRing(
                radius=CHART_RADIUS * fraction,
                value=denormalize_value(fraction, min_value, max_value),
                fraction=fraction,
            )
        )
    return tuple(rings)


def axis_angle(index: int, count: int) -> float:
    """Degrees, clockwise from 12 o'clock."""
    return index * 360.0 / count - 90.0


def polar_point(center: Point, angle_degrees: float, radius: float) -> Point:
    radians = math.radians(angle_degrees)
    return Point(center.x + math.cos(radians) * radius, center.y + math.sin(radians) * radius)


class RadarTransform(DiagramTransform):
    kind = DiagramKind.RADAR

    def layout(self, model: RadarDiagram) -> LayoutResult:
        center = Point(CHART_RADIUS + CHART_PADDING, CHART_RADIUS + CHART_PADDING)
        min_value, max_value = value_range(model)
        metadata = RadarMetadata(
            center=center,
            radius=CHART_RADIUS,
            min_value=min_value,
            max_value=max_value,
            grid=grid_rings(model.ticks, min_value, max_value),
        )
        count = len(model.axes)
        if count == 0:
            return self.finalize([], [], metadata, model.title)

        angles = [axis_angle(index, count) for index in range(count)]
        nodes: list[PositionedNode] = []
        edges: list[PositionedEdge] = []
        for index, axis in enumerate(model.axes):
            edges.append(
                PositionedEdge(
                    id=f"axis_{axis.id}",
                    source_id="center",
                    target_id=f"label_{axis.id}",
                    start=center,
                    end=polar_point(center, angles[index], CHART_RADIUS),
                    label=axis.display_label,
                    source=axis,
                    detail=RadarAxisDetail(axis_index=index, angle=angles[index]),
                )
            )
            anchor = polar_point(center, angles[index], CHART_RADIUS + LABEL_OFFSET)
            size = self.measure(axis.display_label, LABEL_FONT_SIZE)
            nodes.append(
                PositionedNode(
                    id=f"label_{axis.id}",
                    x=max(anchor.x - size.width / 2, 0.0),
                    y=max(anchor.y - size.height / 2, 0.0),
                    width=size.width,
                    height=size.height,
                    role="axis_label",
                    label=axis.display_label,
                    source=axis,
                    detail=RadarAxisLabelDetail(axis_index=index, angle=angles[index]),
                )
            )

        for curve in model.curves:
            values = tuple(curve.value_for(axis.id) for axis in model.axes)
            radii = tuple(normalize_value(value, min_value, max_value) * CHART_RADIUS for value in values)
            points = tuple(polar_point(center, angle, radius) for angle, radius in zip(angles, radii))
            left = min(point.x for point in points)
            top = min(point.y for point in points)
            nodes.append(
                PositionedNode(
                    id=f"curve_{curve.id}",
                    x=left,
                    y=top,
                    width=max(point.x for point in points) - left,
                    height=max(point.y for point in points) - top,
                    role="curve",
                    label=curve.label or curve.id,
                    source=curve,
                    detail=RadarCurveDetail(points=points, values=values, radii=radii),
                )
            )
        return self.finalize(nodes, edges, metadata, model.title)

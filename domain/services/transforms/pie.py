from __future__ import annotations

import math

from domain.diagrams.base import DiagramKind
from domain.diagrams.chart import PieDiagram
from domain.layout_details import LegendEntryDetail, PieMetadata, PieSliceDetail
from domain.models import LayoutResult, Point, PositionedNode
from domain.services.transforms.base import DiagramTransform

PIE_RADIUS = 150.0
PIE_MARGIN = 40.0
TITLE_HEIGHT = 40.0
LEGEND_GAP = 40.0
LEGEND_SWATCH = 18.0
LEGEND_ROW_HEIGHT = 24.0
LEGEND_FONT_SIZE = 12.0
START_ANGLE = -90.0


def arc_point(center: Point, radius: float, angle_degrees: float) -> Point:
    radians = math.radians(angle_degrees)
    return Point(center.x + radius * math.cos(radians), center.y + radius * math.sin(radians))


class PieTransform(DiagramTransform):
    kind = DiagramKind.PIE

    def layout(self, model: PieDiagram) -> LayoutResult:
        top = PIE_MARGIN + (TITLE_HEIGHT if model.title else 0.0)
        center = Point(PIE_MARGIN + PIE_RADIUS, top + PIE_RADIUS)
        total = model.total_value()
        metadata = PieMetadata(total=total, center=center, radius=PIE_RADIUS, show_data=model.show_data)
        if not model.slices:
            return self.finalize([], [], metadata, model.title)

        nodes: list[PositionedNode] = []
        legend: list[PositionedNode] = []
        legend_x = center.x + PIE_RADIUS + LEGEND_GAP
        legend_y = max(center.y - len(model.slices) * LEGEND_ROW_HEIGHT / 2, PIE_MARGIN)
        cursor = START_ANGLE
        for index, slice_ in enumerate(model.slices):
            share = slice_.value / total if total > 0 else 0.0
            angle = share * 360.0
            start, end = cursor, cursor + angle
            cursor = end
            nodes.append(
                PositionedNode(
                    id=f"slice_{index}",
                    x=center.x - PIE_RADIUS,
                    y=center.y - PIE_RADIUS,
                    width=PIE_RADIUS * 2,
                    height=PIE_RADIUS * 2,
                    role="slice",
                    label=slice_.label,
                    source=slice_,
                    detail=PieSliceDetail(
                        value=slice_.value,
                        percentage=share * 100.0,
                        start_angle=start,
                        end_angle=end,
                        large_arc=angle > 180.0,
                        arc_start=arc_point(center, PIE_RADIUS, start),
                        arc_end=arc_point(center, PIE_RADIUS, end),
                    ),
                )
            )
            text = f"{slice_.label} [{slice_.value:g}]" if model.show_data else slice_.label
            size = self.measure(text, LEGEND_FONT_SIZE)
            legend.append(
                PositionedNode(
                    id=f"legend_{index}",
                    x=legend_x,
                    y=legend_y + index * LEGEND_ROW_HEIGHT,
                    width=LEGEND_SWATCH + 6 + size.width,
                    height=max(LEGEND_SWATCH, size.height),
                    role="legend",
                    label=text,
                    source=slice_,
                    detail=LegendEntryDetail(slice_index=index, value=slice_.value, percentage=share * 100.0),
                )
            )
        return self.finalize(nodes + legend, [], metadata, model.title)

from __future__ import annotations

import logging

from domain.diagrams.base import DiagramKind
from domain.diagrams.chart import XyAxis, XyChartDiagram, XyDataset
from domain.layout_details import SeriesSegmentDetail, XyAxisLayout, XyChartMetadata, XyPointDetail, XyTick
from domain.models import LayoutResult, Point, PositionedEdge, PositionedNode
from domain.services.transforms.base import DiagramTransform

logger = logging.getLogger(__name__)

CHART_WIDTH = 800.0
CHART_HEIGHT = 500.0
MARGIN_TOP = 80.0
MARGIN_RIGHT = 60.0
MARGIN_BOTTOM = 80.0
MARGIN_LEFT = 100.0
POINT_SIZE = 8.0
BAR_GROUP_RATIO = 0.8

DEFAULT_X_RANGE = (0.0, 10.0)
DEFAULT_Y_MAX = 100.0


def plot_area() -> tuple[float, float]:
    return CHART_WIDTH - MARGIN_LEFT - MARGIN_RIGHT, CHART_HEIGHT - MARGIN_TOP - MARGIN_BOTTOM


def normalize(value: float, low: float, high: float) -> float:
    if high == low:
        return 0.0
    return min(max((value - low) / (high - low), 0.0), 1.0)


def x_axis_layout(axis: XyAxis | None, width: float) -> XyAxisLayout:
    """Categories sit at the centres of equal slots; a numeric axis only carries its range."""
    if axis is not None and axis.categorical:
        slot = width / len(axis.categories)
        ticks = tuple(
            XyTick(label=label, position=index * slot + slot / 2) for index, label in enumerate(axis.categories)
        )
        return XyAxisLayout(
            label=axis.label,
            categorical=True,
            min_value=0.0,
            max_value=float(len(axis.categories) - 1),
            ticks=ticks,
        )
    low, high = DEFAULT_X_RANGE
    if axis is not None:
        low = axis.min if axis.min is not None else low
        high = axis.max if axis.max is not None else max(high, low + 1)
    return XyAxisLayout(label=axis.label if axis else None, categorical=False, min_value=low, max_value=high)


def y_axis_layout(axis: XyAxis | None, datasets: list[XyDataset]) -> XyAxisLayout:
    """Unset bounds follow the data; the range always includes zero."""
    values = [value for dataset in datasets for value in dataset.values]
    low = axis.min if axis is not None and axis.min is not None else min([0.0, *values])
    high = axis.max if axis is not None and axis.max is not None else max(values, default=DEFAULT_Y_MAX)
    if high <= low:
        high = low + 1
    return XyAxisLayout(label=axis.label if axis else None, categorical=False, min_value=low, max_value=high)


def slot_positions(x_axis: XyAxisLayout, count: int, slot_width: float) -> list[float | None]:
    """Horizontal offset of each value inside the plot; ``None`` for values past the last category."""
    if x_axis.categorical:
        ticks = x_axis.ticks
        return [ticks[index].position if index < len(ticks) else None for index in range(count)]
    return [index * slot_width + slot_width / 2 for index in range(count)]


class XyChartTransform(DiagramTransform):
    kind = DiagramKind.XY_CHART

    def layout(self, model: XyChartDiagram) -> LayoutResult:
        width, height = plot_area()
        x_axis = x_axis_layout(model.x_axis, width)
        y_axis = y_axis_layout(model.y_axis, model.datasets)
        metadata = XyChartMetadata(
            plot_x=MARGIN_LEFT,
            plot_y=MARGIN_TOP,
            plot_width=width,
            plot_height=height,
            x_axis=x_axis,
            y_axis=y_axis,
        )
        bar_ids = [dataset.id for dataset in model.datasets if dataset.chart_type == "bar"]
        bars = {dataset_id: position for position, dataset_id in enumerate(bar_ids)}
        longest = max((len(dataset.values) for dataset in model.datasets), default=0)
        slot_width = width / max(len(x_axis.ticks) if x_axis.categorical else longest, 1)
        bar_width = slot_width * BAR_GROUP_RATIO / max(len(bars), 1)
        baseline = MARGIN_TOP + height

        nodes: list[PositionedNode] = []
        edges: list[PositionedEdge] = []
        for dataset in model.datasets:
            offsets = slot_positions(x_axis, len(dataset.values), slot_width)
            previous: PositionedNode | None = None
            for index, (value, offset) in enumerate(zip(dataset.values, offsets)):
                if offset is None:
                    logger.debug("Dataset %s: value #%d has no category and is skipped", dataset.id, index)
                    continue
                center = Point(
                    MARGIN_LEFT + offset,
                    baseline - normalize(value, y_axis.min_value, y_axis.max_value) * height,
                )
                detail = XyPointDetail(
                    dataset_id=dataset.id,
                    index=index,
                    value=value,
                    chart_type=dataset.chart_type,
                    color=dataset.color,
                )
                if dataset.chart_type == "bar":
                    group_left = center.x - slot_width * BAR_GROUP_RATIO / 2
                    node = PositionedNode(
                        id=f"{dataset.id}_{index}",
                        x=group_left + bars[dataset.id] * bar_width,
                        y=center.y,
                        width=bar_width,
                        height=baseline - center.y,
                        role="bar",
                        label=dataset.label,
                        source=dataset,
                        detail=detail,
                    )
                else:
                    node = PositionedNode(
                        id=f"{dataset.id}_{index}",
                        x=center.x - POINT_SIZE / 2,
                        y=center.y - POINT_SIZE / 2,
                        width=POINT_SIZE,
                        height=POINT_SIZE,
                        role="point",
                        label=dataset.label,
                        source=dataset,
                        detail=detail,
                    )
                nodes.append(node)
                if dataset.chart_type == "line" and previous is not None:
                    edges.append(
                        PositionedEdge(
                            id=f"{dataset.id}_segment_{index}",
                            source_id=previous.id,
                            target_id=node.id,
                            start=previous.center,
                            end=node.center,
                            detail=SeriesSegmentDetail(dataset_id=dataset.id, index=index),
                        )
                    )
                previous = node
        return self.finalize(nodes, edges, metadata, model.title)

from __future__ import annotations

from typing import Literal

from pydantic import Field

from domain.diagrams.base import DiagramBase, DiagramElement, duplicate_ids


class PieSlice(DiagramElement):
    label: str = Field(..., min_length=1)
    value: float = Field(..., ge=0)


class PieDiagram(DiagramBase):
    kind: Literal["pie"] = "pie"
    show_data: bool = False
    slices: list[PieSlice] = Field(default_factory=list)

    def total_value(self) -> float:
        return sum(slice_.value for slice_ in self.slices)


class QuadrantPoint(DiagramElement):
    label: str = Field(..., min_length=1)
    x: float
    y: float
    radius: float | None = Field(default=None, gt=0)
    color: str | None = None


class QuadrantDiagram(DiagramBase):
    kind: Literal["quadrant"] = "quadrant"
    x_axis_left: str | None = None
    x_axis_right: str | None = None
    y_axis_bottom: str | None = None
    y_axis_top: str | None = None
    quadrant_labels: list[str | None] = Field(default_factory=lambda: [None, None, None, None])
    points: list[QuadrantPoint] = Field(default_factory=list)

    def validation_problems(self) -> list[str]:
        problems: list[str] = []
        if len(self.quadrant_labels) != 4:
            problems.append("Quadrant chart needs exactly four quadrant labels")
        for point in self.points:
            if not (0.0 <= point.x <= 1.0 and 0.0 <= point.y <= 1.0):
                problems.append(f"Point {point.label} lies outside the unit square")
        return problems


class RadarAxis(DiagramElement):
    id: str = Field(..., min_length=1)
    label: str | None = None

    @property
    def display_label(self) -> str:
        return self.label or self.id


class RadarCurve(DiagramElement):
    id: str = Field(..., min_length=1)
    label: str | None = None
    values: dict[str, float] = Field(default_factory=dict)

    def value_for(self, axis_id: str) -> float:
        return self.values.get(axis_id, 0.0)


class RadarDiagram(DiagramBase):
    kind: Literal["radar"] = "radar"
    axes: list[RadarAxis] = Field(default_factory=list)
    curves: list[RadarCurve] = Field(default_factory=list)
    min_value: float | None = None
    max_value: float | None = None
    ticks: int = Field(default=5, ge=1)

    def validation_problems(self) -> list[str]:
        problems = [f"Duplicate axis id: {axis_id}" for axis_id in duplicate_ids(a.id for a in self.axes)]
        problems.extend(f"Duplicate curve id: {curve_id}" for curve_id in duplicate_ids(c.id for c in self.curves))
        return problems


class SankeyNode(DiagramElement):
    id: str = Field(..., min_length=1)
    label: str | None = None


class SankeyFlow(DiagramElement):
    source: str = Field(..., min_length=1)
    target: str = Field(..., min_length=1)
    value: float = Field(..., gt=0)
    label: str | None = None


class SankeyDiagram(DiagramBase):
    kind: Literal["sankey"] = "sankey"
    nodes: list[SankeyNode] = Field(default_factory=list)
    flows: list[SankeyFlow] = Field(default_factory=list)

    def all_node_ids(self) -> list[str]:
        ordered: dict[str, None] = {}
        for flow in self.flows:
            ordered.setdefault(flow.source)
            ordered.setdefault(flow.target)
        for node in self.nodes:
            ordered.setdefault(node.id)
        return list(ordered)

    def label_for(self, node_id: str) -> str:
        for node in self.nodes:
            if node.id == node_id and node.label:
                return node.label
        return node_id

    def validation_problems(self) -> list[str]:
        return [f"Duplicate sankey node id: {node_id}" for node_id in duplicate_ids(n.id for n in self.nodes)]


class XyAxis(DiagramElement):
    """A categorical axis when ``categories`` is set, otherwise a numeric range."""

    label: str | None = None
    categories: list[str] = Field(default_factory=list)
    min: float | None = None
    max: float | None = None

    @property
    def categorical(self) -> bool:
        return bool(self.categories)


class XyDataset(DiagramElement):
    id: str = Field(..., min_length=1)
    label: str | None = None
    chart_type: Literal["line", "bar", "scatter"] = "line"
    values: list[float] = Field(default_factory=list)
    color: str | None = None


class XyChartDiagram(DiagramBase):
    kind: Literal["xy_chart"] = "xy_chart"
    x_axis: XyAxis | None = None
    y_axis: XyAxis | None = None
    datasets: list[XyDataset] = Field(default_factory=list)

    def validation_problems(self) -> list[str]:
        problems = [f"Duplicate dataset id: {item}" for item in duplicate_ids(d.id for d in self.datasets)]
        if self.y_axis is not None and self.y_axis.categorical:
            problems.append("The y axis of an xy chart must be numeric")
        for name, axis in (("x", self.x_axis), ("y", self.y_axis)):
            if axis is not None and axis.min is not None and axis.max is not None and axis.max <= axis.min:
                problems.append(f"The {name} axis range is empty ({axis.min} to {axis.max})")
        return problems

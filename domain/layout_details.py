from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Union

from domain.models import Point

# Node detail records.


@dataclass(frozen=True)
class GraphNodeDetail:
    shape: str
    lines: tuple[str, ...] = ()
    classes: tuple[str, ...] = ()
    container: bool = False


@dataclass(frozen=True)
class MindmapNodeDetail:
    depth: int
    shape: str
    icon: str | None = None


@dataclass(frozen=True)
class GanttTaskDetail:
    section: str
    start: date
    end: date
    done: bool = False
    active: bool = False
    critical: bool = False
    milestone: bool = False


@dataclass(frozen=True)
class SectionBandDetail:
    name: str
    item_count: int


@dataclass(frozen=True)
class RadarCurveDetail:
    points: tuple[Point, ...]
    values: tuple[float, ...]
    radii: tuple[float, ...]


@dataclass(frozen=True)
class RadarAxisLabelDetail:
    axis_index: int
    angle: float


@dataclass(frozen=True)
class PieSliceDetail:
    value: float
    percentage: float
    start_angle: float
    end_angle: float
    large_arc: bool
    arc_start: Point
    arc_end: Point

    @property
    def angle(self) -> float:
        return self.end_angle - self.start_angle


@dataclass(frozen=True)
class LegendEntryDetail:
    slice_index: int
    value: float
    percentage: float


@dataclass(frozen=True)
class QuadrantRegionDetail:
    quadrant: int
    label: str | None = None


@dataclass(frozen=True)
class QuadrantPointDetail:
    quadrant: int
    x_value: float
    y_value: float
    radius: float
    color: str | None = None


@dataclass(frozen=True)
class SankeyNodeDetail:
    layer: int
    total_flow: float


@dataclass(frozen=True)
class TimelineEventDetail:
    numeric_time: int | None
    percent: float
    section: str | None = None
    descriptions: tuple[str, ...] = ()


@dataclass(frozen=True)
class TreemapCellDetail:
    value: float
    depth: int
    css_class: str | None = None


@dataclass(frozen=True)
class BlockDetail:
    block_type: str
    shape: str
    span: int
    row: int
    column: int


@dataclass(frozen=True)
class KanbanCardDetail:
    column_id: str
    metadata: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class KanbanColumnDetail:
    card_count: int


@dataclass(frozen=True)
class PacketSegmentDetail:
    bit_start: int
    bit_end: int
    row: int
    continuation: bool
    final: bool


@dataclass(frozen=True)
class JourneyTaskDetail:
    section: str
    score: int
    actors: tuple[str, ...] = ()


@dataclass(frozen=True)
class RequirementNodeDetail:
    node_type: str
    level: int
    requirement_id: str | None = None
    risk: str | None = None
    verify_method: str | None = None
    docref: str | None = None


@dataclass(frozen=True)
class GitCommitDetail:
    branch: str
    lane: int
    commit_type: str
    color: str
    tag: str | None = None
    parent_ids: tuple[str, ...] = ()
    is_merge: bool = False
    is_cherry_pick: bool = False


@dataclass(frozen=True)
class XyPointDetail:
    dataset_id: str
    index: int
    value: float
    chart_type: str
    color: str | None = None


@dataclass(frozen=True)
class MessageDetail:
    severity: str


NodeDetail = Union[
    GraphNodeDetail,
    MindmapNodeDetail,
    GanttTaskDetail,
    SectionBandDetail,
    RadarCurveDetail,
    RadarAxisLabelDetail,
    PieSliceDetail,
    LegendEntryDetail,
    QuadrantRegionDetail,
    QuadrantPointDetail,
    SankeyNodeDetail,
    TimelineEventDetail,
    TreemapCellDetail,
    BlockDetail,
    KanbanCardDetail,
    KanbanColumnDetail,
    PacketSegmentDetail,
    JourneyTaskDetail,
    RequirementNodeDetail,
    GitCommitDetail,
    XyPointDetail,
    MessageDetail,
]

# Edge detail records.


@dataclass(frozen=True)
class GraphEdgeDetail:
    relation: str
    source_label: str | None = None
    target_label: str | None = None


@dataclass(frozen=True)
class TreeConnectionDetail:
    depth: int


@dataclass(frozen=True)
class RadarAxisDetail:
    axis_index: int
    angle: float


@dataclass(frozen=True)
class SankeyFlowDetail:
    value: float
    stroke_width: float
    control_1: Point
    control_2: Point


@dataclass(frozen=True)
class ArchitectureEdgeDetail:
    from_side: str
    to_side: str


@dataclass(frozen=True)
class GitConnectionDetail:
    connection_type: str
    from_branch: str
    to_branch: str


@dataclass(frozen=True)
class SeriesSegmentDetail:
    dataset_id: str
    index: int


EdgeDetail = Union[
    GraphEdgeDetail,
    TreeConnectionDetail,
    RadarAxisDetail,
    SankeyFlowDetail,
    ArchitectureEdgeDetail,
    GitConnectionDetail,
    SeriesSegmentDetail,
]

# Diagram-level metadata records.


@dataclass(frozen=True)
class GraphMetadata:
    engine: str
    direction: str
    layout_options: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SequenceMetadata:
    engine: str
    direction: str
    lifeline_length: float
    note_count: int = 0
    layout_options: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class MindmapMetadata:
    content_width: float
    content_height: float
    max_depth: int


@dataclass(frozen=True)
class GanttMetadata:
    min_date: date | None
    max_date: date | None
    rounds_used: int
    unresolved_task_ids: tuple[str, ...] = ()
    day_width: float = 0.0
    axis_format: str | None = None
    excludes: tuple[str, ...] = ()


@dataclass(frozen=True)
class RadarGridRing:
    radius: float
    value: float
    fraction: float


@dataclass(frozen=True)
class RadarMetadata:
    center: Point
    radius: float
    min_value: float
    max_value: float
    grid: tuple[RadarGridRing, ...] = ()


@dataclass(frozen=True)
class PieMetadata:
    total: float
    center: Point
    radius: float
    show_data: bool = False


@dataclass(frozen=True)
class QuadrantMetadata:
    chart_width: float
    chart_height: float
    margin: float
    x_axis: tuple[str | None, str | None] = (None, None)
    y_axis: tuple[str | None, str | None] = (None, None)


@dataclass(frozen=True)
class SankeyMetadata:
    layer_count: int
    max_flow: float


@dataclass(frozen=True)
class TimelineMetadata:
    min_time: int | None
    max_time: int | None
    axis_x: float
    axis_width: float


@dataclass(frozen=True)
class TreemapMetadata:
    total_value: float


@dataclass(frozen=True)
class BlockMetadata:
    columns: int
    rows: int
    cell_width: float
    cell_height: float


@dataclass(frozen=True)
class KanbanMetadata:
    column_count: int
    card_count: int


@dataclass(frozen=True)
class PacketMetadata:
    bits_per_row: int
    rows: int


@dataclass(frozen=True)
class RequirementMetadata:
    level_count: int


@dataclass(frozen=True)
class GitBranchLane:
    name: str
    lane: int
    color: str


@dataclass(frozen=True)
class GitGraphMetadata:
    orientation: str
    branches: tuple[GitBranchLane, ...] = ()


@dataclass(frozen=True)
class XyTick:
    label: str
    position: float


@dataclass(frozen=True)
class XyAxisLayout:
    label: str | None
    categorical: bool
    min_value: float
    max_value: float
    ticks: tuple[XyTick, ...] = ()


@dataclass(frozen=True)
class XyChartMetadata:
    plot_x: float
    plot_y: float
    plot_width: float
    plot_height: float
    x_axis: XyAxisLayout
    y_axis: XyAxisLayout


@dataclass(frozen=True)
class MessageMetadata:
    severity: str
    text: str | None = None


LayoutMetadata = Union[
    GraphMetadata,
    SequenceMetadata,
    MindmapMetadata,
    GanttMetadata,
    RadarMetadata,
    PieMetadata,
    QuadrantMetadata,
    SankeyMetadata,
    TimelineMetadata,
    TreemapMetadata,
    BlockMetadata,
    KanbanMetadata,
    PacketMetadata,
    RequirementMetadata,
    GitGraphMetadata,
    XyChartMetadata,
    MessageMetadata,
]

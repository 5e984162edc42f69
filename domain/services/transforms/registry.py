from __future__ import annotations

from domain.diagrams.base import DiagramKind
from domain.errors import UnsupportedDiagramKindError
from domain.models import CanvasDefaults
from domain.ports.layout import GraphLayoutEngine
from domain.ports.text import TextMeasurer
from domain.services.gantt_schedule import DEFAULT_ROUND_CAP
from domain.services.transforms.architecture import ArchitectureTransform
from domain.services.transforms.base import DEFAULT_FONT_SIZE, DiagramTransform, GraphTransform
from domain.services.transforms.block import BlockTransform
from domain.services.transforms.c4 import C4Transform
from domain.services.transforms.class_diagram import ClassDiagramTransform
from domain.services.transforms.er_diagram import ErDiagramTransform
from domain.services.transforms.flowchart import FlowchartTransform
from domain.services.transforms.gantt import GanttTransform
from domain.services.transforms.git_graph import GitGraphTransform
from domain.services.transforms.kanban import KanbanTransform
from domain.services.transforms.message import ErrorTransform, InfoTransform
from domain.services.transforms.mindmap import MindmapTransform
from domain.services.transforms.packet import PacketTransform
from domain.services.transforms.pie import PieTransform
from domain.services.transforms.quadrant import QuadrantTransform
from domain.services.transforms.radar import RadarTransform
from domain.services.transforms.requirement import RequirementTransform
from domain.services.transforms.sankey import SankeyTransform
from domain.services.transforms.sequence import SequenceTransform
from domain.services.transforms.state_diagram import StateDiagramTransform
from domain.services.transforms.timeline import TimelineTransform
from domain.services.transforms.treemap import TreemapTransform
from domain.services.transforms.user_journey import UserJourneyTransform
from domain.services.transforms.xy_chart import XyChartTransform

GRAPH_TRANSFORMS: tuple[type[GraphTransform], ...] = (
    FlowchartTransform,
    SequenceTransform,
    ClassDiagramTransform,
    StateDiagramTransform,
    ErDiagramTransform,
    C4Transform,
    UserJourneyTransform,
    ArchitectureTransform,
)

STANDALONE_TRANSFORMS: tuple[type[DiagramTransform], ...] = (
    MindmapTransform,
    RadarTransform,
    PieTransform,
    QuadrantTransform,
    SankeyTransform,
    TimelineTransform,
    TreemapTransform,
    BlockTransform,
    KanbanTransform,
    PacketTransform,
    RequirementTransform,
    GitGraphTransform,
    XyChartTransform,
    ErrorTransform,
    InfoTransform,
)


def build_transform_table(
    layout_engine: GraphLayoutEngine,
    text_measurer: TextMeasurer | None = None,
    canvas: CanvasDefaults | None = None,
    gantt_round_cap: int = DEFAULT_ROUND_CAP,
    font_size: float = DEFAULT_FONT_SIZE,
) -> dict[DiagramKind, DiagramTransform]:
    """One transform per DiagramKind; a kind without a strategy is a configuration error."""
    table: dict[DiagramKind, DiagramTransform] = {}
    for graph_cls in GRAPH_TRANSFORMS:
        table[graph_cls.kind] = graph_cls(
            layout_engine,
            canvas=canvas,
            text_measurer=text_measurer,
            font_size=font_size,
        )
    for transform_cls in STANDALONE_TRANSFORMS:
        table[transform_cls.kind] = transform_cls(canvas=canvas, text_measurer=text_measurer, font_size=font_size)
    table[DiagramKind.GANTT] = GanttTransform(
        canvas=canvas,
        text_measurer=text_measurer,
        round_cap=gantt_round_cap,
        font_size=font_size,
    )
    missing = [kind for kind in DiagramKind if kind not in table]
    if missing:
        raise UnsupportedDiagramKindError(missing[0])
    return table


def transform_for(table: dict[DiagramKind, DiagramTransform], kind: DiagramKind | str) -> DiagramTransform:
    try:
        return table[DiagramKind(kind)]
    except (KeyError, ValueError) as exc:
        raise UnsupportedDiagramKindError(kind) from exc

from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import Field, TypeAdapter

from domain.diagrams.base import DiagramKind
from domain.diagrams.board import BlockDiagram, KanbanDiagram, PacketDiagram
from domain.diagrams.chart import PieDiagram, QuadrantDiagram, RadarDiagram, SankeyDiagram, XyChartDiagram
from domain.diagrams.graph import (
    ArchitectureDiagram,
    C4Diagram,
    ClassDiagram,
    ErDiagram,
    FlowchartDiagram,
    RequirementDiagram,
    SequenceDiagram,
    StateDiagram,
    UserJourneyDiagram,
)
from domain.diagrams.history import GitGraphDiagram
from domain.diagrams.message import ErrorDiagram, InfoDiagram
from domain.diagrams.schedule import GanttDiagram, TimelineDiagram
from domain.diagrams.tree import MindmapDiagram, TreemapDiagram

DiagramModel = Annotated[
    Union[
        FlowchartDiagram,
        SequenceDiagram,
        ClassDiagram,
        StateDiagram,
        ErDiagram,
        C4Diagram,
        UserJourneyDiagram,
        MindmapDiagram,
        GanttDiagram,
        RadarDiagram,
        PieDiagram,
        QuadrantDiagram,
        SankeyDiagram,
        TimelineDiagram,
        TreemapDiagram,
        BlockDiagram,
        KanbanDiagram,
        PacketDiagram,
        ArchitectureDiagram,
        RequirementDiagram,
        GitGraphDiagram,
        XyChartDiagram,
        ErrorDiagram,
        InfoDiagram,
    ],
    Field(discriminator="kind"),
]

DIAGRAM_MODEL_ADAPTER: TypeAdapter[DiagramModel] = TypeAdapter(DiagramModel)

MODEL_BY_KIND: dict[DiagramKind, type] = {
    DiagramKind.FLOWCHART: FlowchartDiagram,
    DiagramKind.SEQUENCE: SequenceDiagram,
    DiagramKind.CLASS: ClassDiagram,
    DiagramKind.STATE: StateDiagram,
    DiagramKind.ER: ErDiagram,
    DiagramKind.C4: C4Diagram,
    DiagramKind.USER_JOURNEY: UserJourneyDiagram,
    DiagramKind.MINDMAP: MindmapDiagram,
    DiagramKind.GANTT: GanttDiagram,
    DiagramKind.RADAR: RadarDiagram,
    DiagramKind.PIE: PieDiagram,
    DiagramKind.QUADRANT: QuadrantDiagram,
    DiagramKind.SANKEY: SankeyDiagram,
    DiagramKind.TIMELINE: TimelineDiagram,
    DiagramKind.TREEMAP: TreemapDiagram,
    DiagramKind.BLOCK: BlockDiagram,
    DiagramKind.KANBAN: KanbanDiagram,
    DiagramKind.PACKET: PacketDiagram,
    DiagramKind.ARCHITECTURE: ArchitectureDiagram,
    DiagramKind.REQUIREMENT: RequirementDiagram,
    DiagramKind.GIT_GRAPH: GitGraphDiagram,
    DiagramKind.XY_CHART: XyChartDiagram,
    DiagramKind.ERROR: ErrorDiagram,
    DiagramKind.INFO: InfoDiagram,
}


def parse_diagram(payload: Any) -> DiagramModel:
    return DIAGRAM_MODEL_ADAPTER.validate_python(payload)


def empty_diagram(kind: DiagramKind) -> DiagramModel:
    return MODEL_BY_KIND[kind]()

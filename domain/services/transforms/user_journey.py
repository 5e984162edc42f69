from __future__ import annotations

from domain.diagrams.base import DiagramKind
from domain.diagrams.graph import JourneyTask, UserJourneyDiagram
from domain.layout_details import GraphEdgeDetail, JourneyTaskDetail
from domain.layout_graph import GraphEdgeSpec, GraphNodeSpec, LayoutGraph
from domain.models import Size
from domain.services.transforms.base import (
    ALGORITHM_LAYERED,
    DIRECTION_RIGHT,
    GraphTransform,
    build_layout_options,
)

MIN_TASK_WIDTH = 120.0
TASK_HEIGHT = 80.0
TASK_PADDING = 10.0
TASK_SPACING = 60.0


class UserJourneyTransform(GraphTransform):
    kind = DiagramKind.USER_JOURNEY

    def to_graph(self, model: UserJourneyDiagram) -> LayoutGraph:
        nodes = []
        for index, (section, task) in enumerate(model.all_tasks()):
            size = self.task_size(task)
            nodes.append(
                GraphNodeSpec(
                    id=f"task_{index}",
                    width=size.width,
                    height=size.height,
                    role="task",
                    label=task.name,
                    source=task,
                    detail=JourneyTaskDetail(section=section.name, score=task.score, actors=tuple(task.actors)),
                )
            )
        # Tasks follow each other in declaration order.
        edges = [
            GraphEdgeSpec(
                id=f"flow_{index}",
                source_id=f"task_{index}",
                target_id=f"task_{index + 1}",
                detail=GraphEdgeDetail(relation="sequence"),
            )
            for index in range(len(nodes) - 1)
        ]
        options = build_layout_options(
            ALGORITHM_LAYERED,
            DIRECTION_RIGHT,
            node_spacing=TASK_SPACING,
            layer_spacing=TASK_SPACING,
            edge_node_spacing=30.0,
            edge_edge_spacing=20.0,
            hierarchy_handling="INCLUDE_CHILDREN",
        )
        return self.build_graph(model, nodes, edges, options)

    def task_size(self, task: JourneyTask) -> Size:
        widest = max(
            MIN_TASK_WIDTH,
            self.measure(task.name, self.font_size + 2).width,
            self.measure(", ".join(task.actors)).width,
        )
        return Size(widest + TASK_PADDING * 2, TASK_HEIGHT)

from __future__ import annotations

from domain.diagrams.base import DiagramKind
from domain.diagrams.graph import StateDiagram, StateNode
from domain.layout_details import GraphEdgeDetail, GraphNodeDetail
from domain.layout_graph import GraphEdgeSpec, GraphNodeSpec, LayoutGraph
from domain.models import Size
from domain.services.transforms.base import (
    ALGORITHM_LAYERED,
    GraphTransform,
    build_layout_options,
    map_direction,
)

TERMINAL_SIZE = Size(30.0, 30.0)
FORK_JOIN_SIZE = Size(100.0, 10.0)
MIN_STATE_SIZE = Size(100.0, 50.0)


class StateDiagramTransform(GraphTransform):
    kind = DiagramKind.STATE

    def to_graph(self, model: StateDiagram) -> LayoutGraph:
        nodes = []
        for state in model.states:
            size = self.state_size(state)
            lines = (state.description,) if state.description else ()
            nodes.append(
                GraphNodeSpec(
                    id=state.id,
                    width=size.width,
                    height=size.height,
                    role=state.state_type,
                    label=state.label or state.id,
                    source=state,
                    detail=GraphNodeDetail(shape=state.state_type, lines=lines),
                )
            )
        edges = [
            GraphEdgeSpec(
                id=f"{transition.from_id}_to_{transition.to_id}_{index}",
                source_id=transition.from_id,
                target_id=transition.to_id,
                label=transition.label or None,
                source=transition,
                detail=GraphEdgeDetail(relation="transition"),
            )
            for index, transition in enumerate(model.transitions)
        ]
        options = build_layout_options(
            ALGORITHM_LAYERED,
            map_direction(model.direction),
            node_spacing=60.0,
            layer_spacing=60.0,
            edge_node_spacing=40.0,
            edge_edge_spacing=30.0,
            node_placement="SIMPLE",
        )
        return self.build_graph(model, nodes, edges, options)

    def state_size(self, state: StateNode) -> Size:
        if state.state_type in {"start", "end"}:
            return TERMINAL_SIZE
        if state.state_type in {"fork", "join"}:
            return FORK_JOIN_SIZE
        label = self.measure(state.label or state.id)
        if state.state_type == "choice":
            side = max(label.width, label.height) + 40
            return Size(side, side)
        width = label.width + 40
        height = label.height + 30
        if state.description:
            description = self.measure(state.description, self.font_size - 2)
            height += description.height + 10
            width = max(width, description.width + 40)
        return Size(max(width, MIN_STATE_SIZE.width), max(height, MIN_STATE_SIZE.height))

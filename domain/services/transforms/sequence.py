from __future__ import annotations

from domain.diagrams.base import DiagramKind
from domain.diagrams.graph import SequenceDiagram
from domain.layout_details import GraphEdgeDetail, GraphNodeDetail, SequenceMetadata
from domain.layout_graph import GraphEdgeSpec, GraphNodeSpec, LayoutGraph
from domain.services.transforms.base import (
    ALGORITHM_LAYERED,
    DIRECTION_DOWN,
    GraphTransform,
    build_layout_options,
)

PARTICIPANT_WIDTH = 120.0
PARTICIPANT_HEIGHT = 40.0
PARTICIPANT_SPACING = 150.0
MESSAGE_SPACING = 60.0
NOTE_SPACING = 30.0


def lifeline_length(model: SequenceDiagram) -> float:
    return len(model.messages) * MESSAGE_SPACING + len(model.notes) * NOTE_SPACING


class SequenceTransform(GraphTransform):
    kind = DiagramKind.SEQUENCE

    def to_graph(self, model: SequenceDiagram) -> LayoutGraph:
        nodes = [
            GraphNodeSpec(
                id=participant.id,
                width=PARTICIPANT_WIDTH,
                height=PARTICIPANT_HEIGHT,
                role="participant",
                label=participant.display_label,
                source=participant,
                detail=GraphNodeDetail(shape=participant.actor_type),
            )
            for participant in model.participants
        ]
        edges = [
            GraphEdgeSpec(
                id=f"msg_{index}",
                source_id=message.from_id,
                target_id=message.to_id,
                label=message.text or None,
                source=message,
                detail=GraphEdgeDetail(relation=message.arrow_type),
            )
            for index, message in enumerate(model.messages)
        ]
        options = build_layout_options(
            ALGORITHM_LAYERED,
            DIRECTION_DOWN,
            node_spacing=PARTICIPANT_SPACING,
            layer_spacing=MESSAGE_SPACING,
            edge_node_spacing=20.0,
            edge_edge_spacing=15.0,
        )
        return self.build_graph(model, nodes, edges, options)

    def metadata_for(self, model: SequenceDiagram, graph: LayoutGraph) -> SequenceMetadata:
        return SequenceMetadata(
            engine=self.layout_engine.name,
            direction=graph.options.direction,
            lifeline_length=lifeline_length(model),
            note_count=len(model.notes),
            layout_options=graph.options.to_dict(),
        )


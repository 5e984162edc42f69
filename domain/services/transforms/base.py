from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import replace
from typing import Any, ClassVar

from domain.diagrams.base import DiagramKind
from domain.errors import InvalidDiagramError
from domain.layout_details import GraphMetadata, LayoutMetadata
from domain.layout_graph import GraphEdgeSpec, GraphNodeSpec, LayoutGraph, LayoutOptions
from domain.models import CanvasDefaults, LayoutResult, PositionedEdge, PositionedNode, Size, content_bounds
from domain.ports.layout import GraphLayoutEngine
from domain.ports.text import TextMeasurer

logger = logging.getLogger(__name__)

DEFAULT_FONT_SIZE = 14.0

ALGORITHM_LAYERED = "layered"
ALGORITHM_FORCE = "force"
ALGORITHM_STRESS = "stress"

DIRECTION_DOWN = "DOWN"
DIRECTION_UP = "UP"
DIRECTION_LEFT = "LEFT"
DIRECTION_RIGHT = "RIGHT"

_DIRECTIONS = {
    "TD": DIRECTION_DOWN,
    "TB": DIRECTION_DOWN,
    "BT": DIRECTION_UP,
    "LR": DIRECTION_RIGHT,
    "RL": DIRECTION_LEFT,
}

# (left/right, top/bottom) padding around a measured label.
_SHAPE_PADDING = {
    "rect": (15.0, 10.0),
    "circle": (15.0, 15.0),
    "diamond": (20.0, 20.0),
}
_SHAPE_CLASSES = {
    "rect": "rect",
    "subroutine": "rect",
    "circle": "circle",
    "double_circle": "circle",
    "rhombus": "diamond",
    "hexagon": "diamond",
}


def map_direction(direction: str | None) -> str:
    return _DIRECTIONS.get((direction or "").upper(), DIRECTION_DOWN)


def build_layout_options(
    algorithm: str = ALGORITHM_LAYERED,
    direction: str = DIRECTION_DOWN,
    **overrides: Any,
) -> LayoutOptions:
    if algorithm == ALGORITHM_LAYERED:
        options = LayoutOptions(algorithm=algorithm, direction=direction)
    elif algorithm in {ALGORITHM_FORCE, ALGORITHM_STRESS}:
        options = LayoutOptions(
            algorithm=algorithm,
            direction=direction,
            node_spacing=75.0,
            node_placement=None,
            model_order=None,
        )
    else:
        options = LayoutOptions(algorithm=algorithm, direction=direction, node_placement=None, model_order=None)
    return replace(options, **overrides) if overrides else options


def shape_class(shape: str) -> str:
    return _SHAPE_CLASSES.get(shape, "rect")


def padded_size(content: Size, shape: str) -> Size:
    pad_x, pad_y = _SHAPE_PADDING.get(shape_class(shape), (10.0, 10.0))
    return Size(content.width + pad_x * 2, content.height + pad_y * 2)


def ensure_valid(model: Any, kind: DiagramKind) -> None:
    if model is None:
        msg = f"No {kind.value} diagram model given"
        raise InvalidDiagramError(msg)
    model_kind = getattr(model, "diagram_kind", None)
    if model_kind != kind:
        msg = f"Expected a {kind.value} diagram, got {model_kind}"
        raise InvalidDiagramError(msg)
    problems = model.validation_problems()
    if problems:
        msg = f"Invalid {kind.value} diagram"
        raise InvalidDiagramError(msg, problems)


def finalize_layout(
    kind: DiagramKind,
    nodes: list[PositionedNode],
    edges: list[PositionedEdge],
    canvas: CanvasDefaults,
    metadata: LayoutMetadata | None = None,
    title: str | None = None,
) -> LayoutResult:
    bounds = content_bounds(nodes, edges)
    width = bounds.right + canvas.padding if nodes or edges else 0.0
    height = bounds.bottom + canvas.padding if nodes or edges else 0.0
    return LayoutResult(
        kind=kind.value,
        nodes=nodes,
        edges=edges,
        width=max(width, canvas.min_width),
        height=max(height, canvas.min_height),
        metadata=metadata,
        title=title,
    )


class DiagramTransform(ABC):
    kind: ClassVar[DiagramKind]

    def __init__(
        self,
        canvas: CanvasDefaults | None = None,
        text_measurer: TextMeasurer | None = None,
        font_size: float = DEFAULT_FONT_SIZE,
    ) -> None:
        self.canvas = canvas or CanvasDefaults()
        self.text_measurer = text_measurer
        self.font_size = font_size

    def transform(self, model: Any) -> LayoutResult:
        ensure_valid(model, self.kind)
        return self.layout(model)

    @abstractmethod
    def layout(self, model: Any) -> LayoutResult:
        ...

    def finalize(
        self,
        nodes: list[PositionedNode],
        edges: list[PositionedEdge],
        metadata: LayoutMetadata | None = None,
        title: str | None = None,
    ) -> LayoutResult:
        return finalize_layout(self.kind, nodes, edges, self.canvas, metadata, title)

    def measure(self, text: str, font_size: float | None = None) -> Size:
        size = font_size or self.font_size
        if self.text_measurer is None:
            return Size(len(text) * 0.5 * size, size)
        return self.text_measurer.measure(text, size)


class GraphTransform(DiagramTransform):
    """Graph-shaped kinds: build a LayoutGraph and hand it to the layout engine."""

    def __init__(
        self,
        layout_engine: GraphLayoutEngine,
        canvas: CanvasDefaults | None = None,
        text_measurer: TextMeasurer | None = None,
        font_size: float = DEFAULT_FONT_SIZE,
    ) -> None:
        super().__init__(canvas=canvas, text_measurer=text_measurer, font_size=font_size)
        self.layout_engine = layout_engine

    @abstractmethod
    def to_graph(self, model: Any) -> LayoutGraph:
        ...

    def metadata_for(self, model: Any, graph: LayoutGraph) -> LayoutMetadata:
        return GraphMetadata(
            engine=self.layout_engine.name,
            direction=graph.options.direction,
            layout_options=graph.options.to_dict(),
        )

    def layout(self, model: Any) -> LayoutResult:
        graph = self.to_graph(model)
        metadata = self.metadata_for(model, graph)
        if not graph.nodes:
            return self.finalize([], [], metadata, model.title)
        placed = self.layout_engine.layout(graph)
        return self.finalize(placed.nodes, placed.edges, metadata, model.title)

    def build_graph(
        self,
        model: Any,
        nodes: Iterable[GraphNodeSpec],
        edges: Iterable[GraphEdgeSpec],
        options: LayoutOptions,
    ) -> LayoutGraph:
        node_specs = tuple(nodes)
        known = {spec.id for node in node_specs for spec in node.walk()}
        return LayoutGraph(
            kind=self.kind.value,
            nodes=node_specs,
            edges=tuple(keep_resolvable_edges(edges, known)),
            options=options,
            title=model.title,
        )


def keep_resolvable_edges(edges: Iterable[GraphEdgeSpec], known_ids: set[str]) -> list[GraphEdgeSpec]:
    kept: list[GraphEdgeSpec] = []
    for edge in edges:
        if edge.source_id not in known_ids or edge.target_id not in known_ids:
            logger.debug(
                "Skipping edge %s: unknown endpoint %s -> %s", edge.id, edge.source_id, edge.target_id
            )
            continue
        kept.append(edge)
    return kept

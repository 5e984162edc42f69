from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence

from domain.layout_graph import GraphEdgeSpec, GraphNodeSpec, LayoutGraph
from domain.models import (
    CanvasDefaults,
    LayoutResult,
    Point,
    PositionedEdge,
    PositionedNode,
    Size,
    content_bounds,
)
from domain.ports.layout import GraphLayoutEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridLayoutConfig:
    columns: int = 3
    min_cell_width: float = 250.0
    min_cell_height: float = 200.0
    gap: float = 50.0
    origin: Point = Point(20.0, 20.0)


@dataclass(frozen=True)
class GridPitch:
    x: float
    y: float


class GridFallbackLayoutEngine(GraphLayoutEngine):
    """Naive deterministic placement: nodes without a position fill a fixed-width grid.

    Pitches always exceed the largest sibling, so siblings never overlap. Containers
    grow to fit their children, which are placed in absolute coordinates.
    """

    name = "grid"

    def __init__(self, config: GridLayoutConfig | None = None, canvas: CanvasDefaults | None = None) -> None:
        self.config = config or GridLayoutConfig()
        self.canvas = canvas or CanvasDefaults()

    def layout(self, graph: LayoutGraph) -> LayoutResult:
        sizes: Dict[str, Size] = {}
        for node in graph.nodes:
            self.measure(node, sizes)
        origin = self.config.origin
        nodes = self.place_siblings(graph.nodes, origin.x, origin.y, sizes)
        placed: Dict[str, PositionedNode] = {}
        for node in nodes:
            for item in node.walk():
                placed[item.id] = item
        edges = self.route_edges(graph.edges, placed)

        bounds = content_bounds(nodes, edges)
        return LayoutResult(
            kind=graph.kind,
            nodes=nodes,
            edges=edges,
            width=max(bounds.right + self.canvas.padding, self.canvas.min_width),
            height=max(bounds.bottom + self.canvas.padding, self.canvas.min_height),
            title=graph.title,
        )

    def pitch(self, sizes: Sequence[Size]) -> GridPitch:
        widest = max((size.width for size in sizes), default=0.0)
        tallest = max((size.height for size in sizes), default=0.0)
        return GridPitch(
            x=max(self.config.min_cell_width, widest + self.config.gap),
            y=max(self.config.min_cell_height, tallest + self.config.gap),
        )

    def cell(self, index: int) -> tuple[int, int]:
        return index % self.config.columns, index // self.config.columns

    def measure(self, spec: GraphNodeSpec, sizes: Dict[str, Size]) -> Size:
        if not spec.children:
            size = Size(spec.width, spec.height)
            sizes[spec.id] = size
            return size
        child_sizes = [self.measure(child, sizes) for child in spec.children]
        pitch = self.pitch(child_sizes)
        extent_w = 0.0
        extent_h = 0.0
        for index, (child, size) in enumerate(zip(spec.children, child_sizes)):
            if child.position is not None:
                left, top = child.position.x, child.position.y
            else:
                col, row = self.cell(index)
                left, top = col * pitch.x, row * pitch.y
            extent_w = max(extent_w, left + size.width)
            extent_h = max(extent_h, top + size.height)
        size = Size(
            max(spec.width, extent_w + spec.padding * 2),
            max(spec.height, spec.header + extent_h + spec.padding * 2),
        )
        sizes[spec.id] = size
        return size

    def place_siblings(
        self,
        specs: Sequence[GraphNodeSpec],
        origin_x: float,
        origin_y: float,
        sizes: Dict[str, Size],
    ) -> List[PositionedNode]:
        pitch = self.pitch([sizes[spec.id] for spec in specs])
        placed: List[PositionedNode] = []
        for index, spec in enumerate(specs):
            if spec.position is not None:
                x, y = origin_x + spec.position.x, origin_y + spec.position.y
            else:
                col, row = self.cell(index)
                x, y = origin_x + col * pitch.x, origin_y + row * pitch.y
            size = sizes[spec.id]
            children = self.place_siblings(
                spec.children,
                x + spec.padding,
                y + spec.header + spec.padding,
                sizes,
            )
            placed.append(
                PositionedNode(
                    id=spec.id,
                    x=x,
                    y=y,
                    width=size.width,
                    height=size.height,
                    role=spec.role,
                    label=spec.label,
                    source=spec.source,
                    detail=spec.detail,
                    children=tuple(children),
                )
            )
        return placed

    def route_edges(
        self,
        specs: Sequence[GraphEdgeSpec],
        placed: Dict[str, PositionedNode],
    ) -> List[PositionedEdge]:
        edges: List[PositionedEdge] = []
        for spec in specs:
            source = placed.get(spec.source_id)
            target = placed.get(spec.target_id)
            if source is None or target is None:
                logger.debug("Grid layout skipped edge %s with a missing endpoint", spec.id)
                continue
            edges.append(
                PositionedEdge(
                    id=spec.id,
                    source_id=spec.source_id,
                    target_id=spec.target_id,
                    start=source.center,
                    end=target.center,
                    label=spec.label,
                    source=spec.source,
                    detail=spec.detail,
                )
            )
        return edges


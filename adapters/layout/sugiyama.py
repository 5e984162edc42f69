from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence

from grandalf.graphs import Edge, Graph, Vertex
from grandalf.layouts import SugiyamaLayout

from adapters.layout.grid import GridFallbackLayoutEngine
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

COMPONENT_GAP = 60.0


class _VertexView:
    """View object grandalf reads sizes from and writes centre coordinates to."""

    def __init__(self, w: float, h: float) -> None:
        self.w = w
        self.h = h
        self.xy = (0.0, 0.0)


class _EdgeView:
    def __init__(self) -> None:
        self.points: list[tuple[float, float]] = []

    def setpath(self, points: Sequence[tuple[float, float]]) -> None:
        self.points = [tuple(point) for point in points]


@dataclass(frozen=True)
class _Frame:
    """Maps grandalf coordinates (ranks grow along y) onto the requested direction."""

    horizontal: bool
    reversed: bool
    dx: float = 0.0
    dy: float = 0.0

    def to_canvas(self, xy: Sequence[float]) -> Point:
        x, y = (xy[1], xy[0]) if self.horizontal else (xy[0], xy[1])
        if self.reversed:
            if self.horizontal:
                x = -x
            else:
                y = -y
        return Point(x + self.dx, y + self.dy)


class SugiyamaLayoutEngine(GraphLayoutEngine):
    """Layered layout over grandalf for top-level nodes.

    Container interiors are packed by the grid engine, and edges touching nested
    nodes are ranked against their top-level container.
    """

    name = "sugiyama"

    def __init__(
        self,
        canvas: CanvasDefaults | None = None,
        fallback: GridFallbackLayoutEngine | None = None,
    ) -> None:
        self.canvas = canvas or CanvasDefaults()
        self.fallback = fallback or GridFallbackLayoutEngine(canvas=self.canvas)

    def layout(self, graph: LayoutGraph) -> LayoutResult:
        options = graph.options
        sizes: Dict[str, Size] = {}
        for spec in graph.nodes:
            self.fallback.measure(spec, sizes)

        owner: Dict[str, str] = {}
        for spec in graph.nodes:
            for item in spec.walk():
                owner[item.id] = spec.id

        vertices: Dict[str, Vertex] = {}
        for spec in graph.nodes:
            size = sizes[spec.id]
            vertex = Vertex(spec.id)
            if options.horizontal:
                vertex.view = _VertexView(size.height, size.width)
            else:
                vertex.view = _VertexView(size.width, size.height)
            vertices[spec.id] = vertex

        ranked: Dict[int, Edge] = {}
        for index, spec in enumerate(graph.edges):
            source = owner.get(spec.source_id)
            target = owner.get(spec.target_id)
            if source is None or target is None or source == target:
                continue
            edge = Edge(vertices[source], vertices[target])
            edge.view = _EdgeView()
            ranked[index] = edge

        g = Graph(list(vertices.values()), list(ranked.values()))
        frames = self._layout_components(
            g,
            horizontal=options.horizontal,
            reversed_=options.direction in {"UP", "LEFT"},
            node_spacing=options.node_spacing,
            layer_spacing=options.layer_spacing,
        )

        nodes: List[PositionedNode] = []
        for spec in graph.nodes:
            vertex = vertices[spec.id]
            size = sizes[spec.id]
            center = frames[spec.id].to_canvas(vertex.view.xy)
            x, y = center.x - size.width / 2, center.y - size.height / 2
            children = self.fallback.place_siblings(
                spec.children,
                x + spec.padding,
                y + spec.header + spec.padding,
                sizes,
            )
            nodes.append(self._positioned(spec, x, y, size, children))

        placed: Dict[str, PositionedNode] = {}
        for node in nodes:
            for item in node.walk():
                placed[item.id] = item

        edges: List[PositionedEdge] = []
        for index, spec in enumerate(graph.edges):
            source = placed.get(spec.source_id)
            target = placed.get(spec.target_id)
            if source is None or target is None:
                logger.debug("Sugiyama layout skipped edge %s with a missing endpoint", spec.id)
                continue
            bends: tuple[Point, ...] = ()
            edge = ranked.get(index)
            if edge is not None and len(edge.view.points) > 2:
                frame = frames[owner[spec.source_id]]
                bends = tuple(frame.to_canvas(point) for point in edge.view.points[1:-1])
            edges.append(self._edge(spec, source.center, target.center, bends))

        bounds = content_bounds(nodes, edges)
        return LayoutResult(
            kind=graph.kind,
            nodes=nodes,
            edges=edges,
            width=max(bounds.right + self.canvas.padding, self.canvas.min_width),
            height=max(bounds.bottom + self.canvas.padding, self.canvas.min_height),
            title=graph.title,
        )

    def _layout_components(
        self,
        g: Graph,
        horizontal: bool,
        reversed_: bool,
        node_spacing: float,
        layer_spacing: float,
    ) -> Dict[str, _Frame]:
        """Lay out each connected component and shift it so components sit side by side."""
        frames: Dict[str, _Frame] = {}
        offset = self.canvas.padding
        for component in g.C:
            members = list(component.sV)
            if len(members) > 1:
                sug = SugiyamaLayout(component)
                sug.xspace = node_spacing
                sug.yspace = layer_spacing
                sug.init_all()
                sug.draw()
            else:
                members[0].view.xy = (0.0, 0.0)

            frame = _Frame(horizontal=horizontal, reversed=reversed_)
            left = top = float("inf")
            right = bottom = float("-inf")
            for vertex in members:
                center = frame.to_canvas(vertex.view.xy)
                # Views of horizontal layouts hold swapped sizes.
                half_w = (vertex.view.h if horizontal else vertex.view.w) / 2
                half_h = (vertex.view.w if horizontal else vertex.view.h) / 2
                left = min(left, center.x - half_w)
                top = min(top, center.y - half_h)
                right = max(right, center.x + half_w)
                bottom = max(bottom, center.y + half_h)

            if horizontal:
                shifted = _Frame(horizontal, reversed_, dx=self.canvas.padding - left, dy=offset - top)
                offset += bottom - top + COMPONENT_GAP
            else:
                shifted = _Frame(horizontal, reversed_, dx=offset - left, dy=self.canvas.padding - top)
                offset += right - left + COMPONENT_GAP
            for vertex in members:
                frames[vertex.data] = shifted
        return frames

    @staticmethod
    def _positioned(
        spec: GraphNodeSpec,
        x: float,
        y: float,
        size: Size,
        children: Sequence[PositionedNode],
    ) -> PositionedNode:
        return PositionedNode(
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

    @staticmethod
    def _edge(spec: GraphEdgeSpec, start: Point, end: Point, bends: tuple[Point, ...]) -> PositionedEdge:
        return PositionedEdge(
            id=spec.id,
            source_id=spec.source_id,
            target_id=spec.target_id,
            start=start,
            end=end,
            bend_points=bends,
            label=spec.label,
            source=spec.source,
            detail=spec.detail,
        )

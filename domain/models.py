from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from domain.layout_details import EdgeDetail, LayoutMetadata, NodeDetail


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class CanvasDefaults:
    padding: float = 20.0
    min_width: float = 800.0
    min_height: float = 600.0


@dataclass(frozen=True)
class PositionedNode:
    id: str
    x: float
    y: float
    width: float
    height: float
    role: str
    label: str | None = None
    source: Any = None
    detail: NodeDetail | None = None
    children: tuple[PositionedNode, ...] = ()

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def walk(self) -> list[PositionedNode]:
        nodes = [self]
        for child in self.children:
            nodes.extend(child.walk())
        return nodes


@dataclass(frozen=True)
class PositionedEdge:
    id: str
    source_id: str
    target_id: str
    start: Point
    end: Point
    bend_points: tuple[Point, ...] = ()
    label: str | None = None
    source: Any = None
    detail: EdgeDetail | None = None

    def points(self) -> list[Point]:
        return [self.start, *self.bend_points, self.end]


@dataclass(frozen=True)
class LayoutResult:
    kind: str
    nodes: list[PositionedNode]
    edges: list[PositionedEdge]
    width: float
    height: float
    metadata: LayoutMetadata | None = None
    title: str | None = None

    def all_nodes(self) -> list[PositionedNode]:
        nodes: list[PositionedNode] = []
        for node in self.nodes:
            nodes.extend(node.walk())
        return nodes

    def node_by_id(self, node_id: str) -> PositionedNode | None:
        for node in self.all_nodes():
            if node.id == node_id:
                return node
        return None

    def nodes_with_role(self, role: str) -> list[PositionedNode]:
        return [node for node in self.all_nodes() if node.role == role]


@dataclass(frozen=True)
class ContentBounds:
    right: float = 0.0
    bottom: float = 0.0


def content_bounds(nodes: list[PositionedNode], edges: list[PositionedEdge]) -> ContentBounds:
    right = 0.0
    bottom = 0.0
    for node in nodes:
        for item in node.walk():
            right = max(right, item.right)
            bottom = max(bottom, item.bottom)
    for edge in edges:
        for point in edge.points():
            right = max(right, point.x)
            bottom = max(bottom, point.y)
    return ContentBounds(right=right, bottom=bottom)

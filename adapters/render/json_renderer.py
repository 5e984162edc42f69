from __future__ import annotations

from dataclasses import asdict
from typing import Any

from adapters.filesystem.json_utils import dump_json_bytes
from domain.models import LayoutResult, Point, PositionedEdge, PositionedNode
from domain.ports.repositories import LayoutRenderer

LAYOUT_SCHEMA_VERSION = "1.0"


def _point(point: Point) -> dict[str, float]:
    return {"x": point.x, "y": point.y}


def _typed(record: Any) -> dict[str, Any] | None:
    if record is None:
        return None
    return {"type": type(record).__name__, **asdict(record)}


class JsonLayoutRenderer(LayoutRenderer):
    """Serialises a LayoutResult into plain JSON-ready dictionaries.

    The model element a node was built from is omitted unless ``include_source`` is set.
    """

    def __init__(self, include_source: bool = False) -> None:
        self.include_source = include_source

    def render(self, result: LayoutResult) -> dict[str, Any]:
        return {
            "schema_version": LAYOUT_SCHEMA_VERSION,
            "kind": result.kind,
            "title": result.title,
            "width": result.width,
            "height": result.height,
            "metadata": _typed(result.metadata),
            "nodes": [self._node(node) for node in result.nodes],
            "edges": [self._edge(edge) for edge in result.edges],
        }

    def render_bytes(self, result: LayoutResult) -> bytes:
        return dump_json_bytes(self.render(result))

    def _node(self, node: PositionedNode) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": node.id,
            "role": node.role,
            "label": node.label,
            "x": node.x,
            "y": node.y,
            "width": node.width,
            "height": node.height,
            "detail": _typed(node.detail),
        }
        if node.children:
            payload["children"] = [self._node(child) for child in node.children]
        if self.include_source and node.source is not None:
            payload["source"] = node.source
        return payload

    def _edge(self, edge: PositionedEdge) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": edge.id,
            "source_id": edge.source_id,
            "target_id": edge.target_id,
            "label": edge.label,
            "points": [_point(point) for point in edge.points()],
            "detail": _typed(edge.detail),
        }
        if self.include_source and edge.source is not None:
            payload["source"] = edge.source
        return payload

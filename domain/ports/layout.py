from __future__ import annotations

from typing import Protocol

from domain.layout_graph import LayoutGraph
from domain.models import LayoutResult


class GraphLayoutEngine(Protocol):
    name: str

    def layout(self, graph: LayoutGraph) -> LayoutResult:
        ...

from __future__ import annotations

from typing import Literal

from pydantic import Field

from domain.diagrams.base import DiagramBase, DiagramElement, arena_problems, duplicate_ids

MindmapShape = Literal["circle", "cloud", "bang", "hexagon", "square", "default"]


class MindmapNode(DiagramElement):
    id: str = Field(..., min_length=1)
    content: str = ""
    shape: MindmapShape = "default"
    icon: str | None = None
    classes: list[str] = Field(default_factory=list)
    parent: int | None = None


class MindmapDiagram(DiagramBase):
    """Mindmap tree stored as an arena: ``parent`` is an index into ``nodes``."""

    kind: Literal["mindmap"] = "mindmap"
    nodes: list[MindmapNode] = Field(default_factory=list)

    @property
    def root_index(self) -> int | None:
        for index, node in enumerate(self.nodes):
            if node.parent is None:
                return index
        return None

    def children_index(self) -> list[list[int]]:
        children: list[list[int]] = [[] for _ in self.nodes]
        for index, node in enumerate(self.nodes):
            if node.parent is not None:
                children[node.parent].append(index)
        return children

    def validation_problems(self) -> list[str]:
        problems = [f"Duplicate mindmap node id: {node_id}" for node_id in duplicate_ids(n.id for n in self.nodes)]
        problems.extend(arena_problems([node.parent for node in self.nodes], "Mindmap node"))
        roots = [node.id for node in self.nodes if node.parent is None]
        if self.nodes and len(roots) != 1:
            problems.append(f"Mindmap must have exactly one root, found {len(roots)}")
        return problems


class TreemapNode(DiagramElement):
    label: str
    value: float | None = Field(default=None, ge=0)
    css_class: str | None = None
    parent: int | None = None


class TreemapDiagram(DiagramBase):
    kind: Literal["treemap"] = "treemap"
    nodes: list[TreemapNode] = Field(default_factory=list)

    def children_index(self) -> list[list[int]]:
        children: list[list[int]] = [[] for _ in self.nodes]
        for index, node in enumerate(self.nodes):
            if node.parent is not None:
                children[node.parent].append(index)
        return children

    def total_values(self) -> list[float]:
        """Value of every node: leaves carry their own, branches sum their children."""
        totals = [0.0] * len(self.nodes)
        children = self.children_index()
        for index in reversed(range(len(self.nodes))):
            if children[index]:
                totals[index] = sum(totals[child] for child in children[index])
            else:
                totals[index] = self.nodes[index].value or 0.0
        return totals

    def validation_problems(self) -> list[str]:
        return arena_problems([node.parent for node in self.nodes], "Treemap node")

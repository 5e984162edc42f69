from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import replace

from domain.diagrams.base import DiagramKind
from domain.diagrams.graph import Requirement, RequirementDiagram
from domain.layout_details import GraphEdgeDetail, RequirementMetadata, RequirementNodeDetail
from domain.models import LayoutResult, Point, PositionedEdge, PositionedNode, Size
from domain.services.transforms.base import DiagramTransform

logger = logging.getLogger(__name__)

REQUIREMENT_WIDTH = 180.0
REQUIREMENT_HEIGHT = 140.0
ELEMENT_WIDTH = 150.0
ELEMENT_HEIGHT = 80.0
SPACING_X = 100.0
SPACING_Y = 80.0
PADDING = 20.0
TEXT_LINE_CHARS = 25
TEXT_LINE_HEIGHT = 20.0
MAX_LEVEL_ROUNDS = 10

ELEMENT_LEVEL = 0
DEFAULT_REQUIREMENT_LEVEL = 1


def requirement_size(requirement: Requirement) -> Size:
    text = requirement.text or ""
    lines = math.ceil(len(text) / TEXT_LINE_CHARS) if text else 1
    return Size(REQUIREMENT_WIDTH, REQUIREMENT_HEIGHT + (lines - 1) * TEXT_LINE_HEIGHT)


def build_dependency_levels(model: RequirementDiagram) -> dict[str, int]:
    """Elements sit on level 0; a requirement sits one level below the deepest node it points at.

    Requirements whose targets never resolve (unknown names or cycles) fall back to level 1.
    """
    levels: dict[str, int | None] = {requirement.name: None for requirement in model.requirements}
    levels.update({element.name: ELEMENT_LEVEL for element in model.elements})
    targets: dict[str, list[str]] = defaultdict(list)
    for relationship in model.relationships:
        targets[relationship.source].append(relationship.target)

    for _ in range(MAX_LEVEL_ROUNDS):
        changed = False
        for requirement in model.requirements:
            if levels[requirement.name] is not None:
                continue
            dependencies = targets[requirement.name]
            known = [levels[name] for name in dependencies if levels.get(name) is not None]
            if len(known) == len(dependencies):
                levels[requirement.name] = max(known, default=0) + 1
                changed = True
        if not changed:
            break

    resolved: dict[str, int] = {}
    for name, level in levels.items():
        if level is None:
            logger.debug("Requirement %s has unresolved dependencies; placing it on level 1", name)
            level = DEFAULT_REQUIREMENT_LEVEL
        resolved[name] = level
    return resolved


def connect(source: PositionedNode, target: PositionedNode) -> tuple[Point, Point]:
    """Facing sides: vertical between rows, horizontal within a row."""
    if source.y > target.y:
        return Point(source.center.x, source.y), Point(target.center.x, target.bottom)
    if source.y < target.y:
        return Point(source.center.x, source.bottom), Point(target.center.x, target.y)
    if source.x <= target.x:
        return Point(source.right, source.center.y), Point(target.x, target.center.y)
    return Point(source.x, source.center.y), Point(target.right, target.center.y)


class RequirementTransform(DiagramTransform):
    kind = DiagramKind.REQUIREMENT

    def layout(self, model: RequirementDiagram) -> LayoutResult:
        levels = build_dependency_levels(model)
        level_count = len(set(levels.values()))
        metadata = RequirementMetadata(level_count=level_count)
        if not levels:
            return self.finalize([], [], metadata, model.title)

        rows: dict[int, list[PositionedNode]] = defaultdict(list)
        for requirement in model.requirements:
            size = requirement_size(requirement)
            rows[levels[requirement.name]].append(
                PositionedNode(
                    id=requirement.name,
                    x=0.0,
                    y=0.0,
                    width=size.width,
                    height=size.height,
                    role="requirement",
                    label=requirement.name,
                    source=requirement,
                    detail=RequirementNodeDetail(
                        node_type=requirement.requirement_type,
                        level=levels[requirement.name],
                        requirement_id=requirement.id,
                        risk=requirement.risk,
                        verify_method=requirement.verify_method,
                    ),
                )
            )
        for element in model.elements:
            rows[ELEMENT_LEVEL].append(
                PositionedNode(
                    id=element.name,
                    x=0.0,
                    y=0.0,
                    width=ELEMENT_WIDTH,
                    height=ELEMENT_HEIGHT,
                    role="element",
                    label=element.name,
                    source=element,
                    detail=RequirementNodeDetail(
                        node_type=element.element_type or "element",
                        level=ELEMENT_LEVEL,
                        docref=element.docref,
                    ),
                )
            )

        nodes: list[PositionedNode] = []
        top = PADDING
        for level in sorted(rows):
            left = PADDING
            row_height = 0.0
            for node in rows[level]:
                nodes.append(replace(node, x=left, y=top))
                left += node.width + SPACING_X
                row_height = max(row_height, node.height)
            top += row_height + SPACING_Y

        placed = {node.id: node for node in nodes}
        edges: list[PositionedEdge] = []
        for index, relationship in enumerate(model.relationships):
            source = placed.get(relationship.source)
            target = placed.get(relationship.target)
            if source is None or target is None:
                logger.debug(
                    "Skipping relationship %s -> %s: unknown endpoint", relationship.source, relationship.target
                )
                continue
            start, end = connect(source, target)
            edges.append(
                PositionedEdge(
                    id=f"rel_{index}",
                    source_id=source.id,
                    target_id=target.id,
                    start=start,
                    end=end,
                    label=f"<<{relationship.relationship_type}>>",
                    source=relationship,
                    detail=GraphEdgeDetail(relation=relationship.relationship_type),
                )
            )
        return self.finalize(nodes, edges, metadata, model.title)


from __future__ import annotations

import logging

from domain.diagrams.base import DiagramKind
from domain.diagrams.history import GitCommit, GitGraphDiagram
from domain.layout_details import GitBranchLane, GitCommitDetail, GitConnectionDetail, GitGraphMetadata
from domain.models import LayoutResult, Point, PositionedEdge, PositionedNode
from domain.services.transforms.base import DiagramTransform

logger = logging.getLogger(__name__)

COMMIT_SPACING = 80.0
LANE_SPACING = 60.0
COMMIT_RADIUS = 8.0

BRANCH_COLORS = (
    "#2563eb",
    "#7c3aed",
    "#db2777",
    "#ea580c",
    "#ca8a04",
    "#16a34a",
    "#0891b2",
    "#4f46e5",
    "#c026d3",
    "#dc2626",
)


def assign_lanes(model: GitGraphDiagram) -> dict[str, int]:
    """The main branch owns lane 0; the others follow by (order, name), unordered ones by declaration."""
    ranked = sorted(
        (branch.order if branch.order is not None else index + 1, branch.name)
        for index, branch in enumerate(model.branches)
    )
    lanes = {model.main_branch: 0}
    for lane, (_, name) in enumerate(ranked, start=1):
        lanes[name] = lane
    return lanes


def branch_colors(model: GitGraphDiagram) -> dict[str, str]:
    colors = {model.main_branch: BRANCH_COLORS[0]}
    for index, branch in enumerate(model.branches, start=1):
        colors[branch.name] = BRANCH_COLORS[index % len(BRANCH_COLORS)]
    return colors


def connection_type(commit: GitCommit) -> str:
    if commit.is_merge:
        return "merge"
    if commit.is_cherry_pick:
        return "cherry_pick"
    return "normal"


class GitGraphTransform(DiagramTransform):
    """Commits step along the time axis in order; each branch keeps its own lane across it."""

    kind = DiagramKind.GIT_GRAPH

    def commit_center(self, model: GitGraphDiagram, index: int, lane: int) -> Point:
        along = index * COMMIT_SPACING + COMMIT_SPACING
        across = lane * LANE_SPACING + LANE_SPACING
        if model.orientation == "TB":
            return Point(across, along)
        return Point(along, across)

    def layout(self, model: GitGraphDiagram) -> LayoutResult:
        lanes = assign_lanes(model)
        colors = branch_colors(model)
        metadata = GitGraphMetadata(
            orientation=model.orientation,
            branches=tuple(
                GitBranchLane(name=name, lane=lane, color=colors[name])
                for name, lane in sorted(lanes.items(), key=lambda item: item[1])
            ),
        )
        if not model.commits:
            return self.finalize([], [], metadata, model.title)

        nodes: list[PositionedNode] = []
        placed: dict[str, PositionedNode] = {}
        for index, (commit_id, commit) in enumerate(zip(model.commit_ids(), model.commits)):
            branch = model.branch_of(commit)
            lane = lanes.get(branch)
            if lane is None:
                logger.debug("Commit %s is on undeclared branch %s; drawing it on the main lane", commit_id, branch)
                lane = 0
            center = self.commit_center(model, index, lane)
            node = PositionedNode(
                id=commit_id,
                x=center.x - COMMIT_RADIUS,
                y=center.y - COMMIT_RADIUS,
                width=COMMIT_RADIUS * 2,
                height=COMMIT_RADIUS * 2,
                role="commit",
                label=commit.message or commit.tag,
                source=commit,
                detail=GitCommitDetail(
                    branch=branch,
                    lane=lane,
                    commit_type=commit.commit_type,
                    color=colors.get(branch, BRANCH_COLORS[0]),
                    tag=commit.tag,
                    parent_ids=tuple(commit.parent_ids),
                    is_merge=commit.is_merge,
                    is_cherry_pick=commit.is_cherry_pick,
                ),
            )
            nodes.append(node)
            placed[commit_id] = node

        edges: list[PositionedEdge] = []
        for node in nodes:
            commit = node.source
            for parent_id in commit.parent_ids:
                parent = placed.get(parent_id)
                if parent is None:
                    logger.debug("Commit %s names unknown parent %s", node.id, parent_id)
                    continue
                edges.append(self._connection(model, parent, node, connection_type(commit)))
        return self.finalize(nodes, edges, metadata, model.title)

    @staticmethod
    def _connection(
        model: GitGraphDiagram,
        parent: PositionedNode,
        child: PositionedNode,
        kind: str,
    ) -> PositionedEdge:
        start, end = parent.center, child.center
        bends: tuple[Point, ...] = ()
        if parent.detail.lane != child.detail.lane:
            # Leave the parent's lane at the child's step.
            corner = Point(end.x, start.y) if model.orientation == "LR" else Point(start.x, end.y)
            bends = (corner,)
        return PositionedEdge(
            id=f"{parent.id}->{child.id}",
            source_id=parent.id,
            target_id=child.id,
            start=start,
            end=end,
            bend_points=bends,
            detail=GitConnectionDetail(
                connection_type=kind,
                from_branch=parent.detail.branch,
                to_branch=child.detail.branch,
            ),
        )

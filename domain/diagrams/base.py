from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from enum import Enum

from pydantic import BaseModel, ConfigDict


class DiagramKind(str, Enum):
    FLOWCHART = "flowchart"
    SEQUENCE = "sequence"
    CLASS = "class"
    STATE = "state"
    ER = "er"
    C4 = "c4"
    USER_JOURNEY = "user_journey"
    MINDMAP = "mindmap"
    GANTT = "gantt"
    RADAR = "radar"
    PIE = "pie"
    QUADRANT = "quadrant"
    SANKEY = "sankey"
    TIMELINE = "timeline"
    TREEMAP = "treemap"
    BLOCK = "block"
    KANBAN = "kanban"
    PACKET = "packet"
    ARCHITECTURE = "architecture"
    REQUIREMENT = "requirement"
    GIT_GRAPH = "git_graph"
    XY_CHART = "xy_chart"
    ERROR = "error"
    INFO = "info"


class DiagramElement(BaseModel):
    model_config = ConfigDict(frozen=True)


class DiagramBase(DiagramElement):
    title: str | None = None

    @property
    def diagram_kind(self) -> DiagramKind:
        return DiagramKind(getattr(self, "kind"))

    def validation_problems(self) -> list[str]:
        return []


def duplicate_ids(ids: Iterable[str]) -> list[str]:
    counts = Counter(ids)
    return sorted(item for item, count in counts.items() if count > 1)


def arena_problems(parents: list[int | None], label: str) -> list[str]:
    """Checks that every parent index points at an earlier entry of the arena."""
    problems: list[str] = []
    for index, parent in enumerate(parents):
        if parent is None:
            continue
        if parent < 0 or parent >= index:
            problems.append(
                f"{label} #{index} references parent #{parent}; parents must precede children"
            )
    return problems


def nesting_cycles(parents: Mapping[str, str | None], label: str) -> list[str]:
    problems: list[str] = []
    for item_id in parents:
        seen: set[str] = set()
        current: str | None = item_id
        while current is not None and current in parents:
            if current in seen:
                problems.append(f"{label} nesting cycle through {item_id}")
                break
            seen.add(current)
            current = parents[current]
    return problems


def fill_missing_ids(explicit: Sequence[str | None], fallbacks: Sequence[str]) -> list[str]:
    """Keeps explicit ids and uses the positional fallback elsewhere, suffixed until it is unused."""
    taken = {item for item in explicit if item}
    ids: list[str] = []
    for given, fallback in zip(explicit, fallbacks):
        if given:
            ids.append(given)
            continue
        candidate = fallback
        suffix = 1
        while candidate in taken:
            candidate = f"{fallback}_{suffix}"
            suffix += 1
        taken.add(candidate)
        ids.append(candidate)
    return ids

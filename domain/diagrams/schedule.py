from __future__ import annotations

from typing import Literal

from pydantic import Field

from domain.diagrams.base import DiagramBase, DiagramElement, duplicate_ids


class GanttTask(DiagramElement):
    description: str = ""
    id: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    duration: str | None = None
    after_task: str | None = None
    until_task: str | None = None
    tags: list[str] = Field(default_factory=list)

    @property
    def done(self) -> bool:
        return "done" in self.tags

    @property
    def active(self) -> bool:
        return "active" in self.tags

    @property
    def critical(self) -> bool:
        return "crit" in self.tags

    @property
    def milestone(self) -> bool:
        return "milestone" in self.tags


class GanttSection(DiagramElement):
    name: str = ""
    tasks: list[GanttTask] = Field(default_factory=list)


class GanttDiagram(DiagramBase):
    kind: Literal["gantt"] = "gantt"
    date_format: str = "YYYY-MM-DD"
    axis_format: str | None = None
    excludes: list[str] = Field(default_factory=list)
    sections: list[GanttSection] = Field(default_factory=list)

    def validation_problems(self) -> list[str]:
        ids = [task.id for section in self.sections for task in section.tasks if task.id]
        return [f"Duplicate task id: {task_id}" for task_id in duplicate_ids(ids)]


class TimelineEvent(DiagramElement):
    time: str
    descriptions: list[str] = Field(default_factory=list)

    @property
    def primary_description(self) -> str | None:
        return self.descriptions[0] if self.descriptions else None


class TimelineSection(DiagramElement):
    name: str
    events: list[TimelineEvent] = Field(default_factory=list)


class TimelineDiagram(DiagramBase):
    kind: Literal["timeline"] = "timeline"
    events: list[TimelineEvent] = Field(default_factory=list)
    sections: list[TimelineSection] = Field(default_factory=list)

    def all_events(self) -> list[tuple[str | None, TimelineEvent]]:
        events: list[tuple[str | None, TimelineEvent]] = [(None, event) for event in self.events]
        for section in self.sections:
            events.extend((section.name, event) for event in section.events)
        return events

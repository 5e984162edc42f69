from __future__ import annotations

import logging
from datetime import date, timedelta

from domain.diagrams.base import DiagramKind
from domain.diagrams.schedule import GanttDiagram
from domain.layout_details import GanttMetadata, GanttTaskDetail, SectionBandDetail
from domain.models import CanvasDefaults, LayoutResult, PositionedNode
from domain.ports.text import TextMeasurer
from domain.services.gantt_schedule import DEFAULT_ROUND_CAP, ScheduleResolution, assign_task_keys, resolve_schedule
from domain.services.transforms.base import DEFAULT_FONT_SIZE, DiagramTransform

logger = logging.getLogger(__name__)

TIMELINE_WIDTH = 800.0
SECTION_LABEL_WIDTH = 150.0
HEADER_HEIGHT = 50.0
ROW_HEIGHT = 40.0
BAR_HEIGHT = 24.0
MILESTONE_WIDTH = 10.0
CHART_PADDING = 20.0


class GanttTransform(DiagramTransform):
    kind = DiagramKind.GANTT

    def __init__(
        self,
        canvas: CanvasDefaults | None = None,
        text_measurer: TextMeasurer | None = None,
        round_cap: int = DEFAULT_ROUND_CAP,
        font_size: float = DEFAULT_FONT_SIZE,
    ) -> None:
        super().__init__(canvas=canvas, text_measurer=text_measurer, font_size=font_size)
        self.round_cap = round_cap

    def resolve(self, model: GanttDiagram) -> ScheduleResolution:
        return resolve_schedule(model, self.round_cap)

    def layout(self, model: GanttDiagram) -> LayoutResult:
        resolution = self.resolve(model)
        keys = assign_task_keys(model)
        if resolution.unresolved:
            logger.warning(
                "Gantt chart %r: %d task(s) left unresolved after %d round(s): %s",
                model.title or "",
                len(resolution.unresolved),
                resolution.rounds_used,
                ", ".join(resolution.unresolved),
            )
        if not resolution.schedules:
            metadata = GanttMetadata(
                min_date=None,
                max_date=None,
                rounds_used=resolution.rounds_used,
                unresolved_task_ids=resolution.unresolved,
                axis_format=model.axis_format,
                excludes=tuple(model.excludes),
            )
            return self.finalize([], [], metadata, model.title)

        min_date = resolution.min_start - timedelta(days=1)
        max_date = resolution.max_end + timedelta(days=1)
        total_days = (max_date - min_date).days
        day_width = TIMELINE_WIDTH / total_days
        timeline_x = CHART_PADDING + SECTION_LABEL_WIDTH

        def x_of(day: date) -> float:
            return timeline_x + (day - min_date).days * day_width

        nodes: list[PositionedNode] = []
        row = 0
        for section_index, section in enumerate(model.sections):
            tasks: list[PositionedNode] = []
            section_top = HEADER_HEIGHT + row * ROW_HEIGHT
            for task_index, task in enumerate(section.tasks):
                key = keys[(section_index, task_index)]
                schedule = resolution.get(key)
                if schedule is None:
                    continue
                width = schedule.days * day_width if schedule.days > 0 else MILESTONE_WIDTH
                tasks.append(
                    PositionedNode(
                        id=key,
                        x=x_of(schedule.start),
                        y=HEADER_HEIGHT + row * ROW_HEIGHT + (ROW_HEIGHT - BAR_HEIGHT) / 2,
                        width=width,
                        height=BAR_HEIGHT,
                        role="milestone" if task.milestone or schedule.days <= 0 else "task",
                        label=task.description,
                        source=task,
                        detail=GanttTaskDetail(
                            section=section.name,
                            start=schedule.start,
                            end=schedule.end,
                            done=task.done,
                            active=task.active,
                            critical=task.critical,
                            milestone=task.milestone,
                        ),
                    )
                )
                row += 1
            if not tasks:
                continue
            nodes.append(
                PositionedNode(
                    id=f"section_{section_index}",
                    x=CHART_PADDING,
                    y=section_top,
                    width=SECTION_LABEL_WIDTH + TIMELINE_WIDTH,
                    height=len(tasks) * ROW_HEIGHT,
                    role="section",
                    label=section.name,
                    source=section,
                    detail=SectionBandDetail(name=section.name, item_count=len(tasks)),
                )
            )
            nodes.extend(tasks)

        metadata = GanttMetadata(
            min_date=min_date,
            max_date=max_date,
            rounds_used=resolution.rounds_used,
            unresolved_task_ids=resolution.unresolved,
            day_width=day_width,
            axis_format=model.axis_format,
            excludes=tuple(model.excludes),
        )
        return self.finalize(nodes, [], metadata, model.title)

from __future__ import annotations

import math
import re

from domain.diagrams.base import DiagramKind
from domain.diagrams.schedule import TimelineDiagram
from domain.layout_details import SectionBandDetail, TimelineEventDetail, TimelineMetadata
from domain.models import LayoutResult, PositionedNode
from domain.services.transforms.base import DiagramTransform

AXIS_X = 100.0
AXIS_Y = 80.0
AXIS_WIDTH = 1000.0
ROW_TOP = AXIS_Y + 40.0
ROW_HEIGHT = 100.0
EVENT_MIN_WIDTH = 100.0
EVENT_HEIGHT = 60.0
EVENT_TEXT_PADDING = 20.0
BAND_PADDING = 20.0

_NUMBER = re.compile(r"\d+")


def extract_numeric_time(label: str) -> int | None:
    match = _NUMBER.search(label or "")
    return int(match.group(0)) if match else None


def time_range(times: list[int]) -> tuple[int, int] | None:
    """Padded (min, max) of the numeric times, or None when there are none."""
    if not times:
        return None
    low, high = min(times), max(times)
    padding = max(math.ceil((high - low) * 0.1), 1)
    return low - padding, high + padding


def event_percent(time: int | None, index: int, count: int, bounds: tuple[int, int] | None) -> float:
    if time is None or bounds is None:
        return (index + 1) / (count + 1) * 100.0
    low, high = bounds
    return (time - low) / (high - low) * 100.0


class TimelineTransform(DiagramTransform):
    kind = DiagramKind.TIMELINE

    def layout(self, model: TimelineDiagram) -> LayoutResult:
        events = model.all_events()
        times = [extract_numeric_time(event.time) for _, event in events]
        bounds = time_range([time for time in times if time is not None])
        metadata = TimelineMetadata(
            min_time=bounds[0] if bounds else None,
            max_time=bounds[1] if bounds else None,
            axis_x=AXIS_X,
            axis_width=AXIS_WIDTH,
        )
        if not events and not model.sections:
            return self.finalize([], [], metadata, model.title)

        nodes = [
            PositionedNode(
                id="axis",
                x=AXIS_X,
                y=AXIS_Y,
                width=AXIS_WIDTH,
                height=0.0,
                role="axis",
            )
        ]
        first_section_row = 1 if model.events else 0
        event_rows = [0] * len(model.events)
        for position, section in enumerate(model.sections):
            row = first_section_row + position
            event_rows.extend([row] * len(section.events))
            nodes.append(
                PositionedNode(
                    id=f"section_{position}",
                    x=AXIS_X - BAND_PADDING,
                    y=ROW_TOP + row * ROW_HEIGHT,
                    width=AXIS_WIDTH + BAND_PADDING * 2,
                    height=ROW_HEIGHT - BAND_PADDING / 2,
                    role="section",
                    label=section.name,
                    source=section,
                    detail=SectionBandDetail(name=section.name, item_count=len(section.events)),
                )
            )

        for index, ((section_name, event), time) in enumerate(zip(events, times)):
            percent = event_percent(time, index, len(events), bounds)
            text = event.primary_description or event.time
            width = max(self.measure(text).width + EVENT_TEXT_PADDING, EVENT_MIN_WIDTH)
            center_x = AXIS_X + percent / 100.0 * AXIS_WIDTH
            nodes.append(
                PositionedNode(
                    id=f"event_{index}",
                    x=max(center_x - width / 2, 0.0),
                    y=ROW_TOP + event_rows[index] * ROW_HEIGHT + BAND_PADDING / 2,
                    width=width,
                    height=EVENT_HEIGHT,
                    role="event",
                    label=event.time,
                    source=event,
                    detail=TimelineEventDetail(
                        numeric_time=time,
                        percent=percent,
                        section=section_name,
                        descriptions=tuple(event.descriptions),
                    ),
                )
            )
        return self.finalize(nodes, [], metadata, model.title)

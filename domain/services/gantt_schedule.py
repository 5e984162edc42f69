from __future__ import annotations

import calendar
import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from domain.diagrams.base import fill_missing_ids
from domain.diagrams.schedule import GanttDiagram, GanttTask

logger = logging.getLogger(__name__)

DEFAULT_ROUND_CAP = 100

_DAYJS_TOKENS = (
    ("YYYY", "%Y"),
    ("YY", "%y"),
    ("MM", "%m"),
    ("DD", "%d"),
    ("HH", "%H"),
    ("mm", "%M"),
    ("ss", "%S"),
)
_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([dwhM]?)\s*$")


@dataclass(frozen=True)
class ResolvedSchedule:
    start: date
    end: date

    @property
    def days(self) -> int:
        return (self.end - self.start).days


@dataclass(frozen=True)
class ScheduleResolution:
    schedules: dict[str, ResolvedSchedule] = field(default_factory=dict)
    unresolved: tuple[str, ...] = ()
    rounds_used: int = 0

    def get(self, task_key: str) -> ResolvedSchedule | None:
        return self.schedules.get(task_key)

    @property
    def min_start(self) -> date | None:
        return min((item.start for item in self.schedules.values()), default=None)

    @property
    def max_end(self) -> date | None:
        return max((item.end for item in self.schedules.values()), default=None)


def assign_task_keys(diagram: GanttDiagram) -> dict[tuple[int, int], str]:
    """Keys by (section, task) index. Explicit ids win; generated keys skip every id already taken."""
    positions = [
        (section_index, task_index)
        for section_index, section in enumerate(diagram.sections)
        for task_index in range(len(section.tasks))
    ]
    explicit = [diagram.sections[s].tasks[t].id for s, t in positions]
    keys = fill_missing_ids(explicit, [f"task_{s}_{t}" for s, t in positions])
    return dict(zip(positions, keys))


def strptime_format(date_format: str) -> str:
    result = date_format
    for token, directive in _DAYJS_TOKENS:
        result = result.replace(token, directive)
    return result


def parse_task_date(value: str, date_format: str) -> date | None:
    text = value.strip()
    try:
        return datetime.strptime(text, strptime_format(date_format)).date()
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def add_months(start: date, months: int) -> date:
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def add_duration(start: date, duration: str) -> date | None:
    match = _DURATION_PATTERN.match(duration)
    if not match:
        return None
    value = int(match.group(1))
    unit = match.group(2) or "d"
    if unit == "w":
        return start + timedelta(days=value * 7)
    if unit == "h":
        return start + timedelta(days=math.ceil(value / 24))
    if unit == "M":
        return add_months(start, value)
    return start + timedelta(days=value)


class _Resolver:
    def __init__(self, diagram: GanttDiagram) -> None:
        self.date_format = diagram.date_format
        self.tasks: dict[str, GanttTask] = {}
        for (section_index, task_index), key in assign_task_keys(diagram).items():
            self.tasks[key] = diagram.sections[section_index].tasks[task_index]

    def start_of(self, task: GanttTask) -> date | None:
        return parse_task_date(task.start_date, self.date_format) if task.start_date else None

    def finish(
        self,
        key: str,
        start: date,
        task: GanttTask,
        resolved: dict[str, ResolvedSchedule],
    ) -> ResolvedSchedule | None:
        end: date | None
        if task.end_date and not task.after_task:
            end = parse_task_date(task.end_date, self.date_format)
        elif task.duration:
            end = add_duration(start, task.duration)
        elif task.end_date:
            end = parse_task_date(task.end_date, self.date_format)
        elif task.until_task:
            until = resolved.get(task.until_task)
            end = until.start if until else None
        else:
            end = start
        if end is None:
            return None
        if end < start:
            logger.debug("Task %s ends before it starts; clamping to a zero duration", key)
            end = start
        return ResolvedSchedule(start=start, end=end)

    def explicit_phase(self) -> dict[str, ResolvedSchedule]:
        resolved: dict[str, ResolvedSchedule] = {}
        for key, task in self.tasks.items():
            if task.after_task or not task.start_date:
                continue
            start = self.start_of(task)
            if start is None:
                continue
            if task.until_task and not task.end_date and not task.duration:
                continue
            schedule = self.finish(key, start, task, resolved)
            if schedule is not None:
                resolved[key] = schedule
        return resolved

    def dependency_round(self, previous: dict[str, ResolvedSchedule]) -> dict[str, ResolvedSchedule]:
        resolved = dict(previous)
        for key, task in self.tasks.items():
            if key in resolved or not (task.after_task or task.until_task):
                continue
            if task.after_task:
                reference = resolved.get(task.after_task)
                if reference is None:
                    continue
                start: date | None = reference.end
            else:
                start = self.start_of(task)
            if start is None:
                continue
            schedule = self.finish(key, start, task, resolved)
            if schedule is not None:
                resolved[key] = schedule
        return resolved


def resolve_schedule(diagram: GanttDiagram, round_cap: int = DEFAULT_ROUND_CAP) -> ScheduleResolution:
    """Resolves task dates: explicit starts first, then dependency rounds until no progress."""
    resolver = _Resolver(diagram)
    resolved = resolver.explicit_phase()
    rounds = 0
    pending = [
        key
        for key, task in resolver.tasks.items()
        if key not in resolved and (task.after_task or task.until_task)
    ]
    while pending and rounds < round_cap:
        rounds += 1
        next_resolved = resolver.dependency_round(resolved)
        if len(next_resolved) == len(resolved):
            break
        resolved = next_resolved
        pending = [key for key in pending if key not in resolved]
    unresolved = tuple(key for key in resolver.tasks if key not in resolved)
    return ScheduleResolution(schedules=resolved, unresolved=unresolved, rounds_used=rounds)

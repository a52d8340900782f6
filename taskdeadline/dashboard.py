"""Dashboard aggregates computed from task lists."""

from dataclasses import dataclass, field
from datetime import timedelta, timezone, tzinfo
from typing import Dict, Iterable, List

from taskdeadline.models import Status, Task, Urgency
from taskdeadline.urgency import Timestamp, parse_timestamp, remaining_time_for


@dataclass
class TaskSummary:
    """Counts shown on the dashboard overview."""

    total: int = 0
    completed: int = 0
    in_progress: int = 0
    overdue: int = 0
    urgent: int = 0
    by_status: Dict[str, int] = field(default_factory=dict)

    @property
    def completion_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return self.completed / self.total * 100


def summarize(tasks: Iterable[Task], now: Timestamp, tz: tzinfo = timezone.utc) -> TaskSummary:
    summary = TaskSummary()
    now_at = parse_timestamp(now, tz)

    for task in tasks:
        summary.total += 1
        summary.by_status[task.status.value] = summary.by_status.get(task.status.value, 0) + 1

        if task.status is Status.COMPLETED:
            summary.completed += 1
        elif task.status in (Status.IN_PROGRESS, Status.UNDER_REVIEW):
            summary.in_progress += 1

        info = remaining_time_for(task, now_at, tz=tz)
        if info is None:
            continue
        if info.is_overdue:
            summary.overdue += 1
        if info.urgency >= Urgency.URGENT:
            summary.urgent += 1

    return summary


def upcoming_tasks(
    tasks: Iterable[Task],
    now: Timestamp,
    days: int = 7,
    limit: int = 10,
    tz: tzinfo = timezone.utc,
) -> List[Task]:
    """Open tasks due within the next ``days`` days, soonest first."""
    now_at = parse_timestamp(now, tz)
    horizon = now_at + timedelta(days=days)

    upcoming = [
        task for task in tasks
        if not task.is_completed
        and task.deadline is not None
        and now_at < parse_timestamp(task.deadline, tz) < horizon
    ]
    upcoming.sort(key=lambda task: parse_timestamp(task.deadline, tz))
    return upcoming[:limit]


def overdue_tasks(tasks: Iterable[Task], now: Timestamp, tz: tzinfo = timezone.utc) -> List[Task]:
    """Open tasks past their deadline, most overdue first."""
    now_at = parse_timestamp(now, tz)
    overdue = [
        task for task in tasks
        if not task.is_completed
        and task.deadline is not None
        and parse_timestamp(task.deadline, tz) < now_at
    ]
    overdue.sort(key=lambda task: parse_timestamp(task.deadline, tz))
    return overdue


def filter_by_urgency(
    tasks: Iterable[Task],
    level: Urgency,
    now: Timestamp,
    tz: tzinfo = timezone.utc,
) -> List[Task]:
    """Tasks whose current classification has the given urgency."""
    now_at = parse_timestamp(now, tz)
    matched = []
    for task in tasks:
        info = remaining_time_for(task, now_at, tz=tz)
        if info is not None and info.urgency is level:
            matched.append(task)
    return matched

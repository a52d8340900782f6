"""Deadline urgency classification.

classify() turns a deadline, a task status and the current instant into a
RemainingTimeInfo. It never reads the system clock: callers pass ``now`` so
that results are reproducible.

Buckets for a deadline that has not passed, with D whole days and H whole
hours remaining:

    more than 7 days   normal    "D days remaining"
    3 < D <= 7         medium    "D days remaining"
    1 < D <= 3         high      "D days H hours remaining"
    D == 1             urgent    "1 day H hours remaining"
    D == 0, H > 0      urgent    "H hours M minutes remaining"
    D == 0, H == 0     critical  "M minutes remaining"

A passed deadline is always critical and reports the overdue amount in days,
else hours, else without a magnitude.
"""

import logging
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional, Union

from taskdeadline import texts
from taskdeadline.models import RemainingTimeInfo, Status, Task, Urgency

logger = logging.getLogger(__name__)

Timestamp = Union[datetime, str]

DAY = timedelta(days=1)
HOUR = timedelta(hours=1)
MINUTE = timedelta(minutes=1)
WEEK = timedelta(days=7)


class InvalidTimestampError(ValueError):
    """Raised when a timestamp cannot be interpreted."""


class InvalidDeadlineError(InvalidTimestampError):
    """Raised when a deadline cannot be interpreted."""


def parse_timestamp(
    value: Timestamp,
    tz: tzinfo = timezone.utc,
    error: type = InvalidTimestampError,
    name: str = "timestamp",
) -> datetime:
    """Convert a datetime or ISO-8601 string to an aware datetime.

    Naive values are interpreted in ``tz``. A trailing "Z" is accepted as UTC.

    Args:
        value: datetime or ISO-8601 string
        tz: Zone for naive values
        error: Exception class raised on failure
        name: Name used in the error message

    Returns:
        Timezone-aware datetime

    Raises:
        InvalidTimestampError: (or ``error``) if the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        raise error(f"invalid {name}: {value!r} has no time of day")
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise error(f"invalid {name}: {value!r}") from exc
    else:
        raise error(f"invalid {name}: expected datetime or ISO-8601 string, got {type(value).__name__}")

    if parsed.tzinfo is None or parsed.utcoffset() is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def parse_deadline(value: Timestamp, tz: tzinfo = timezone.utc) -> datetime:
    return parse_timestamp(value, tz, error=InvalidDeadlineError, name="deadline")


def resolve_status(status: Union[Status, str, None]) -> Optional[Status]:
    """Map a status value to a member; unknown values map to None."""
    if status is None:
        return None
    try:
        return Status.from_value(status)
    except ValueError:
        logger.warning("Unrecognized status %r, treating task as not completed", status)
        return None


def classify(
    deadline: Timestamp,
    status: Union[Status, str, None],
    now: Timestamp,
    locale: str = "en",
    tz: tzinfo = timezone.utc,
) -> Optional[RemainingTimeInfo]:
    """Classify the time left until a deadline.

    Args:
        deadline: When the task is due
        status: Task status (member, code or label)
        now: Current instant
        locale: Language of the text label
        tz: Zone used for naive deadline and now values

    Returns:
        RemainingTimeInfo, or None for a completed task

    Raises:
        InvalidDeadlineError: If the deadline cannot be parsed
        InvalidTimestampError: If now cannot be parsed
    """
    deadline_at = parse_deadline(deadline, tz)
    now_at = parse_timestamp(now, tz, name="current time")

    resolved = resolve_status(status)
    if resolved is not None and resolved.is_terminal:
        return None

    return describe_delta(deadline_at - now_at, locale)


def describe_delta(delta: timedelta, locale: str = "en") -> RemainingTimeInfo:
    """Build the RemainingTimeInfo for ``deadline - now``."""
    if delta < timedelta(0):
        return _overdue(-delta, locale)

    days, rest = divmod(delta, DAY)
    hours, rest = divmod(rest, HOUR)
    minutes = rest // MINUTE

    if delta > WEEK:
        urgency = Urgency.NORMAL
        text = texts.duration(locale, days=days)
    elif days > 3:
        urgency = Urgency.MEDIUM
        text = texts.duration(locale, days=days)
    elif days >= 1:
        urgency = Urgency.HIGH if days > 1 else Urgency.URGENT
        text = texts.duration(locale, days=days, hours=hours)
    elif hours > 0:
        urgency = Urgency.URGENT
        text = texts.duration(locale, hours=hours, minutes=minutes)
    else:
        urgency = Urgency.CRITICAL
        text = texts.duration(locale, minutes=minutes)

    return RemainingTimeInfo(
        text=texts.message("remaining", locale, duration=text),
        is_overdue=False,
        urgency=urgency,
        days=days,
        hours=hours,
        minutes=minutes,
    )


def _overdue(overdue: timedelta, locale: str) -> RemainingTimeInfo:
    days, rest = divmod(overdue, DAY)
    hours, rest = divmod(rest, HOUR)
    minutes = rest // MINUTE

    if days > 0:
        text = texts.message("overdue_by", locale, duration=texts.duration(locale, days=days))
    elif hours > 0:
        text = texts.message("overdue_by", locale, duration=texts.duration(locale, hours=hours))
    else:
        text = texts.message("overdue", locale)

    return RemainingTimeInfo(
        text=text,
        is_overdue=True,
        urgency=Urgency.CRITICAL,
        days=days,
        hours=hours,
        minutes=minutes,
    )


def remaining_time_for(
    task: Task,
    now: Timestamp,
    locale: str = "en",
    tz: tzinfo = timezone.utc,
) -> Optional[RemainingTimeInfo]:
    """Classify a task's deadline.

    A completed task yields None. A task without a deadline is never overdue
    and has NORMAL urgency.
    """
    if task.deadline is None:
        if task.is_completed:
            return None
        return RemainingTimeInfo(
            text=texts.message("no_deadline", locale),
            is_overdue=False,
            urgency=Urgency.NORMAL,
        )
    return classify(task.deadline, task.status, now, locale=locale, tz=tz)

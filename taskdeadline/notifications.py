"""Notification derivation from task lists.

Notifications are recomputed from the current tasks on every call and are
never stored. Read state is carried on the returned objects only.
"""

import logging
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Iterable, List, Optional

from taskdeadline import texts
from taskdeadline.models import (
    Notification,
    NotificationKind,
    NotificationPriority,
    Status,
    Task,
    Urgency,
)
from taskdeadline.session import Session
from taskdeadline.urgency import Timestamp, parse_timestamp, remaining_time_for

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20
DEADLINE_WINDOW = timedelta(hours=24)
ASSIGNMENT_WINDOW = timedelta(hours=24)
COMPLETION_WINDOW = timedelta(hours=48)

URGENCY_PRIORITY = {
    Urgency.CRITICAL: NotificationPriority.CRITICAL,
    Urgency.URGENT: NotificationPriority.HIGH,
    Urgency.HIGH: NotificationPriority.MEDIUM,
    Urgency.MEDIUM: NotificationPriority.LOW,
    Urgency.NORMAL: NotificationPriority.LOW,
}


def urgency_to_priority(urgency: Urgency) -> NotificationPriority:
    return URGENCY_PRIORITY[urgency]


def derive_notifications(
    tasks: Optional[Iterable[Task]],
    user: Optional[Session],
    now: Timestamp,
    limit: int = DEFAULT_LIMIT,
    locale: str = "en",
    tz: tzinfo = timezone.utc,
) -> List[Notification]:
    """Derive the notifications for a user from the current tasks.

    Args:
        tasks: Tasks to inspect; None is treated as empty
        user: Current session, or None for no assignment/completion notices.
              An expired session is treated like None.
        now: Current instant
        limit: Maximum number of notifications returned
        locale: Language of titles and messages
        tz: Zone used for naive timestamps

    Returns:
        Notifications sorted by priority (highest first), then newest first

    Raises:
        ValueError: If limit is negative
    """
    if limit < 0:
        raise ValueError(f"Notification limit cannot be negative: {limit}")

    now_at = parse_timestamp(now, tz, name="current time")
    if user is not None and user.is_expired(now_at):
        logger.info("Session for user %s expired, omitting personal notifications", user.user_id)
        user = None
    notifications: List[Notification] = []

    for task in tasks or []:
        if task is None or task.id is None or not task.description or task.deadline is None:
            logger.debug("Skipping incomplete task record %r", task)
            continue
        notifications.extend(_task_notifications(task, user, now_at, locale, tz))

    notifications.sort(key=lambda n: n.timestamp, reverse=True)
    notifications.sort(key=lambda n: n.priority.rank, reverse=True)
    return notifications[:limit]


def _task_notifications(
    task: Task,
    user: Optional[Session],
    now: datetime,
    locale: str,
    tz: tzinfo,
) -> List[Notification]:
    found = []
    deadline = parse_timestamp(task.deadline, tz)
    info = remaining_time_for(task, now, locale=locale, tz=tz)

    if info is not None and info.is_overdue:
        found.append(Notification(
            id=f"overdue-{task.id}",
            kind=NotificationKind.OVERDUE,
            title=texts.message("overdue_title", locale),
            message=texts.message(
                "overdue_message", locale, description=task.description, remaining=info.text.lower()
            ),
            timestamp=deadline,
            priority=NotificationPriority.CRITICAL,
            task_id=task.id,
        ))

    time_left = deadline - now
    if info is not None and timedelta(0) < time_left <= DEADLINE_WINDOW:
        hours_left = round(time_left / timedelta(hours=1))
        found.append(Notification(
            id=f"deadline-{task.id}",
            kind=NotificationKind.DEADLINE,
            title=texts.message("deadline_title", locale),
            message=texts.message(
                "deadline_message",
                locale,
                description=task.description,
                duration=texts.quantity(hours_left, "hour", locale),
            ),
            timestamp=now,
            priority=urgency_to_priority(info.urgency),
            task_id=task.id,
        ))

    if user is None:
        return found

    if task.assigned_to_id == user.user_id and task.status is Status.IN_PROGRESS:
        created = parse_timestamp(task.created_at, tz)
        if now - created <= ASSIGNMENT_WINDOW:
            found.append(Notification(
                id=f"assignment-{task.id}",
                kind=NotificationKind.ASSIGNMENT,
                title=texts.message("assignment_title", locale),
                message=texts.message("assignment_message", locale, description=task.description),
                timestamp=created,
                priority=NotificationPriority.MEDIUM,
                task_id=task.id,
            ))

    if task.created_by_id == user.user_id and task.status is Status.COMPLETED:
        updated = parse_timestamp(task.updated_at, tz)
        if now - updated <= COMPLETION_WINDOW:
            assignee = task.assignee_name or texts.message("unknown_assignee", locale)
            found.append(Notification(
                id=f"completion-{task.id}",
                kind=NotificationKind.COMPLETION,
                title=texts.message("completion_title", locale),
                message=texts.message(
                    "completion_message", locale, description=task.description, assignee=assignee
                ),
                timestamp=updated,
                priority=NotificationPriority.LOW,
                task_id=task.id,
            ))

    return found


def unread_count(notifications: Iterable[Notification]) -> int:
    return sum(1 for n in notifications if not n.read)


def mark_read(notifications: Iterable[Notification], notification_id: str) -> List[Notification]:
    """Return a copy of the list with one notification marked as read."""
    return [n.as_read() if n.id == notification_id else n for n in notifications]


def mark_all_read(notifications: Iterable[Notification]) -> List[Notification]:
    return [n.as_read() for n in notifications]


def time_ago(timestamp: Timestamp, now: Timestamp, locale: str = "en", tz: tzinfo = timezone.utc) -> str:
    """Describe how long ago a timestamp was, e.g. "3 hours ago"."""
    elapsed = parse_timestamp(now, tz) - parse_timestamp(timestamp, tz)
    days = elapsed // timedelta(days=1)
    hours = elapsed // timedelta(hours=1)
    minutes = elapsed // timedelta(minutes=1)

    if days > 0:
        return texts.message("ago", locale, duration=texts.quantity(days, "day", locale))
    if hours > 0:
        return texts.message("ago", locale, duration=texts.quantity(hours, "hour", locale))
    if minutes > 0:
        return texts.message("ago", locale, duration=texts.quantity(minutes, "minute", locale))
    return texts.message("just_now", locale)

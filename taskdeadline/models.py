"""Core models for task-deadline.

This module defines the data structures shared by the classifier, the
notification generator and the task store:
- Status: Closed set of task lifecycle states with stable codes
- Urgency: Ordered time-pressure levels produced by the classifier
- RemainingTimeInfo: Derived remaining/overdue description of a deadline
- NotificationKind, NotificationPriority, Notification: Transient notifications
- Task: A dataclass representing a tracked task
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from functools import total_ordering
from typing import Any, Dict, Optional, Union


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


_STATUS_LABELS = {
    "received": {"vi": "Tiếp nhận văn bản", "en": "Received"},
    "in_progress": {"vi": "Đang xử lí", "en": "In progress"},
    "under_review": {"vi": "Xem xét", "en": "Under review"},
    "completed": {"vi": "Hoàn thành", "en": "Completed"},
}


class Status(Enum):
    """Task lifecycle status.

    Values are stable codes. Localized labels are for display only and are
    accepted as input through from_value.
    """

    RECEIVED = "received"
    IN_PROGRESS = "in_progress"
    UNDER_REVIEW = "under_review"
    COMPLETED = "completed"

    @property
    def is_terminal(self) -> bool:
        return self is Status.COMPLETED

    def label(self, locale: str = "en") -> str:
        labels = _STATUS_LABELS[self.value]
        return labels.get(locale, labels["en"])

    @classmethod
    def from_value(cls, value: Union["Status", str]) -> "Status":
        """Resolve a member from a member, a code or a localized label.

        Raises:
            ValueError: If the value matches no status
        """
        if isinstance(value, Status):
            return value

        normalized = " ".join(str(value).split()).lower()
        for member in cls:
            if normalized == member.value or normalized == member.name.lower():
                return member
            if normalized in (label.lower() for label in _STATUS_LABELS[member.value].values()):
                return member
        raise ValueError(f"Unknown status: {value!r}")


@total_ordering
class Urgency(Enum):
    """Time pressure towards a deadline, ordered from NORMAL to CRITICAL."""

    NORMAL = "normal"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return list(Urgency).index(self)

    def __lt__(self, other):
        if other.__class__ is not self.__class__:
            return NotImplemented
        return self.rank < other.rank


@total_ordering
class NotificationPriority(Enum):
    """Notification priority, ordered from LOW to CRITICAL."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return list(NotificationPriority).index(self)

    def __lt__(self, other):
        if other.__class__ is not self.__class__:
            return NotImplemented
        return self.rank < other.rank


class NotificationKind(Enum):
    """What a derived notification is about."""

    OVERDUE = "overdue"
    DEADLINE = "deadline"
    ASSIGNMENT = "assignment"
    COMPLETION = "completion"


@dataclass(frozen=True)
class RemainingTimeInfo:
    """Remaining or overdue time for a deadline at a given instant.

    Attributes:
        text: Human-readable label, e.g. "2 days 3 hours remaining"
        is_overdue: True if the deadline has passed
        urgency: Urgency level of the deadline
        days: Whole days in the absolute time difference
        hours: Whole hours left after removing days
        minutes: Whole minutes left after removing hours
    """

    text: str
    is_overdue: bool
    urgency: Urgency
    days: int = 0
    hours: int = 0
    minutes: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "is_overdue": self.is_overdue,
            "urgency": self.urgency.value,
            "days": self.days,
            "hours": self.hours,
            "minutes": self.minutes,
        }


@dataclass(frozen=True)
class Notification:
    """A notification derived from task state; never persisted."""

    id: str
    kind: NotificationKind
    title: str
    message: str
    timestamp: datetime
    priority: NotificationPriority
    task_id: Optional[int] = None
    read: bool = False

    def as_read(self) -> "Notification":
        return replace(self, read=True)


@dataclass
class Task:
    """Task model representing a single tracked task.

    Attributes:
        description: What has to be done
        deadline: When the task must be completed (None if open-ended)
        status: Current lifecycle status
        id: Unique identifier for the task (auto-generated if None)
        assigned_to_id: ID of the user the task is assigned to
        created_by_id: ID of the user who created the task
        assignee_name: Display name of the assignee
        created_at: Timestamp when the task was created
        updated_at: Timestamp of the last change
        completion_date: Timestamp when the task was completed
    """

    description: str
    deadline: Optional[datetime] = None
    status: Status = Status.RECEIVED
    id: Optional[int] = None
    assigned_to_id: Optional[int] = None
    created_by_id: Optional[int] = None
    assignee_name: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    completion_date: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.status.is_terminal

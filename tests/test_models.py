"""Tests for core models."""

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest

from taskdeadline.models import (
    Notification,
    NotificationKind,
    NotificationPriority,
    RemainingTimeInfo,
    Status,
    Task,
    Urgency,
)
from taskdeadline.session import Session


class TestStatus:
    """Tests for Status enum."""

    def test_status_values(self):
        """Test that Status enum has stable codes."""
        assert Status.RECEIVED.value == "received"
        assert Status.IN_PROGRESS.value == "in_progress"
        assert Status.UNDER_REVIEW.value == "under_review"
        assert Status.COMPLETED.value == "completed"
        assert len(list(Status)) == 4

    def test_only_completed_is_terminal(self):
        assert [s for s in Status if s.is_terminal] == [Status.COMPLETED]

    def test_labels(self):
        assert Status.COMPLETED.label("vi") == "Hoàn thành"
        assert Status.IN_PROGRESS.label("vi") == "Đang xử lí"
        assert Status.UNDER_REVIEW.label() == "Under review"
        assert Status.RECEIVED.label("fr") == "Received"

    @pytest.mark.parametrize(
        "value, expected",
        [
            (Status.RECEIVED, Status.RECEIVED),
            ("in_progress", Status.IN_PROGRESS),
            ("IN_PROGRESS", Status.IN_PROGRESS),
            ("Xem xét", Status.UNDER_REVIEW),
            ("  hoàn   thành ", Status.COMPLETED),
            ("Completed", Status.COMPLETED),
            ("Tiếp nhận văn bản", Status.RECEIVED),
        ],
    )
    def test_from_value(self, value, expected):
        assert Status.from_value(value) is expected

    def test_from_value_unknown(self):
        with pytest.raises(ValueError, match="Unknown status"):
            Status.from_value("archived")


class TestOrderedEnums:
    """Tests for Urgency and NotificationPriority ordering."""

    def test_urgency_rank(self):
        assert [u.rank for u in Urgency] == [0, 1, 2, 3, 4]

    def test_urgency_sorting(self):
        shuffled = [Urgency.URGENT, Urgency.NORMAL, Urgency.CRITICAL, Urgency.MEDIUM, Urgency.HIGH]
        assert sorted(shuffled) == list(Urgency)

    def test_urgency_comparisons(self):
        assert Urgency.HIGH >= Urgency.HIGH
        assert Urgency.CRITICAL > Urgency.URGENT
        assert Urgency.NORMAL <= Urgency.MEDIUM

    def test_cross_enum_comparison_is_rejected(self):
        with pytest.raises(TypeError):
            Urgency.HIGH < NotificationPriority.HIGH

    def test_priority_order(self):
        assert (
            NotificationPriority.LOW
            < NotificationPriority.MEDIUM
            < NotificationPriority.HIGH
            < NotificationPriority.CRITICAL
        )


class TestRemainingTimeInfo:
    """Tests for RemainingTimeInfo."""

    def test_is_immutable(self):
        info = RemainingTimeInfo(text="Overdue", is_overdue=True, urgency=Urgency.CRITICAL)
        with pytest.raises(FrozenInstanceError):
            info.text = "changed"

    def test_defaults(self):
        info = RemainingTimeInfo(text="No deadline", is_overdue=False, urgency=Urgency.NORMAL)
        assert (info.days, info.hours, info.minutes) == (0, 0, 0)


class TestNotification:
    """Tests for Notification."""

    def test_as_read_returns_copy(self):
        notification = Notification(
            id="overdue-1",
            kind=NotificationKind.OVERDUE,
            title="Task overdue",
            message="...",
            timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
            priority=NotificationPriority.CRITICAL,
            task_id=1,
        )
        read = notification.as_read()
        assert read.read is True
        assert notification.read is False
        assert read.id == notification.id


class TestTask:
    """Tests for Task dataclass."""

    def test_task_creation_with_description_only(self):
        task = Task(description="Test task")

        assert task.description == "Test task"
        assert task.status == Status.RECEIVED
        assert task.deadline is None
        assert task.id is None
        assert task.completion_date is None
        assert task.created_at.tzinfo is not None
        assert not task.is_completed

    def test_task_creation_with_all_fields(self):
        created = datetime(2024, 2, 1, 12, 0, tzinfo=timezone.utc)
        task = Task(
            id=1,
            description="Process incoming letter",
            deadline=created + timedelta(days=3),
            status=Status.COMPLETED,
            assigned_to_id=4,
            created_by_id=2,
            assignee_name="Minh",
            created_at=created,
            updated_at=created,
            completion_date=created,
        )

        assert task.id == 1
        assert task.assigned_to_id == 4
        assert task.created_by_id == 2
        assert task.is_completed


class TestSession:
    """Tests for Session."""

    def test_expiry(self):
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        session = Session(user_id=1, expires_at=now + timedelta(minutes=30))
        assert not session.is_expired(now)
        assert session.is_expired(now + timedelta(minutes=30))

    def test_no_expiry(self):
        assert not Session(user_id=1).is_expired(datetime(2099, 1, 1, tzinfo=timezone.utc))

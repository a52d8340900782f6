"""Comprehensive tests for TaskRepository."""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from taskdeadline.models import Status, Task
from taskdeadline.repository import TaskRepository
from taskdeadline.storage import JsonStorage


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


class TestTaskRepository:
    """Test suite for TaskRepository."""

    @pytest.fixture
    def temp_storage(self):
        """Create a temporary storage file for testing."""
        with tempfile.NamedTemporaryFile(mode="w", delete=False, suffix=".json") as f:
            temp_path = f.name
        Path(temp_path).unlink()
        yield temp_path
        path = Path(temp_path)
        if path.exists():
            path.unlink()

    @pytest.fixture
    def clock(self):
        return FakeClock(datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc))

    @pytest.fixture
    def repo(self, temp_storage, clock):
        """Create a TaskRepository with temporary storage."""
        return TaskRepository(JsonStorage(temp_storage), clock=clock)

    def test_create_task_defaults(self, repo, clock):
        task = repo.create_task("Test task")
        assert task.id == 1
        assert task.description == "Test task"
        assert task.status == Status.RECEIVED
        assert task.deadline is None
        assert task.created_at == clock.current
        assert task.updated_at == clock.current

    def test_create_task_with_fields(self, repo, clock):
        deadline = clock.current + timedelta(days=3)
        task = repo.create_task(
            "Reply to district",
            deadline=deadline,
            status=Status.IN_PROGRESS,
            assigned_to_id=5,
            created_by_id=1,
            assignee_name="Lan",
        )
        assert task.deadline == deadline
        assert task.status == Status.IN_PROGRESS
        assert task.assigned_to_id == 5
        assert task.created_by_id == 1
        assert task.assignee_name == "Lan"

    def test_create_completed_task_sets_completion_date(self, repo, clock):
        task = repo.create_task("Already done", status=Status.COMPLETED)
        assert task.completion_date == clock.current

    def test_create_task_strips_and_rejects_empty(self, repo):
        assert repo.create_task("  padded  ").description == "padded"
        with pytest.raises(ValueError):
            repo.create_task("   ")

    def test_ids_increment(self, repo):
        assert [repo.create_task(f"Task {i}").id for i in range(3)] == [1, 2, 3]

    def test_id_after_delete_uses_max(self, repo):
        repo.create_task("a")
        repo.create_task("b")
        repo.delete_task(1)
        assert repo.create_task("c").id == 3

    def test_get_all_tasks_sorted_and_filtered(self, repo):
        repo.create_task("one")
        repo.create_task("two", status=Status.IN_PROGRESS)
        repo.create_task("three")

        assert [t.id for t in repo.get_all_tasks()] == [1, 2, 3]
        assert [t.id for t in repo.get_all_tasks(status=Status.RECEIVED)] == [1, 3]
        assert repo.get_all_tasks(status=Status.COMPLETED) == []

    def test_get_task(self, repo):
        created = repo.create_task("Find me")
        assert repo.get_task(created.id).description == "Find me"
        assert repo.get_task(99) is None

    def test_update_task(self, repo, clock):
        task = repo.create_task("Old")
        clock.advance(hours=2)
        task.description = "New"
        updated = repo.update_task(task)

        assert updated.updated_at == clock.current
        assert repo.get_task(task.id).description == "New"

    def test_update_task_errors(self, repo):
        with pytest.raises(ValueError, match="cannot be None"):
            repo.update_task(Task(description="No id"))
        with pytest.raises(ValueError, match="does not exist"):
            repo.update_task(Task(id=42, description="Missing"))

    def test_delete_task(self, repo):
        task = repo.create_task("Delete me")
        assert repo.delete_task(task.id) is True
        assert repo.delete_task(task.id) is False
        assert repo.get_all_tasks() == []

    def test_mark_done(self, repo, clock):
        task = repo.create_task("Finish")
        clock.advance(days=1)
        done = repo.mark_done(task.id)

        assert done.status == Status.COMPLETED
        assert done.completion_date == clock.current
        assert done.updated_at == clock.current
        assert repo.get_task(task.id).status == Status.COMPLETED

    def test_mark_done_twice_keeps_first_completion_date(self, repo, clock):
        task = repo.create_task("Finish")
        first = repo.mark_done(task.id).completion_date
        clock.advance(hours=3)
        assert repo.mark_done(task.id).completion_date == first

    def test_reopen_clears_completion_date(self, repo):
        task = repo.create_task("Reopen")
        repo.mark_done(task.id)
        reopened = repo.set_status(task.id, Status.UNDER_REVIEW)
        assert reopened.status == Status.UNDER_REVIEW
        assert reopened.completion_date is None

    def test_status_of_missing_task(self, repo):
        assert repo.mark_done(99) is None
        assert repo.set_status(99, Status.IN_PROGRESS) is None

    def test_default_clock_is_utc(self, temp_storage):
        repo = TaskRepository(JsonStorage(temp_storage))
        assert repo.clock().tzinfo is timezone.utc

"""Task repository for managing task operations.

TaskRepository wraps a Storage backend and handles ID generation, status
changes and timestamps. Time is taken from an injected clock.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from taskdeadline.models import Status, Task
from taskdeadline.storage import JsonStorage, Storage

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_clock() -> datetime:
    return datetime.now(timezone.utc)


class TaskRepository:
    """Repository for managing tasks with storage backend.

    Attributes:
        storage: Storage backend for persisting tasks
        clock: Callable returning the current time
    """

    def __init__(self, storage: Optional[Storage] = None, clock: Optional[Clock] = None):
        """Initialize TaskRepository with a storage backend.

        Args:
            storage: Storage implementation to use. If None, uses JsonStorage
                    with default file path.
            clock: Source of the current time. Defaults to UTC wall clock.
        """
        self.storage = storage or JsonStorage()
        self.clock = clock or utc_clock

    def create_task(
        self,
        description: str,
        deadline: Optional[datetime] = None,
        status: Status = Status.RECEIVED,
        assigned_to_id: Optional[int] = None,
        created_by_id: Optional[int] = None,
        assignee_name: Optional[str] = None,
    ) -> Task:
        """Create a new task.

        Args:
            description: What has to be done
            deadline: Due time, or None
            status: Initial status (default: RECEIVED)
            assigned_to_id: Assignee user ID
            created_by_id: Creator user ID
            assignee_name: Assignee display name

        Returns:
            The created Task object with assigned ID

        Raises:
            ValueError: If the description is empty
        """
        if not description.strip():
            raise ValueError("Task description cannot be empty")

        tasks = self.storage.load()
        next_id = max(tasks.keys(), default=0) + 1
        now = self.clock()

        task = Task(
            id=next_id,
            description=description.strip(),
            deadline=deadline,
            status=status,
            assigned_to_id=assigned_to_id,
            created_by_id=created_by_id,
            assignee_name=assignee_name,
            created_at=now,
            updated_at=now,
            completion_date=now if status.is_terminal else None,
        )

        tasks[next_id] = task
        self.storage.save(tasks)
        logger.info("Created task #%d", next_id)

        return task

    def get_all_tasks(self, status: Optional[Status] = None) -> List[Task]:
        """Get all tasks, optionally filtered by status.

        Returns:
            List of Task objects, sorted by ID
        """
        tasks = self.storage.load()

        if status is not None:
            tasks = {task_id: task for task_id, task in tasks.items() if task.status == status}

        return [tasks[task_id] for task_id in sorted(tasks.keys())]

    def get_task(self, task_id: int) -> Optional[Task]:
        tasks = self.storage.load()
        return tasks.get(task_id)

    def update_task(self, task: Task) -> Task:
        """Update an existing task.

        Args:
            task: Task object with updated data. Must have valid ID.

        Returns:
            The updated Task object

        Raises:
            ValueError: If task ID is None or task doesn't exist
        """
        if task.id is None:
            raise ValueError("Task ID cannot be None")

        tasks = self.storage.load()

        if task.id not in tasks:
            raise ValueError(f"Task with ID {task.id} does not exist")

        task.updated_at = self.clock()
        tasks[task.id] = task
        self.storage.save(tasks)

        return task

    def delete_task(self, task_id: int) -> bool:
        """Delete a task by ID.

        Returns:
            True if task was deleted, False if task didn't exist
        """
        tasks = self.storage.load()

        if task_id not in tasks:
            return False

        del tasks[task_id]
        self.storage.save(tasks)
        logger.info("Deleted task #%d", task_id)

        return True

    def set_status(self, task_id: int, status: Status) -> Optional[Task]:
        """Move a task to a new status.

        Completing a task records its completion date; leaving the completed
        status clears it.

        Returns:
            Updated Task object if found, None if task doesn't exist
        """
        task = self.get_task(task_id)
        if task is None:
            return None

        previous = task.status
        task.status = status
        if status.is_terminal and not previous.is_terminal:
            task.completion_date = self.clock()
        elif not status.is_terminal:
            task.completion_date = None

        logger.info("Task #%d status %s -> %s", task_id, previous.value, status.value)
        return self.update_task(task)

    def mark_done(self, task_id: int) -> Optional[Task]:
        return self.set_status(task_id, Status.COMPLETED)

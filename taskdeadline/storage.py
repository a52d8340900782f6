"""Storage layer for task-deadline.

This module provides an abstract storage interface and a JSON file
implementation. JsonStorage guards reads and writes with fcntl locks so that
concurrent CLI invocations do not interleave.
"""

import fcntl
import json
import logging
import os
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from taskdeadline.models import Status, Task

logger = logging.getLogger(__name__)


class Storage(ABC):
    """Abstract base class for task storage implementations."""

    @abstractmethod
    def save(self, tasks: Dict[int, Task]) -> None:
        """Save tasks to storage.

        Args:
            tasks: Dictionary mapping task IDs to Task objects
        """
        pass

    @abstractmethod
    def load(self) -> Dict[int, Task]:
        """Load tasks from storage.

        Returns:
            Dictionary mapping task IDs to Task objects
        """
        pass

    @abstractmethod
    def delete(self) -> None:
        """Delete all data from storage."""
        pass


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def task_to_dict(task: Task) -> Dict[str, Any]:
    return {
        "id": task.id,
        "description": task.description,
        "deadline": _isoformat(task.deadline),
        "status": task.status.value,
        "assigned_to_id": task.assigned_to_id,
        "created_by_id": task.created_by_id,
        "assignee_name": task.assignee_name,
        "created_at": task.created_at.isoformat(),
        "updated_at": task.updated_at.isoformat(),
        "completion_date": _isoformat(task.completion_date),
    }


def task_from_dict(data: Dict[str, Any]) -> Task:
    created_at = datetime.fromisoformat(data["created_at"])
    return Task(
        id=data["id"],
        description=data["description"],
        deadline=_parse(data.get("deadline")),
        status=Status.from_value(data["status"]),
        assigned_to_id=data.get("assigned_to_id"),
        created_by_id=data.get("created_by_id"),
        assignee_name=data.get("assignee_name"),
        created_at=created_at,
        updated_at=_parse(data.get("updated_at")) or created_at,
        completion_date=_parse(data.get("completion_date")),
    )


class JsonStorage(Storage):
    """JSON file-based storage implementation with file locking.

    Attributes:
        file_path: Path to the JSON storage file
    """

    def __init__(self, file_path: Optional[str] = None):
        """Initialize JsonStorage with a file path.

        Args:
            file_path: Path to the JSON file for storage. If None, uses
                      TASK_DB_PATH environment variable or defaults to tasks.json
        """
        if file_path is None:
            file_path = os.environ.get("TASK_DB_PATH", "tasks.json")
        self.file_path = Path(file_path)

    def save(self, tasks: Dict[int, Task]) -> None:
        """Save tasks to JSON file with file locking.

        Args:
            tasks: Dictionary mapping task IDs to Task objects
        """
        self.file_path.parent.mkdir(parents=True, exist_ok=True)

        serializable_tasks = {str(task_id): task_to_dict(task) for task_id, task in tasks.items()}

        # Truncate only once the exclusive lock is held
        with open(self.file_path, "a+", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                f.seek(0)
                f.truncate()
                json.dump(serializable_tasks, f, indent=2, ensure_ascii=False)
                f.flush()
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)

        logger.debug("Saved %d tasks to %s", len(tasks), self.file_path)

    def load(self) -> Dict[int, Task]:
        """Load tasks from JSON file with file locking.

        Returns:
            Dictionary mapping task IDs to Task objects. Returns empty dict
            if file doesn't exist or is empty.

        Raises:
            ValueError: If the file does not contain valid task JSON
        """
        if not self.file_path.exists():
            return {}

        with open(self.file_path, "r", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            try:
                content = f.read().strip()
                if not content:
                    return {}

                data = json.loads(content)
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)

        try:
            tasks = {int(task_id): task_from_dict(task_data) for task_id, task_data in data.items()}
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"Malformed task file {self.file_path}: {exc}") from exc

        logger.debug("Loaded %d tasks from %s", len(tasks), self.file_path)
        return tasks

    def delete(self) -> None:
        """Delete the JSON storage file.

        If the file doesn't exist, this method does nothing.
        """
        if self.file_path.exists():
            self.file_path.unlink()

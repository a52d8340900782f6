"""task-deadline: deadline urgency and notifications for office task tracking."""

__version__ = "0.1.0"

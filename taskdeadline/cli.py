"""Command-line interface for task-deadline.

This module provides the CLI for tracking tasks and their deadlines using
argparse. It supports the following commands:
- add: Create a new task
- list: List tasks with their remaining time
- status: Change the status of a task
- done: Mark a task as completed
- delete: Delete a task
- remaining: Classify an arbitrary deadline
- notifications: Show notifications for the current user
- summary: Show dashboard counts
- upcoming: List tasks due soon
"""

import argparse
import logging
import sys
from datetime import datetime
from typing import List, Optional

from taskdeadline.config import Settings, load_settings
from taskdeadline.dashboard import filter_by_urgency, summarize, upcoming_tasks
from taskdeadline.logger import setup_logger
from taskdeadline.models import Status, Task, Urgency
from taskdeadline.notifications import derive_notifications, time_ago
from taskdeadline.repository import TaskRepository
from taskdeadline.session import Session
from taskdeadline.storage import JsonStorage
from taskdeadline.urgency import classify, parse_deadline, parse_timestamp, remaining_time_for

logger = logging.getLogger(__name__)

STATUS_CHOICES = [status.value for status in Status]
URGENCY_CHOICES = [urgency.value for urgency in Urgency]


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="deadline",
        description="Track task deadlines and their urgency"
    )
    parser.add_argument(
        "--now",
        help="Evaluate as of this ISO-8601 time instead of the current time"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    add_parser = subparsers.add_parser("add", help="Add a new task")
    add_parser.add_argument("description", help="Task description")
    add_parser.add_argument("--deadline", help="Due time (ISO-8601)")
    add_parser.add_argument(
        "--status",
        choices=STATUS_CHOICES,
        default=Status.RECEIVED.value,
        help="Initial status (default: received)"
    )
    add_parser.add_argument("--assign", type=int, dest="assigned_to_id", help="Assignee user ID")
    add_parser.add_argument("--assignee", dest="assignee_name", help="Assignee display name")
    add_parser.add_argument("--creator", type=int, dest="created_by_id", help="Creator user ID")

    list_parser = subparsers.add_parser("list", help="List tasks")
    list_parser.add_argument("--status", choices=STATUS_CHOICES, help="Filter tasks by status")
    list_parser.add_argument("--urgency", choices=URGENCY_CHOICES, help="Filter tasks by urgency")

    status_parser = subparsers.add_parser("status", help="Change the status of a task")
    status_parser.add_argument("id", type=int, help="Task ID")
    status_parser.add_argument("status", choices=STATUS_CHOICES, help="New status")

    done_parser = subparsers.add_parser("done", help="Mark a task as completed")
    done_parser.add_argument("id", type=int, help="Task ID")

    delete_parser = subparsers.add_parser("delete", help="Delete a task")
    delete_parser.add_argument("id", type=int, help="Task ID")

    remaining_parser = subparsers.add_parser("remaining", help="Classify a deadline")
    remaining_parser.add_argument("deadline", help="Due time (ISO-8601)")
    remaining_parser.add_argument(
        "--status",
        default=Status.IN_PROGRESS.value,
        help="Task status code or label (default: in_progress)"
    )

    notifications_parser = subparsers.add_parser("notifications", help="Show notifications")
    notifications_parser.add_argument("--user", type=int, help="User ID (default: DEADLINE_USER_ID)")
    notifications_parser.add_argument("--limit", type=int, help="Maximum notifications to show")

    subparsers.add_parser("summary", help="Show task counts")

    upcoming_parser = subparsers.add_parser("upcoming", help="List tasks due soon")
    upcoming_parser.add_argument("--days", type=int, help="Look-ahead window in days")
    upcoming_parser.add_argument("--limit", type=int, default=10, help="Maximum tasks to show")

    return parser


def _now(args: argparse.Namespace, settings: Settings, repo: TaskRepository) -> datetime:
    if getattr(args, "now", None):
        return parse_timestamp(args.now, settings.tz, name="--now")
    return repo.clock()


def _format_task(task: Task, now: datetime, settings: Settings) -> str:
    status_icon = "✓" if task.is_completed else " "
    line = f"[{status_icon}] #{task.id} {task.description} ({task.status.label(settings.locale)})"
    info = remaining_time_for(task, now, locale=settings.locale, tz=settings.tz)
    if info is not None:
        line += f" - {info.text} [{info.urgency.value}]"
    return line


def cmd_add(args: argparse.Namespace, repo: TaskRepository, settings: Settings) -> int:
    """Handle the 'add' command.

    Returns:
        Exit code (0 for success)
    """
    deadline = parse_deadline(args.deadline, settings.tz) if args.deadline else None
    created_by_id = args.created_by_id if args.created_by_id is not None else settings.user_id
    task = repo.create_task(
        description=args.description,
        deadline=deadline,
        status=Status(args.status),
        assigned_to_id=args.assigned_to_id,
        created_by_id=created_by_id,
        assignee_name=args.assignee_name,
    )
    print(f"Task added: #{task.id} {task.description} ({task.status.label(settings.locale)})")
    return 0


def cmd_list(args: argparse.Namespace, repo: TaskRepository, settings: Settings) -> int:
    """Handle the 'list' command.

    Returns:
        Exit code (0 for success)
    """
    status = Status(args.status) if args.status else None
    tasks = repo.get_all_tasks(status=status)
    now = _now(args, settings, repo)

    if args.urgency:
        tasks = filter_by_urgency(tasks, Urgency(args.urgency), now, tz=settings.tz)

    if not tasks:
        print("No tasks found.")
        return 0

    for task in tasks:
        print(_format_task(task, now, settings))

    return 0


def cmd_status(args: argparse.Namespace, repo: TaskRepository, settings: Settings) -> int:
    task = repo.set_status(args.id, Status(args.status))

    if task is None:
        print(f"Error: Task #{args.id} not found.", file=sys.stderr)
        return 1

    print(f"Task #{task.id} is now {task.status.label(settings.locale)}: {task.description}")
    return 0


def cmd_done(args: argparse.Namespace, repo: TaskRepository, settings: Settings) -> int:
    """Handle the 'done' command.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    task = repo.mark_done(args.id)

    if task is None:
        print(f"Error: Task #{args.id} not found.", file=sys.stderr)
        return 1

    print(f"Task #{task.id} marked as done: {task.description}")
    return 0


def cmd_delete(args: argparse.Namespace, repo: TaskRepository, settings: Settings) -> int:
    """Handle the 'delete' command.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    deleted = repo.delete_task(args.id)

    if not deleted:
        print(f"Error: Task #{args.id} not found.", file=sys.stderr)
        return 1

    print(f"Task #{args.id} deleted.")
    return 0


def cmd_remaining(args: argparse.Namespace, repo: TaskRepository, settings: Settings) -> int:
    """Handle the 'remaining' command.

    Returns:
        Exit code (0 for success)
    """
    now = _now(args, settings, repo)
    info = classify(args.deadline, args.status, now, locale=settings.locale, tz=settings.tz)

    if info is None:
        print("Completed: no remaining time.")
        return 0

    print(f"{info.text} [{info.urgency.value}]")
    return 0


def cmd_notifications(args: argparse.Namespace, repo: TaskRepository, settings: Settings) -> int:
    """Handle the 'notifications' command.

    Returns:
        Exit code (0 for success)
    """
    user_id = args.user if args.user is not None else settings.user_id
    session = Session(user_id=user_id) if user_id is not None else None
    limit = args.limit if args.limit is not None else settings.notification_limit
    now = _now(args, settings, repo)

    notifications = derive_notifications(
        repo.get_all_tasks(), session, now, limit=limit, locale=settings.locale, tz=settings.tz
    )

    if not notifications:
        print("No notifications.")
        return 0

    for notification in notifications:
        when = time_ago(notification.timestamp, now, locale=settings.locale)
        print(
            f"[{notification.priority.value}] {notification.title}: "
            f"{notification.message} ({when})"
        )

    return 0


def cmd_summary(args: argparse.Namespace, repo: TaskRepository, settings: Settings) -> int:
    summary = summarize(repo.get_all_tasks(), _now(args, settings, repo), tz=settings.tz)

    print(f"Total: {summary.total}")
    print(f"Completed: {summary.completed} ({summary.completion_rate:.1f}%)")
    print(f"In progress: {summary.in_progress}")
    print(f"Overdue: {summary.overdue}")
    print(f"Urgent: {summary.urgent}")
    for status in Status:
        count = summary.by_status.get(status.value, 0)
        print(f"  {status.label(settings.locale)}: {count}")

    return 0


def cmd_upcoming(args: argparse.Namespace, repo: TaskRepository, settings: Settings) -> int:
    days = args.days if args.days is not None else settings.upcoming_days
    now = _now(args, settings, repo)
    tasks = upcoming_tasks(repo.get_all_tasks(), now, days=days, limit=args.limit, tz=settings.tz)

    if not tasks:
        print("No upcoming deadlines.")
        return 0

    for task in tasks:
        print(_format_task(task, now, settings))

    return 0


COMMANDS = {
    "add": cmd_add,
    "list": cmd_list,
    "status": cmd_status,
    "done": cmd_done,
    "delete": cmd_delete,
    "remaining": cmd_remaining,
    "notifications": cmd_notifications,
    "summary": cmd_summary,
    "upcoming": cmd_upcoming,
}


def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments. If None, uses sys.argv[1:]
        settings: Configuration. If None, read from the environment.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if settings is None:
        settings = load_settings()
    setup_logger(settings.log_level, settings.log_file)

    handler = COMMANDS.get(args.command)
    if handler is None:
        print(f"Error: Unknown command '{args.command}'", file=sys.stderr)
        return 1

    repo = TaskRepository(JsonStorage(settings.db_path))

    try:
        return handler(args, repo, settings)
    except ValueError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""Label templates for the supported locales."""

from typing import Dict

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "remaining": "{duration} remaining",
        "overdue_by": "{duration} overdue",
        "overdue": "Overdue",
        "no_deadline": "No deadline",
        "overdue_title": "Task overdue",
        "overdue_message": '"{description}" is {remaining}',
        "deadline_title": "Deadline approaching",
        "deadline_message": '"{description}" is due in {duration}',
        "assignment_title": "New task assigned",
        "assignment_message": 'You have been assigned: "{description}"',
        "completion_title": "Task completed",
        "completion_message": '"{description}" was completed by {assignee}',
        "unknown_assignee": "the assignee",
        "ago": "{duration} ago",
        "just_now": "Just now",
    },
    "vi": {
        "remaining": "Còn {duration}",
        "overdue_by": "Quá hạn {duration}",
        "overdue": "Quá hạn",
        "no_deadline": "Không có hạn",
        "overdue_title": "Công việc quá hạn",
        "overdue_message": '"{description}" đã {remaining}',
        "deadline_title": "Hạn sắp tới",
        "deadline_message": '"{description}" sẽ hết hạn trong {duration}',
        "assignment_title": "Công việc mới được giao",
        "assignment_message": 'Bạn được giao công việc: "{description}"',
        "completion_title": "Công việc đã hoàn thành",
        "completion_message": '"{description}" đã được hoàn thành bởi {assignee}',
        "unknown_assignee": "người được giao",
        "ago": "{duration} trước",
        "just_now": "Vừa xong",
    },
}

_UNITS = {
    "en": {"day": ("day", "days"), "hour": ("hour", "hours"), "minute": ("minute", "minutes")},
    "vi": {"day": ("ngày", "ngày"), "hour": ("giờ", "giờ"), "minute": ("phút", "phút")},
}


def message(key: str, locale: str = "en", **values) -> str:
    """Format the template for key in locale, falling back to English."""
    catalog = MESSAGES.get(locale, MESSAGES["en"])
    return catalog[key].format(**values)


def quantity(count: int, unit: str, locale: str = "en") -> str:
    """Format a count with its unit name, e.g. "1 day" or "3 hours"."""
    singular, plural = _UNITS.get(locale, _UNITS["en"])[unit]
    return f"{count} {singular if count == 1 else plural}"


def duration(locale: str = "en", **parts: int) -> str:
    """Join unit quantities in the order given, e.g. duration(days=2, hours=3)."""
    units = {"days": "day", "hours": "hour", "minutes": "minute"}
    return " ".join(quantity(count, units[name], locale) for name, count in parts.items())

"""Runtime configuration for task-deadline.

Settings are read from environment variables. Malformed numeric values fall
back to their defaults instead of aborting the command.
"""

import os
from dataclasses import dataclass
from datetime import timezone, tzinfo
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

SUPPORTED_LOCALES = ("en", "vi")


@dataclass(frozen=True)
class Settings:
    """Configuration values shared by the CLI and library helpers.

    Attributes:
        db_path: Path to the JSON task file
        locale: Language for generated labels ("en" or "vi")
        timezone_name: Zone used to interpret naive timestamps
        user_id: ID of the current user, if any
        notification_limit: Maximum notifications returned per derivation
        upcoming_days: Look-ahead window for upcoming deadlines
        log_level: Logging level name
        log_file: Optional log file; logs go to stderr when unset
    """

    db_path: str = "tasks.json"
    locale: str = "en"
    timezone_name: str = "UTC"
    user_id: Optional[int] = None
    notification_limit: int = 20
    upcoming_days: int = 7
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    @property
    def tz(self) -> tzinfo:
        return resolve_timezone(self.timezone_name)


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        env: Mapping to read from. If None, uses os.environ.

    Returns:
        Populated Settings instance
    """
    if env is None:
        env = os.environ

    locale = env.get("DEADLINE_LOCALE", "en").strip().lower() or "en"
    if locale not in SUPPORTED_LOCALES:
        locale = "en"

    return Settings(
        db_path=env.get("TASK_DB_PATH", "tasks.json").strip() or "tasks.json",
        locale=locale,
        timezone_name=env.get("DEADLINE_TIMEZONE", "UTC").strip() or "UTC",
        user_id=_env_optional_int(env, "DEADLINE_USER_ID"),
        notification_limit=_env_int(env, "DEADLINE_NOTIFICATION_LIMIT", default=20, minimum=1),
        upcoming_days=_env_int(env, "DEADLINE_UPCOMING_DAYS", default=7, minimum=1),
        log_level=env.get("DEADLINE_LOG_LEVEL", "WARNING").strip().upper() or "WARNING",
        log_file=env.get("DEADLINE_LOG_FILE", "").strip() or None,
    )


def resolve_timezone(name: str) -> tzinfo:
    """Return a tzinfo for an IANA zone name.

    Raises:
        ValueError: If the zone is unknown
    """
    if name.strip().upper() in ("UTC", "Z"):
        return timezone.utc
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {name!r}") from exc


def _env_int(env: Mapping[str, str], key: str, default: int, minimum: int) -> int:
    raw = env.get(key)
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return max(minimum, value)


def _env_optional_int(env: Mapping[str, str], key: str) -> Optional[int]:
    raw = env.get(key, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None

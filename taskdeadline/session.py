"""Explicit current-user context passed to collaborators."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Session:
    """Authenticated user for the duration of one session.

    Attributes:
        user_id: ID of the logged-in user
        name: Display name
        role: Role label, e.g. "Văn thư"
        token: Bearer token for the REST backend, if any
        expires_at: When the session stops being valid (None for no expiry)
    """

    user_id: int
    name: str = ""
    role: str = ""
    token: Optional[str] = None
    expires_at: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now >= self.expires_at

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class Account:
    """Aggregate root for a user identity keyed by email address."""

    email: str
    password_hash: str
    first_name: str
    last_name: str
    auth_token: str | None = None
    token_created_at: datetime | None = None

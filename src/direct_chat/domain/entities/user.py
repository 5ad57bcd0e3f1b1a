from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class User:
    id: str
    username: str
    full_name: str
    profile_pic: str
    about: str
    is_online: bool
    last_active: datetime | None
    push_token: str
    created_at: datetime

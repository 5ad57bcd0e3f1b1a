from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Message:
    id: UUID
    sender_id: str
    receiver_id: str
    content: str
    type: str
    timestamp: datetime
    read_at: datetime | None = None

    @property
    def is_read(self) -> bool:
        return self.read_at is not None

    def involves(self, user_id: str) -> bool:
        return user_id in (self.sender_id, self.receiver_id)

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from direct_chat.domain.entities.message import Message


class MessageReader(Protocol):
    async def get_by_id(self, message_id: UUID) -> Message | None: ...

    async def list_between(
        self,
        user_a: str,
        user_b: str,
        *,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> list[Message]:
        """Messages exchanged by the pair, either direction, oldest first."""
        ...


class MessageWriter(Protocol):
    async def add(self, message: Message) -> Message: ...

    async def mark_read(self, message_id: UUID, read_at: datetime) -> bool:
        """Set read_at only if still unset. Return False when nothing changed."""
        ...

    async def update_content(self, message_id: UUID, content: str) -> Message | None: ...

    async def delete(self, message_id: UUID) -> bool: ...

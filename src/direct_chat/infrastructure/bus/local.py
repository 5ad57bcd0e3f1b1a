from __future__ import annotations

from direct_chat.application.dto.events import FanoutEvent
from direct_chat.infrastructure.ws.manager import ConnectionManager


class LocalPublisher:
    """In-process EventPublisher: hands events straight to the manager."""

    def __init__(self, manager: ConnectionManager) -> None:
        self._manager = manager

    async def publish(self, event: FanoutEvent) -> None:
        await self._manager.deliver(event)

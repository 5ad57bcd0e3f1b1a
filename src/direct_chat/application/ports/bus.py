from __future__ import annotations

from typing import Protocol

from direct_chat.application.dto.events import FanoutEvent


class EventPublisher(Protocol):
    async def publish(self, event: FanoutEvent) -> None: ...

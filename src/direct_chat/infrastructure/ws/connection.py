from __future__ import annotations

import uuid
from typing import Any

from fastapi import WebSocket

from direct_chat.application.dto.principal import Principal
from direct_chat.infrastructure.ws.protocol import encode


class Connection:
    """One authenticated socket and the rooms it has joined."""

    def __init__(self, websocket: WebSocket, principal: Principal) -> None:
        self.id = uuid.uuid4().hex
        self.websocket = websocket
        self.principal = principal
        self.rooms: set[str] = set()

    @property
    def user_id(self) -> str:
        return self.principal.user_id

    async def send(self, event_type: str, data: Any) -> None:
        await self.send_raw(encode(event_type, data))

    async def send_raw(self, raw: str) -> None:
        await self.websocket.send_text(raw)

    def __repr__(self) -> str:
        return f"<Connection {self.id} user={self.user_id}>"

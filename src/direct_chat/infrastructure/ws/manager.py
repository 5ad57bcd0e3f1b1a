"""In-process WebSocket connection manager."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from direct_chat.application.dto.events import FanoutEvent
from direct_chat.infrastructure.ws.connection import Connection
from direct_chat.infrastructure.ws.protocol import encode

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks live connections per user and room membership per connection."""

    def __init__(self) -> None:
        self._connections: dict[str, Connection] = {}
        self._by_user: dict[str, set[str]] = {}
        self._rooms: dict[str, set[str]] = {}

    def connect(self, connection: Connection) -> None:
        self._connections[connection.id] = connection
        self._by_user.setdefault(connection.user_id, set()).add(connection.id)
        logger.debug(
            "WS connected: %s (total=%d)", connection.user_id, len(self._connections)
        )

    def disconnect(self, connection: Connection) -> None:
        registered = self._connections.pop(connection.id, None) is not None
        conns = self._by_user.get(connection.user_id)
        if conns:
            conns.discard(connection.id)
            if not conns:
                del self._by_user[connection.user_id]
        for room in connection.rooms:
            members = self._rooms.get(room)
            if members:
                members.discard(connection.id)
                if not members:
                    del self._rooms[room]
        connection.rooms.clear()
        if registered:
            logger.debug("WS disconnected: %s", connection.user_id)

    def join(self, connection: Connection, room: str) -> bool:
        """Add a live connection to ``room``; dropped connections are refused."""
        if connection.id not in self._connections:
            return False
        connection.rooms.add(room)
        self._rooms.setdefault(room, set()).add(connection.id)
        return True

    def room_members(self, room: str) -> list[Connection]:
        return self._live(self._rooms.get(room, ()))

    def user_connections(self, user_id: str) -> list[Connection]:
        return self._live(self._by_user.get(user_id, ()))

    def _live(self, ids: Iterable[str]) -> list[Connection]:
        conns = (self._connections.get(cid) for cid in ids)
        return [c for c in conns if c is not None]

    def find_other_connections(self, user_id: str, excluding_room: str) -> list[Connection]:
        """Connections of ``user_id`` that have not joined ``excluding_room``."""
        return [
            conn
            for conn in self.user_connections(user_id)
            if excluding_room not in conn.rooms
        ]

    async def unicast(self, connection: Connection, event_type: str, data: Any) -> None:
        await self._send_all([connection], event_type, data)

    async def broadcast_to_room(self, room: str, event_type: str, data: Any) -> None:
        """Send to every connection currently joined to ``room``."""
        await self._send_all(self.room_members(room), event_type, data)

    async def send_outside_room(
        self,
        user_id: str,
        room: str,
        event_type: str,
        data: Any,
    ) -> None:
        targets = self.find_other_connections(user_id, room)
        if targets:
            logger.debug("Notifying %d connection(s) of %s", len(targets), user_id)
        await self._send_all(targets, event_type, data)

    async def deliver(self, event: FanoutEvent) -> None:
        if event.user_id is not None:
            await self.send_outside_room(event.user_id, event.room, event.event_type, event.data)
        else:
            await self.broadcast_to_room(event.room, event.event_type, event.data)

    async def _send_all(
        self,
        targets: list[Connection],
        event_type: str,
        data: Any,
    ) -> None:
        if not targets:
            return
        raw = encode(event_type, data)
        dead: list[Connection] = []
        for conn in targets:
            try:
                await conn.send_raw(raw)
            except Exception:
                logger.debug("WS send failed for %r", conn, exc_info=True)
                dead.append(conn)
        for conn in dead:
            self.disconnect(conn)

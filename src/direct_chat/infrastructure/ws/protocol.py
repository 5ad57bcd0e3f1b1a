"""WebSocket message envelope models."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class WsInbound(BaseModel):
    """Client → Server."""

    type: str  # join_room | send_message | update_message_read_status | ...
    data: Any = None


class WsOutbound(BaseModel):
    """Server → Client."""

    type: str  # chat_history | receive_message | message_read | chat_error | ...
    data: Any = None


def encode(event_type: str, data: Any) -> str:
    return WsOutbound(type=event_type, data=data).model_dump_json()

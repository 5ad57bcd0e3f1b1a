from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import UUID

from direct_chat.application.dto.events import FanoutEvent


class _Encoder(json.JSONEncoder):
    def default(self, o: object) -> Any:
        if isinstance(o, UUID):
            return str(o)
        if isinstance(o, datetime):
            return o.isoformat()
        return super().default(o)


def serialize_event(event: FanoutEvent) -> str:
    envelope = {
        "event": event.event_type,
        "data": event.data,
        "room": event.room,
        "user_id": event.user_id,
    }
    return json.dumps(envelope, cls=_Encoder)


def deserialize_event(raw: str | bytes) -> FanoutEvent:
    data = json.loads(raw)
    return FanoutEvent(
        event_type=data["event"],
        data=data["data"],
        room=data["room"],
        user_id=data.get("user_id"),
    )

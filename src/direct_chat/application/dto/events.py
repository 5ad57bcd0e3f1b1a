from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class FanoutEvent:
    """Outbound event addressed to a room.

    With ``user_id`` set the event goes only to that user's connections
    that are *not* joined to ``room``.
    """

    event_type: str
    data: Any
    room: str
    user_id: str | None = None

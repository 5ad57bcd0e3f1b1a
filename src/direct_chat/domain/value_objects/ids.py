from __future__ import annotations

from typing import NewType

# "<lower id>_<higher id>"; built only by domain.rooms.resolve_room.
RoomKey = NewType("RoomKey", str)

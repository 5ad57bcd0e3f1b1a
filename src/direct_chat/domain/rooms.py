"""Canonical room keys for two-party chats.

A room is never stored: its key is derived from the two participant ids,
and the same key doubles as the connection-group label for broadcasts.
"""
from __future__ import annotations

from direct_chat.domain.value_objects.ids import RoomKey

SEPARATOR = "_"


def _check_id(user_id: str) -> None:
    if not user_id:
        raise ValueError("user id must not be empty")
    if SEPARATOR in user_id:
        raise ValueError(f"user id must not contain {SEPARATOR!r}: {user_id!r}")


def resolve_room(user_a: str, user_b: str) -> RoomKey:
    """Return the order-independent room key for a pair of users."""
    _check_id(user_a)
    _check_id(user_b)
    first, second = sorted((user_a, user_b))
    return RoomKey(f"{first}{SEPARATOR}{second}")

"""Opaque cursors for paging through a chat timeline.

A cursor names the last message a client has seen:
base64url("<iso-timestamp>|<message-uuid>") with padding stripped.
"""
from __future__ import annotations

import base64
import binascii
from datetime import datetime
from uuid import UUID

from direct_chat.application.exceptions import ValidationError
from direct_chat.domain.entities.message import Message


def history_cursor(message: Message) -> str:
    raw = f"{message.timestamp.isoformat()}|{message.id}"
    return base64.urlsafe_b64encode(raw.encode()).decode().rstrip("=")


def parse_history_cursor(cursor: str) -> tuple[datetime, UUID]:
    padded = cursor + "=" * (-len(cursor) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode()).decode()
        ts_str, uid_str = raw.split("|", 1)
        return datetime.fromisoformat(ts_str), UUID(uid_str)
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise ValidationError("Invalid cursor") from exc

from __future__ import annotations

from enum import StrEnum


class MessageType(StrEnum):
    TEXT = "text"
    IMAGE = "image"

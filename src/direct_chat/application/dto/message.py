from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from direct_chat.domain.entities.message import Message
from direct_chat.domain.entities.user import User
from direct_chat.domain.value_objects.enums import MessageType


@dataclass(frozen=True, slots=True)
class SendMessageDTO:
    receiver_id: str
    content: str
    timestamp: datetime
    type: MessageType = MessageType.TEXT


@dataclass(frozen=True, slots=True)
class SentMessage:
    """A freshly persisted message with both participants resolved."""

    message: Message
    sender: User | None
    receiver: User


@dataclass(frozen=True, slots=True)
class ChatHistory:
    messages: list[Message]
    users: dict[str, User]

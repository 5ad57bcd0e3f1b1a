from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from pydantic import Field

from direct_chat.api.v1.schemas.common import CamelModel
from direct_chat.api.v1.schemas.user import UserBrief
from direct_chat.domain.entities.message import Message
from direct_chat.domain.entities.user import User
from direct_chat.domain.value_objects.enums import MessageType


class SendMessageRequest(CamelModel):
    receiver_id: str = Field(min_length=1)
    content: str = Field(min_length=1)
    timestamp: datetime
    type: MessageType


class UpdateMessageRequest(CamelModel):
    message_id: str = Field(min_length=1)
    new_content: str = Field(min_length=1)


class MessageResponse(CamelModel):
    id: str
    sender_id: str
    receiver_id: str
    content: str
    timestamp: datetime
    read_status: datetime | None
    type: str
    sender: UserBrief | None
    receiver: UserBrief | None

    @classmethod
    def from_entity(
        cls, message: Message, users: Mapping[str, User]
    ) -> MessageResponse:
        sender = users.get(message.sender_id)
        receiver = users.get(message.receiver_id)
        return cls(
            id=str(message.id),
            sender_id=message.sender_id,
            receiver_id=message.receiver_id,
            content=message.content,
            timestamp=message.timestamp,
            read_status=message.read_at,
            type=message.type,
            sender=UserBrief.from_entity(sender) if sender else None,
            receiver=UserBrief.from_entity(receiver) if receiver else None,
        )


class NotificationTrigger(CamelModel):
    sender_id: str
    sender_name: str
    message_content: str
    message_type: str
    receiver_id: str


class MessageReadEvent(CamelModel):
    message_id: str
    read_status: datetime


class MessageDeletedEvent(CamelModel):
    message_id: str


class MessageUpdatedEvent(CamelModel):
    message_id: str
    new_content: str
    timestamp: datetime


class MessagePage(CamelModel):
    items: list[MessageResponse]
    next_cursor: str | None = None

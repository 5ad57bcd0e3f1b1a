from __future__ import annotations

from direct_chat.domain.entities.message import Message
from direct_chat.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        sender_id=model.sender_id,
        receiver_id=model.receiver_id,
        content=model.content,
        type=model.type,
        timestamp=model.timestamp,
        read_at=model.read_at,
    )


def entity_to_model(entity: Message) -> MessageModel:
    return MessageModel(
        id=entity.id,
        sender_id=entity.sender_id,
        receiver_id=entity.receiver_id,
        content=entity.content,
        type=entity.type,
        timestamp=entity.timestamp,
        read_at=entity.read_at,
    )

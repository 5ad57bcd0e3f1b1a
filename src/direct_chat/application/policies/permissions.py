from __future__ import annotations

from direct_chat.application.dto.principal import Principal
from direct_chat.application.exceptions import ForbiddenError, NotFoundError
from direct_chat.domain.entities.message import Message
from direct_chat.domain.value_objects.enums import MessageType


def assert_message_exists(message: Message | None) -> Message:
    if message is None:
        raise NotFoundError("Message not found")
    return message


def assert_participant(principal: Principal, message: Message) -> None:
    if not message.involves(principal.user_id):
        raise ForbiddenError("You are not a participant of this chat.")


def assert_can_delete(principal: Principal, message: Message) -> None:
    if message.sender_id != principal.user_id:
        raise ForbiddenError("You are not authorized to delete this message.")


def assert_can_edit(principal: Principal, message: Message) -> None:
    if message.sender_id != principal.user_id or message.type != MessageType.TEXT:
        raise ForbiddenError(
            "You are not authorized to edit this message or it is not a text message."
        )

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import timezone

from direct_chat.application.dto.message import ChatHistory, SendMessageDTO, SentMessage
from direct_chat.application.dto.principal import Principal
from direct_chat.application.exceptions import NotFoundError, ValidationError
from direct_chat.application.policies.permissions import (
    assert_can_delete,
    assert_can_edit,
    assert_message_exists,
    assert_participant,
)
from direct_chat.application.ports.clock import Clock, SystemClock
from direct_chat.application.uow import UnitOfWork
from direct_chat.domain.entities.message import Message
from direct_chat.domain.rooms import resolve_room


async def send_message(
    principal: Principal,
    dto: SendMessageDTO,
    uow: UnitOfWork,
) -> SentMessage:
    """Persist a new unread message from the caller to ``dto.receiver_id``.

    The client-supplied timestamp is authoritative and stored as given
    (naive values are taken as UTC).
    """
    content = dto.content.strip()
    if not content or not dto.receiver_id:
        raise ValidationError("Invalid message data")
    if dto.receiver_id == principal.user_id:
        raise ValidationError("Invalid message data")
    try:
        resolve_room(principal.user_id, dto.receiver_id)
    except ValueError as exc:
        raise ValidationError("Invalid message data") from exc

    users = await uow.users.get_many([principal.user_id, dto.receiver_id])
    receiver = users.get(dto.receiver_id)
    if receiver is None:
        raise NotFoundError("Receiver not found")

    timestamp = dto.timestamp
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)

    msg = Message(
        id=uuid.uuid4(),
        sender_id=principal.user_id,
        receiver_id=receiver.id,
        content=content,
        type=dto.type.value,
        timestamp=timestamp,
        read_at=None,
    )
    msg = await uow.messages_w.add(msg)
    await uow.commit()

    return SentMessage(
        message=msg,
        sender=users.get(principal.user_id),
        receiver=receiver,
    )


async def get_history(
    principal: Principal,
    peer_id: str,
    uow: UnitOfWork,
    *,
    cursor: str | None = None,
    limit: int | None = None,
) -> ChatHistory:
    """Messages between the caller and ``peer_id``, oldest first."""
    try:
        resolve_room(principal.user_id, peer_id)
    except ValueError as exc:
        raise ValidationError("Invalid peer id") from exc

    messages = await uow.messages.list_between(
        principal.user_id, peer_id, cursor=cursor, limit=limit,
    )
    users = await uow.users.get_many([principal.user_id, peer_id])
    return ChatHistory(messages=messages, users=users)


async def mark_read(
    principal: Principal,
    message_id: uuid.UUID,
    uow: UnitOfWork,
    clock: Clock | None = None,
) -> Message | None:
    """Stamp the read time once.

    Returns the updated message, or None when there was nothing to do
    (unknown message, already read, or deleted meanwhile).
    """
    msg = await uow.messages.get_by_id(message_id)
    if msg is None or msg.is_read:
        return None
    assert_participant(principal, msg)

    read_at = (clock or SystemClock()).now()
    if not await uow.messages_w.mark_read(msg.id, read_at):
        return None
    await uow.commit()
    return replace(msg, read_at=read_at)


async def delete_message(
    principal: Principal,
    message_id: uuid.UUID,
    uow: UnitOfWork,
) -> Message:
    msg = assert_message_exists(await uow.messages.get_by_id(message_id))
    assert_can_delete(principal, msg)

    if not await uow.messages_w.delete(msg.id):
        raise NotFoundError("Message not found")
    await uow.commit()
    return msg


async def edit_message(
    principal: Principal,
    message_id: uuid.UUID,
    new_content: str,
    uow: UnitOfWork,
) -> Message:
    msg = assert_message_exists(await uow.messages.get_by_id(message_id))
    assert_can_edit(principal, msg)

    content = new_content.strip()
    if not content:
        raise ValidationError("Message content must not be empty")

    updated = await uow.messages_w.update_content(msg.id, content)
    if updated is None:
        raise NotFoundError("Message not found")
    await uow.commit()
    return updated

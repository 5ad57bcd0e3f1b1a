"""Per-connection chat event handling.

A ``ChatSession`` is created for every authenticated socket. The read loop
hands it inbound frames one at a time, so a client's commands are applied in
the order they were sent. Every handler follows the same shape: validate,
persist and commit through a fresh unit of work, then publish. Nothing is
published when the write fails.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Awaitable, Callable

from pydantic import ValidationError as PydanticValidationError

from direct_chat.api.v1.schemas.message import (
    MessageDeletedEvent,
    MessageReadEvent,
    MessageResponse,
    MessageUpdatedEvent,
    NotificationTrigger,
    SendMessageRequest,
    UpdateMessageRequest,
)
from direct_chat.application.dto.events import FanoutEvent
from direct_chat.application.dto.message import SendMessageDTO
from direct_chat.application.dto.principal import Principal
from direct_chat.application.exceptions import (
    AppError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from direct_chat.application.ports.bus import EventPublisher
from direct_chat.application.ports.clock import Clock, SystemClock
from direct_chat.application.uow import UoWFactory
from direct_chat.domain.rooms import resolve_room
from direct_chat.infrastructure.ws.connection import Connection
from direct_chat.infrastructure.ws.manager import ConnectionManager
from direct_chat.infrastructure.ws.protocol import WsInbound
from direct_chat.services import message_service

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[None]]

# Replies for unexpected failures; AppError details are sent as-is.
_FAILURE_REPLIES = {
    "join_room": "Failed to load chat history.",
    "send_message": "Failed to send message.",
    "update_message_read_status": "Failed to update read status.",
    "delete_message": "Failed to delete message.",
    "update_message": "Failed to update message.",
}


class ChatSession:
    def __init__(
        self,
        connection: Connection,
        manager: ConnectionManager,
        publisher: EventPublisher,
        uow_factory: UoWFactory,
        clock: Clock | None = None,
    ) -> None:
        self._conn = connection
        self._manager = manager
        self._publisher = publisher
        self._uow_factory = uow_factory
        self._clock = clock or SystemClock()
        self._handlers: dict[str, Handler] = {
            "join_room": self.join_room,
            "send_message": self.send_message,
            "update_message_read_status": self.update_message_read_status,
            "delete_message": self.delete_message,
            "update_message": self.update_message,
            "ping": self.ping,
        }

    @property
    def principal(self) -> Principal:
        return self._conn.principal

    async def handle_raw(self, raw: str) -> None:
        try:
            msg = WsInbound.model_validate_json(raw)
        except PydanticValidationError:
            await self._error("Invalid payload")
            return
        await self.dispatch(msg.type, msg.data)

    async def dispatch(self, event_type: str, data: Any) -> None:
        handler = self._handlers.get(event_type)
        if handler is None:
            await self._error(f"Unknown event: {event_type}")
            return
        try:
            await handler(data)
        except PersistenceError:
            logger.warning("%s: store write failed for %s", event_type, self.principal.user_id)
            await self._error(_FAILURE_REPLIES[event_type])
        except AppError as exc:
            await self._error(exc.detail)
        except Exception:
            logger.exception("%s failed for %s", event_type, self.principal.user_id)
            await self._error(_FAILURE_REPLIES.get(event_type, "Request failed."))

    async def ping(self, _data: Any) -> None:
        await self._manager.unicast(self._conn, "pong", {})

    async def join_room(self, data: Any) -> None:
        peer_id = data if isinstance(data, str) else None
        if not peer_id:
            raise ValidationError("Invalid peer id")
        try:
            room = resolve_room(self.principal.user_id, peer_id)
        except ValueError as exc:
            raise ValidationError("Invalid peer id") from exc

        if not self._manager.join(self._conn, room):
            logger.debug("Ignoring join_room from dropped connection %r", self._conn)
            return
        logger.info("%s joined room %s", self.principal.name, room)

        async with self._uow_factory() as uow:
            history = await message_service.get_history(self.principal, peer_id, uow)

        formatted = [
            MessageResponse.from_entity(m, history.users).to_wire()
            for m in history.messages
        ]
        await self._manager.unicast(self._conn, "chat_history", formatted)

    async def send_message(self, data: Any) -> None:
        try:
            req = SendMessageRequest.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError("Invalid message data") from exc

        dto = SendMessageDTO(
            receiver_id=req.receiver_id,
            content=req.content,
            timestamp=req.timestamp,
            type=req.type,
        )
        async with self._uow_factory() as uow:
            sent = await message_service.send_message(self.principal, dto, uow)

        msg = sent.message
        users = {sent.receiver.id: sent.receiver}
        if sent.sender is not None:
            users[sent.sender.id] = sent.sender
        room = resolve_room(msg.sender_id, msg.receiver_id)
        view = MessageResponse.from_entity(msg, users)

        await self._publisher.publish(FanoutEvent("receive_message", view.to_wire(), room))
        logger.info("Message sent in room %s (type=%s)", room, msg.type)

        sender_name = sent.sender.full_name if sent.sender else self.principal.name
        trigger = NotificationTrigger(
            sender_id=msg.sender_id,
            sender_name=sender_name,
            message_content=msg.content,
            message_type=msg.type,
            receiver_id=msg.receiver_id,
        )
        await self._publisher.publish(
            FanoutEvent(
                "trigger_local_notification",
                trigger.to_wire(),
                room,
                user_id=msg.receiver_id,
            )
        )

    async def update_message_read_status(self, data: Any) -> None:
        message_id = _parse_message_id(data)
        if message_id is None:
            return

        async with self._uow_factory() as uow:
            msg = await message_service.mark_read(self.principal, message_id, uow, self._clock)
        if msg is None or msg.read_at is None:
            return

        event = MessageReadEvent(message_id=str(msg.id), read_status=msg.read_at)
        await self._publisher.publish(
            FanoutEvent("message_read", event.to_wire(), resolve_room(msg.sender_id, msg.receiver_id))
        )

    async def delete_message(self, data: Any) -> None:
        message_id = _parse_message_id(data)
        if message_id is None:
            raise NotFoundError("Message not found")

        async with self._uow_factory() as uow:
            msg = await message_service.delete_message(self.principal, message_id, uow)

        event = MessageDeletedEvent(message_id=str(msg.id))
        await self._publisher.publish(
            FanoutEvent("message_deleted", event.to_wire(), resolve_room(msg.sender_id, msg.receiver_id))
        )
        logger.info("Message %s deleted", msg.id)

    async def update_message(self, data: Any) -> None:
        try:
            req = UpdateMessageRequest.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError("Invalid message data") from exc
        message_id = _parse_message_id(req.message_id)
        if message_id is None:
            raise NotFoundError("Message not found")

        async with self._uow_factory() as uow:
            msg = await message_service.edit_message(
                self.principal, message_id, req.new_content, uow,
            )

        event = MessageUpdatedEvent(
            message_id=str(msg.id),
            new_content=msg.content,
            timestamp=msg.timestamp,
        )
        await self._publisher.publish(
            FanoutEvent("message_updated", event.to_wire(), resolve_room(msg.sender_id, msg.receiver_id))
        )

    async def _error(self, detail: str) -> None:
        await self._manager.unicast(self._conn, "chat_error", detail)


def _parse_message_id(data: Any) -> uuid.UUID | None:
    if not isinstance(data, str) or not data:
        raise ValidationError("Invalid message id")
    try:
        return uuid.UUID(data)
    except ValueError:
        return None

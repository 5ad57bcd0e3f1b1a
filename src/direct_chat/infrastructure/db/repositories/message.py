from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from direct_chat.domain.entities.message import Message
from direct_chat.infrastructure.db.mappers import message as mapper
from direct_chat.infrastructure.db.models.message import MessageModel
from direct_chat.infrastructure.db.repositories._cursor import parse_history_cursor


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, message_id: UUID) -> Message | None:
        result = await self._session.get(MessageModel, message_id)
        return mapper.model_to_entity(result) if result else None

    async def list_between(
        self,
        user_a: str,
        user_b: str,
        *,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(
                or_(
                    and_(MessageModel.sender_id == user_a, MessageModel.receiver_id == user_b),
                    and_(MessageModel.sender_id == user_b, MessageModel.receiver_id == user_a),
                )
            )
            .order_by(MessageModel.timestamp.asc(), MessageModel.id.asc())
        )
        if cursor:
            ts, mid = parse_history_cursor(cursor)
            stmt = stmt.where(
                (MessageModel.timestamp > ts)
                | ((MessageModel.timestamp == ts) & (MessageModel.id > mid))
            )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, message: Message) -> Message:
        model = mapper.entity_to_model(message)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def mark_read(self, message_id: UUID, read_at: datetime) -> bool:
        # read_at is written at most once; a deleted row matches nothing.
        stmt = (
            update(MessageModel)
            .where(MessageModel.id == message_id, MessageModel.read_at.is_(None))
            .values(read_at=read_at)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def update_content(self, message_id: UUID, content: str) -> Message | None:
        stmt = (
            update(MessageModel)
            .where(MessageModel.id == message_id)
            .values(content=content)
            .returning(MessageModel)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def delete(self, message_id: UUID) -> bool:
        stmt = (
            delete(MessageModel)
            .where(MessageModel.id == message_id)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

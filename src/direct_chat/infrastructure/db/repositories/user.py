from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from direct_chat.domain.entities.user import User
from direct_chat.infrastructure.db.mappers import user as mapper
from direct_chat.infrastructure.db.models.user import UserModel


class UserReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: str) -> User | None:
        result = await self._session.get(UserModel, user_id)
        return mapper.model_to_entity(result) if result else None

    async def get_many(self, user_ids: Iterable[str]) -> dict[str, User]:
        ids = set(user_ids)
        if not ids:
            return {}
        stmt = select(UserModel).where(UserModel.id.in_(ids))
        result = await self._session.execute(stmt)
        return {m.id: mapper.model_to_entity(m) for m in result.scalars().all()}

    async def list_except(self, user_id: str) -> list[User]:
        stmt = (
            select(UserModel)
            .where(UserModel.id != user_id)
            .order_by(UserModel.full_name.asc(), UserModel.id.asc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class UserWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, user: User) -> User:
        model = mapper.entity_to_model(user)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def set_presence(
        self,
        user_id: str,
        online: bool,
        last_active: datetime,
    ) -> None:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(is_online=online, last_active=last_active)
        )
        await self._session.execute(stmt)

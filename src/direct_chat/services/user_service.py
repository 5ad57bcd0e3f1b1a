from __future__ import annotations

from direct_chat.application.dto.principal import Principal
from direct_chat.application.exceptions import NotFoundError
from direct_chat.application.uow import UnitOfWork
from direct_chat.domain.entities.user import User


async def list_contacts(principal: Principal, uow: UnitOfWork) -> list[User]:
    """Everyone the caller can start a chat with."""
    return await uow.users.list_except(principal.user_id)


async def get_user(user_id: str, uow: UnitOfWork) -> User:
    user = await uow.users.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user

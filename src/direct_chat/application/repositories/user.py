from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from direct_chat.domain.entities.user import User


class UserReader(Protocol):
    async def get_by_id(self, user_id: str) -> User | None: ...

    async def get_many(self, user_ids: Iterable[str]) -> dict[str, User]: ...

    async def list_except(self, user_id: str) -> list[User]: ...


class UserWriter(Protocol):
    async def add(self, user: User) -> User: ...

    async def set_presence(
        self, user_id: str, online: bool, last_active: datetime
    ) -> None: ...

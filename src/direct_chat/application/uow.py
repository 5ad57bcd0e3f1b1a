from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Callable, Protocol

from direct_chat.application.repositories.message import MessageReader, MessageWriter
from direct_chat.application.repositories.user import UserReader, UserWriter


class UnitOfWork(Protocol):
    users: UserReader
    users_w: UserWriter
    messages: MessageReader
    messages_w: MessageWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...


UoWFactory = Callable[[], AbstractAsyncContextManager[UnitOfWork]]

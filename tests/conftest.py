"""Shared test fixtures."""
from __future__ import annotations

import json
import uuid
from collections.abc import Iterable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncIterator
from uuid import UUID

import pytest

from direct_chat.application.dto.principal import Principal
from direct_chat.application.exceptions import PersistenceError
from direct_chat.domain.entities.message import Message
from direct_chat.domain.entities.user import User
from direct_chat.domain.value_objects.enums import MessageType
from direct_chat.infrastructure.db.repositories._cursor import parse_history_cursor

ALICE_ID = "a1a1a1a1a1a1a1a1a1a1a1a1a1a1a1a1"
BOB_ID = "b2b2b2b2b2b2b2b2b2b2b2b2b2b2b2b2"
CAROL_ID = "c3c3c3c3c3c3c3c3c3c3c3c3c3c3c3c3"

T0 = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_user(user_id: str, full_name: str, *, username: str | None = None) -> User:
    return User(
        id=user_id,
        username=username or full_name.split()[0].lower(),
        full_name=full_name,
        profile_pic=f"https://cdn.example.com/{user_id}.png",
        about="Hey, I'm using Direct Chat!",
        is_online=False,
        last_active=None,
        push_token="",
        created_at=T0,
    )


def make_message(
    *,
    sender_id: str = ALICE_ID,
    receiver_id: str = BOB_ID,
    content: str = "hello",
    type: str = MessageType.TEXT,
    timestamp: datetime | None = None,
    read_at: datetime | None = None,
) -> Message:
    return Message(
        id=uuid.uuid4(),
        sender_id=sender_id,
        receiver_id=receiver_id,
        content=content,
        type=type,
        timestamp=timestamp or T0,
        read_at=read_at,
    )


@pytest.fixture
def alice() -> Principal:
    return Principal(user_id=ALICE_ID, username="alice", display_name="Alice Liddell")


@pytest.fixture
def bob() -> Principal:
    return Principal(user_id=BOB_ID, username="bob", display_name="Bob Marley")


@pytest.fixture
def carol() -> Principal:
    return Principal(user_id=CAROL_ID, username="carol", display_name="Carol Danvers")


class FixedClock:
    def __init__(self, now: datetime = T0 + timedelta(hours=1)) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@dataclass
class FakeUserReader:
    _store: dict[str, User] = field(default_factory=dict)

    async def get_by_id(self, user_id: str) -> User | None:
        return self._store.get(user_id)

    async def get_many(self, user_ids: Iterable[str]) -> dict[str, User]:
        return {uid: self._store[uid] for uid in set(user_ids) if uid in self._store}

    async def list_except(self, user_id: str) -> list[User]:
        users = [u for u in self._store.values() if u.id != user_id]
        return sorted(users, key=lambda u: (u.full_name, u.id))


@dataclass
class FakeUserWriter:
    _reader: FakeUserReader
    presence_log: list[tuple[str, bool, datetime]] = field(default_factory=list)

    async def add(self, user: User) -> User:
        self._reader._store[user.id] = user
        return user

    async def set_presence(self, user_id: str, online: bool, last_active: datetime) -> None:
        self.presence_log.append((user_id, online, last_active))
        user = self._reader._store.get(user_id)
        if user is not None:
            self._reader._store[user_id] = replace(
                user, is_online=online, last_active=last_active,
            )


@dataclass
class FakeMessageReader:
    _messages: dict[UUID, Message] = field(default_factory=dict)

    async def get_by_id(self, message_id: UUID) -> Message | None:
        return self._messages.get(message_id)

    async def list_between(
        self,
        user_a: str,
        user_b: str,
        *,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> list[Message]:
        pair = {user_a, user_b}
        found = [
            m for m in self._messages.values()
            if {m.sender_id, m.receiver_id} == pair
        ]
        found.sort(key=lambda m: (m.timestamp, m.id))
        if cursor:
            after = parse_history_cursor(cursor)
            found = [m for m in found if (m.timestamp, m.id) > after]
        return found[:limit] if limit is not None else found


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader
    writes: list[tuple[str, UUID]] = field(default_factory=list)

    async def add(self, message: Message) -> Message:
        self._reader._messages[message.id] = message
        self.writes.append(("add", message.id))
        return message

    async def mark_read(self, message_id: UUID, read_at: datetime) -> bool:
        msg = self._reader._messages.get(message_id)
        if msg is None or msg.read_at is not None:
            return False
        self._reader._messages[message_id] = replace(msg, read_at=read_at)
        self.writes.append(("mark_read", message_id))
        return True

    async def update_content(self, message_id: UUID, content: str) -> Message | None:
        msg = self._reader._messages.get(message_id)
        if msg is None:
            return None
        updated = replace(msg, content=content)
        self._reader._messages[message_id] = updated
        self.writes.append(("update_content", message_id))
        return updated

    async def delete(self, message_id: UUID) -> bool:
        if self._reader._messages.pop(message_id, None) is None:
            return False
        self.writes.append(("delete", message_id))
        return True


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    users: FakeUserReader = field(default_factory=FakeUserReader)
    users_w: FakeUserWriter | None = None
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    commits: int = 0
    fail_commit: bool = False

    def __post_init__(self) -> None:
        if self.users_w is None:
            self.users_w = FakeUserWriter(self.users)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)

    def add_users(self, *users: User) -> None:
        for user in users:
            self.users._store[user.id] = user

    def add_messages(self, *messages: Message) -> None:
        for msg in messages:
            self.messages._messages[msg.id] = msg

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        if self.fail_commit:
            raise PersistenceError("Storage unavailable")
        self.commits += 1

    async def rollback(self) -> None:
        pass


def fake_uow_factory(uow: FakeUoW):
    """Mimics open_uow(): every call hands out the same in-memory UoW."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUoW]:
        yield uow

    return _factory


@pytest.fixture
def uow() -> FakeUoW:
    store = FakeUoW()
    store.add_users(
        make_user(ALICE_ID, "Alice Liddell"),
        make_user(BOB_ID, "Bob Marley"),
        make_user(CAROL_ID, "Carol Danvers"),
    )
    return store


class FakeWebSocket:
    """Records frames the server sends; enough of Starlette's WebSocket for Connection."""

    def __init__(self, *, broken: bool = False) -> None:
        self.sent: list[str] = []
        self.broken = broken

    async def send_text(self, data: str) -> None:
        if self.broken:
            raise RuntimeError("socket is closed")
        self.sent.append(data)

    def events(self, event_type: str | None = None) -> list[dict[str, Any]]:
        frames = [json.loads(raw) for raw in self.sent]
        if event_type is None:
            return frames
        return [f for f in frames if f["type"] == event_type]

"""Seed development data: two users, a short chat, and tokens to log in with."""
from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timedelta, timezone

from direct_chat.config import settings
from direct_chat.domain.entities.message import Message
from direct_chat.domain.entities.user import User
from direct_chat.domain.value_objects.enums import MessageType
from direct_chat.infrastructure.auth.tokens import issue_token
from direct_chat.infrastructure.db.uow import open_uow
from direct_chat.logging_config import configure_logging

logger = logging.getLogger(__name__)


def _user(username: str, full_name: str, now: datetime) -> User:
    return User(
        id=uuid.uuid4().hex,
        username=username,
        full_name=full_name,
        profile_pic="",
        about="Hey, I'm using Direct Chat!",
        is_online=False,
        last_active=None,
        push_token="",
        created_at=now,
    )


async def seed() -> None:
    now = datetime.now(timezone.utc)
    alice = _user("alice", "Alice Liddell", now)
    bob = _user("bob", "Bob Marley", now)

    async with open_uow() as uow:
        await uow.users_w.add(alice)
        await uow.users_w.add(bob)

        messages_data = [
            (alice, bob, "Hi Bob!"),
            (bob, alice, "Hey Alice, what's up?"),
            (alice, bob, "Testing the new chat backend."),
        ]
        for offset, (sender, receiver, content) in enumerate(messages_data):
            await uow.messages_w.add(
                Message(
                    id=uuid.uuid4(),
                    sender_id=sender.id,
                    receiver_id=receiver.id,
                    content=content,
                    type=MessageType.TEXT,
                    timestamp=now + timedelta(seconds=offset),
                )
            )

        await uow.commit()

    logger.info("Seeded %d messages between %s and %s", len(messages_data), alice.id, bob.id)
    for user in (alice, bob):
        token = issue_token(
            user,
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            expires_in=timedelta(days=settings.JWT_EXPIRES_DAYS),
        )
        print(f"{user.username} ({user.id}): Bearer {token}")


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    asyncio.run(seed())


if __name__ == "__main__":
    main()

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from direct_chat.application.dto.message import SendMessageDTO
from direct_chat.application.exceptions import (
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from direct_chat.domain.value_objects.enums import MessageType
from direct_chat.services import message_service
from tests.conftest import ALICE_ID, BOB_ID, CAROL_ID, T0, make_message


def _dto(receiver_id: str = BOB_ID, content: str = "hi", **kwargs) -> SendMessageDTO:
    return SendMessageDTO(
        receiver_id=receiver_id,
        content=content,
        timestamp=kwargs.pop("timestamp", T0),
        type=kwargs.pop("type", MessageType.TEXT),
    )


@pytest.mark.asyncio
async def test_send_message_persists_unread_message(alice, uow):
    sent = await message_service.send_message(alice, _dto(), uow)

    assert sent.message.sender_id == ALICE_ID
    assert sent.message.receiver_id == BOB_ID
    assert sent.message.read_at is None
    assert sent.message.timestamp == T0
    assert sent.receiver.id == BOB_ID
    assert sent.sender is not None and sent.sender.id == ALICE_ID
    assert uow.commits == 1

    history = await uow.messages.list_between(ALICE_ID, BOB_ID)
    assert [m.id for m in history] == [sent.message.id]


@pytest.mark.asyncio
async def test_send_message_unknown_receiver(alice, uow):
    with pytest.raises(NotFoundError):
        await message_service.send_message(alice, _dto(receiver_id="deadbeef"), uow)

    assert uow.messages_w.writes == []
    assert uow.commits == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "dto",
    [
        _dto(content="   "),
        _dto(receiver_id=""),
        _dto(receiver_id=ALICE_ID),
        _dto(receiver_id="bad_id"),
    ],
)
async def test_send_message_rejects_invalid_data(alice, uow, dto):
    with pytest.raises(ValidationError):
        await message_service.send_message(alice, dto, uow)

    assert uow.messages_w.writes == []


@pytest.mark.asyncio
async def test_send_message_treats_naive_timestamp_as_utc(alice, uow):
    sent = await message_service.send_message(
        alice, _dto(timestamp=datetime(2025, 3, 1, 12, 0)), uow,
    )
    assert sent.message.timestamp == T0


@pytest.mark.asyncio
async def test_send_image_message(alice, uow):
    sent = await message_service.send_message(
        alice, _dto(content="uploads/cat.png", type=MessageType.IMAGE), uow,
    )
    assert sent.message.type == "image"


@pytest.mark.asyncio
async def test_history_is_ascending_and_same_for_both_sides(alice, bob, uow):
    later = make_message(sender_id=BOB_ID, receiver_id=ALICE_ID, timestamp=T0 + timedelta(minutes=5))
    first = make_message(timestamp=T0)
    middle = make_message(timestamp=T0 + timedelta(minutes=1))
    unrelated = make_message(receiver_id=CAROL_ID, timestamp=T0 + timedelta(minutes=2))
    uow.add_messages(later, first, middle, unrelated)

    from_alice = await message_service.get_history(alice, BOB_ID, uow)
    from_bob = await message_service.get_history(bob, ALICE_ID, uow)

    assert [m.id for m in from_alice.messages] == [first.id, middle.id, later.id]
    assert [m.id for m in from_bob.messages] == [m.id for m in from_alice.messages]
    assert set(from_alice.users) == {ALICE_ID, BOB_ID}


@pytest.mark.asyncio
async def test_history_rejects_bad_peer(alice, uow):
    with pytest.raises(ValidationError):
        await message_service.get_history(alice, "x_y", uow)


@pytest.mark.asyncio
async def test_mark_read_sets_timestamp_once(bob, uow, clock):
    msg = make_message()
    uow.add_messages(msg)

    updated = await message_service.mark_read(bob, msg.id, uow, clock)

    assert updated is not None
    assert updated.read_at == clock.now()
    assert (await uow.messages.get_by_id(msg.id)).read_at == clock.now()
    assert uow.commits == 1


@pytest.mark.asyncio
async def test_mark_read_on_read_message_is_noop(bob, uow, clock):
    earlier = T0 + timedelta(minutes=1)
    msg = make_message(read_at=earlier)
    uow.add_messages(msg)

    assert await message_service.mark_read(bob, msg.id, uow, clock) is None
    assert (await uow.messages.get_by_id(msg.id)).read_at == earlier
    assert uow.messages_w.writes == []
    assert uow.commits == 0


@pytest.mark.asyncio
async def test_mark_read_unknown_message_is_noop(bob, uow, clock):
    assert await message_service.mark_read(bob, uuid.uuid4(), uow, clock) is None
    assert uow.commits == 0


@pytest.mark.asyncio
async def test_mark_read_requires_participant(carol, uow, clock):
    msg = make_message()
    uow.add_messages(msg)

    with pytest.raises(ForbiddenError):
        await message_service.mark_read(carol, msg.id, uow, clock)
    assert (await uow.messages.get_by_id(msg.id)).read_at is None


@pytest.mark.asyncio
async def test_delete_by_sender(alice, uow):
    msg = make_message()
    uow.add_messages(msg)

    deleted = await message_service.delete_message(alice, msg.id, uow)

    assert deleted.id == msg.id
    assert await uow.messages.get_by_id(msg.id) is None
    assert uow.commits == 1


@pytest.mark.asyncio
async def test_delete_by_receiver_is_forbidden(bob, uow):
    msg = make_message()
    uow.add_messages(msg)

    with pytest.raises(ForbiddenError):
        await message_service.delete_message(bob, msg.id, uow)

    assert await uow.messages.get_by_id(msg.id) == msg
    assert uow.messages_w.writes == []


@pytest.mark.asyncio
async def test_delete_unknown_message(alice, uow):
    with pytest.raises(NotFoundError):
        await message_service.delete_message(alice, uuid.uuid4(), uow)


@pytest.mark.asyncio
async def test_edit_text_message_keeps_timestamp(alice, uow):
    msg = make_message(content="helo", timestamp=T0)
    uow.add_messages(msg)

    updated = await message_service.edit_message(alice, msg.id, " hello ", uow)

    assert updated.content == "hello"
    assert updated.timestamp == T0
    assert uow.commits == 1


@pytest.mark.asyncio
async def test_edit_by_non_sender_is_forbidden(bob, uow):
    msg = make_message()
    uow.add_messages(msg)

    with pytest.raises(ForbiddenError):
        await message_service.edit_message(bob, msg.id, "hijacked", uow)
    assert (await uow.messages.get_by_id(msg.id)).content == "hello"


@pytest.mark.asyncio
async def test_edit_image_message_is_forbidden_even_for_sender(alice, uow):
    msg = make_message(content="uploads/cat.png", type=MessageType.IMAGE)
    uow.add_messages(msg)

    with pytest.raises(ForbiddenError):
        await message_service.edit_message(alice, msg.id, "uploads/dog.png", uow)
    assert uow.messages_w.writes == []


@pytest.mark.asyncio
async def test_edit_to_empty_content_is_rejected(alice, uow):
    msg = make_message()
    uow.add_messages(msg)

    with pytest.raises(ValidationError):
        await message_service.edit_message(alice, msg.id, "  ", uow)

from __future__ import annotations

from fastapi import APIRouter, Query

from direct_chat.api.deps import CurrentPrincipal, UoWDep
from direct_chat.api.v1.schemas.message import MessagePage, MessageResponse
from direct_chat.infrastructure.db.repositories._cursor import history_cursor
from direct_chat.services import message_service

router = APIRouter(prefix="/api/v1/chats", tags=["messages"])


@router.get("/{peer_id}/messages", response_model=MessagePage)
async def list_messages(
    peer_id: str,
    principal: CurrentPrincipal,
    uow: UoWDep,
    cursor: str | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
) -> MessagePage:
    """Page through a conversation oldest first; pass ``nextCursor`` back to continue."""
    history = await message_service.get_history(
        principal, peer_id, uow, cursor=cursor, limit=limit,
    )
    items = [MessageResponse.from_entity(m, history.users) for m in history.messages]
    next_cursor = None
    if len(history.messages) == limit:
        next_cursor = history_cursor(history.messages[-1])
    return MessagePage(items=items, next_cursor=next_cursor)

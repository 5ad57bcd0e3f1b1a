from __future__ import annotations

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect

from direct_chat.api.deps import (
    get_manager,
    get_publisher,
    get_uow_factory,
    get_verifier,
)
from direct_chat.api.v1.ws_session import ChatSession
from direct_chat.application.dto.principal import Principal
from direct_chat.application.exceptions import AuthError
from direct_chat.application.ports.auth import TokenVerifier
from direct_chat.application.ports.bus import EventPublisher
from direct_chat.application.uow import UoWFactory
from direct_chat.config import settings
from direct_chat.infrastructure.ws.connection import Connection
from direct_chat.infrastructure.ws.manager import ConnectionManager
from direct_chat.infrastructure.ws.protocol import encode
from direct_chat.services import auth_service, presence_service

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])

AUTH_FAILED_CLOSE_CODE = 4001


async def _authenticate(
    websocket: WebSocket,
    verifier: TokenVerifier,
    claimed_user_id: str | None,
) -> Principal | None:
    try:
        return await auth_service.authenticate(
            websocket.headers.get("authorization"),
            verifier,
            claimed_user_id=claimed_user_id,
        )
    except AuthError as exc:
        logger.warning("WS authentication error: %s", exc.detail)
        await websocket.accept()
        await websocket.send_text(encode("auth_error", exc.detail))
        await websocket.close(code=AUTH_FAILED_CLOSE_CODE, reason="Authentication failed")
        return None


@router.websocket("/ws/chat")
async def ws_chat(
    websocket: WebSocket,
    verifier: Annotated[TokenVerifier, Depends(get_verifier)],
    manager: Annotated[ConnectionManager, Depends(get_manager)],
    publisher: Annotated[EventPublisher, Depends(get_publisher)],
    uow_factory: Annotated[UoWFactory, Depends(get_uow_factory)],
    user_id: str | None = Query(None, alias="userId"),
) -> None:
    principal = await _authenticate(websocket, verifier, user_id)
    if principal is None:
        return

    await websocket.accept()
    connection = Connection(websocket, principal)
    manager.connect(connection)
    logger.info("User connected: %s (ID: %s)", principal.name, principal.user_id)
    await _set_presence(uow_factory, principal.user_id, online=True)

    session = ChatSession(connection, manager, publisher, uow_factory)
    heartbeat_task = asyncio.create_task(
        _heartbeat(connection), name=f"ws-heartbeat-{connection.id}",
    )
    try:
        while True:
            raw = await websocket.receive_text()
            await session.handle_raw(raw)
    except WebSocketDisconnect as exc:
        logger.info("User disconnected: %s (code=%s)", principal.user_id, exc.code)
    except Exception:
        logger.exception("WS error for %s", principal.user_id)
    finally:
        heartbeat_task.cancel()
        manager.disconnect(connection)
        await _set_presence(uow_factory, principal.user_id, online=False)


async def _set_presence(uow_factory: UoWFactory, user_id: str, *, online: bool) -> None:
    try:
        async with uow_factory() as uow:
            if online:
                await presence_service.mark_online(user_id, uow)
            else:
                await presence_service.mark_offline(user_id, uow)
    except Exception:
        logger.exception(
            "Error updating online status for %s on %s",
            user_id,
            "connect" if online else "disconnect",
        )


async def _heartbeat(connection: Connection) -> None:
    interval = settings.WS_HEARTBEAT_SECONDS
    try:
        while True:
            await asyncio.sleep(interval)
            await connection.send("pong", {})
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.debug("Heartbeat stopped for %r", connection, exc_info=True)

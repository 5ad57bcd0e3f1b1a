"""Online flag and last-active bookkeeping.

Only the WebSocket session lifecycle calls into this module, which keeps a
single writer per user for ``is_online`` / ``last_active``.
"""
from __future__ import annotations

import logging
from datetime import datetime

from direct_chat.application.ports.clock import Clock, SystemClock
from direct_chat.application.uow import UnitOfWork

logger = logging.getLogger(__name__)


async def _set_presence(
    user_id: str, online: bool, uow: UnitOfWork, clock: Clock | None,
) -> datetime:
    now = (clock or SystemClock()).now()
    await uow.users_w.set_presence(user_id, online, now)
    await uow.commit()
    logger.debug("Presence %s -> %s", user_id, "online" if online else "offline")
    return now


async def mark_online(
    user_id: str, uow: UnitOfWork, clock: Clock | None = None,
) -> datetime:
    return await _set_presence(user_id, True, uow, clock)


async def mark_offline(
    user_id: str, uow: UnitOfWork, clock: Clock | None = None,
) -> datetime:
    return await _set_presence(user_id, False, uow, clock)

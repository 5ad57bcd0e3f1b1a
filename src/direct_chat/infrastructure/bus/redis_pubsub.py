"""Cross-instance fan-out over one Redis Pub/Sub channel.

Every instance publishes chat events to the channel and every instance
(including the publisher) delivers what it hears to its own sockets.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Coroutine

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from direct_chat.application.dto.events import FanoutEvent
from direct_chat.infrastructure.bus.serializer import deserialize_event, serialize_event

logger = logging.getLogger(__name__)

RECONNECT_DELAY_SECONDS = 1.0
MAX_RECONNECT_DELAY_SECONDS = 30.0


class RedisPubSubPublisher:
    """EventPublisher backed by ``PUBLISH``."""

    def __init__(self, redis: aioredis.Redis, channel: str) -> None:
        self._redis = redis
        self._channel = channel

    async def publish(self, event: FanoutEvent) -> None:
        receivers = await self._redis.publish(self._channel, serialize_event(event))
        logger.debug("Published %s to %d subscriber(s)", event.event_type, receivers)


OnEventCallback = Callable[[FanoutEvent], Coroutine[Any, Any, None]]


class RedisPubSubSubscriber:
    def __init__(
        self,
        redis: aioredis.Redis,
        channel: str,
        callback: OnEventCallback,
        *,
        reconnect_delay: float = RECONNECT_DELAY_SECONDS,
    ) -> None:
        self._redis = redis
        self._channel = channel
        self._callback = callback
        self._reconnect_delay = reconnect_delay
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        self._task = asyncio.create_task(self._run(), name="redis-pubsub-subscriber")
        logger.info("Fan-out subscriber started on channel=%s", self._channel)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Fan-out subscriber stopped")

    async def _run(self) -> None:
        delay = self._reconnect_delay
        while True:
            try:
                await self._listen()
            except (RedisError, OSError) as exc:
                logger.warning(
                    "Lost Redis subscription on %s (%s), retrying in %.1fs",
                    self._channel,
                    exc,
                    delay,
                )
            except Exception:
                logger.exception(
                    "Fan-out subscriber failed on %s, retrying in %.1fs",
                    self._channel,
                    delay,
                )
            else:
                logger.info("Redis subscription on %s ended, resubscribing", self._channel)
                await asyncio.sleep(self._reconnect_delay)
                delay = self._reconnect_delay
                continue
            await asyncio.sleep(delay)
            delay = min(delay * 2, MAX_RECONNECT_DELAY_SECONDS)

    async def _listen(self) -> None:
        pubsub = self._redis.pubsub()
        await pubsub.subscribe(self._channel)
        try:
            async for message in pubsub.listen():
                if message["type"] != "message":
                    continue
                try:
                    await self._callback(deserialize_event(message["data"]))
                except Exception:
                    logger.exception("Error delivering fan-out event")
        finally:
            await pubsub.aclose()

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from direct_chat.api.middleware.correlation_id import CorrelationIdMiddleware
from direct_chat.api.middleware.metrics import RequestTimingMiddleware
from direct_chat.api.v1.routers import health, messages, users, ws
from direct_chat.application.exceptions import (
    AuthError,
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from direct_chat.config import settings
from direct_chat.infrastructure.bus.local import LocalPublisher
from direct_chat.infrastructure.bus.redis_pubsub import (
    RedisPubSubPublisher,
    RedisPubSubSubscriber,
)
from direct_chat.infrastructure.db.session import dispose_engine
from direct_chat.infrastructure.ws.manager import ConnectionManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    subscriber: RedisPubSubSubscriber | None = None
    if settings.FANOUT_BACKEND == "redis":
        app.state.redis = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
        )
        logger.info("Redis connection pool created")

        subscriber = RedisPubSubSubscriber(
            app.state.redis,
            settings.REDIS_PUBSUB_CHANNEL,
            app.state.manager.deliver,
        )
        await subscriber.start()
        app.state.publisher = RedisPubSubPublisher(
            app.state.redis, settings.REDIS_PUBSUB_CHANNEL,
        )
    else:
        logger.info("Fan-out is in-process only")

    yield

    if subscriber is not None:
        await subscriber.stop()
        await app.state.redis.aclose()
        app.state.redis = None
        logger.info("Redis connection pool closed")
    await dispose_engine()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Direct Chat Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    manager = ConnectionManager()
    app.state.manager = manager
    app.state.publisher = LocalPublisher(manager)
    app.state.redis = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(messages.router)
    app.include_router(ws.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthError)
    async def _unauthorized(_req: Request, exc: AuthError) -> JSONResponse:
        return JSONResponse(status_code=401, content={"detail": exc.detail})

    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ForbiddenError)
    async def _forbidden(_req: Request, exc: ForbiddenError) -> JSONResponse:
        return JSONResponse(status_code=403, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})

    @app.exception_handler(PersistenceError)
    async def _unavailable(_req: Request, exc: PersistenceError) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": exc.detail})

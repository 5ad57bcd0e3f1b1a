"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, HTTPException, WebSocket, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from direct_chat.application.dto.principal import Principal
from direct_chat.application.exceptions import AuthError
from direct_chat.application.ports.auth import TokenVerifier
from direct_chat.application.ports.bus import EventPublisher
from direct_chat.application.uow import UoWFactory
from direct_chat.config import settings
from direct_chat.infrastructure.auth.hs256_verifier import HS256Verifier
from direct_chat.infrastructure.auth.jwks_verifier import JWKSVerifier
from direct_chat.infrastructure.db.session import AsyncSessionLocal
from direct_chat.infrastructure.db.uow import SqlAlchemyUoW, open_uow
from direct_chat.infrastructure.ws.manager import ConnectionManager

_bearer_scheme = HTTPBearer()


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)
        try:
            yield uow
        finally:
            await session.close()


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]


def get_uow_factory() -> UoWFactory:
    """WebSocket handlers open one UoW per event instead of per request."""
    return open_uow


def _get_verifier() -> TokenVerifier:
    if settings.JWT_VERIFY_MODE == "jwks":
        assert settings.JWKS_URL, "JWKS_URL must be set when JWT_VERIFY_MODE=jwks"
        return JWKSVerifier(settings.JWKS_URL)
    return HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)


_verifier: TokenVerifier | None = None


def get_verifier() -> TokenVerifier:
    global _verifier  # noqa: PLW0603
    if _verifier is None:
        _verifier = _get_verifier()
    return _verifier


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(_bearer_scheme)],
    verifier: Annotated[TokenVerifier, Depends(get_verifier)],
) -> Principal:
    try:
        return await verifier.verify(credentials.credentials)
    except AuthError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=exc.detail,
        ) from exc


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


def get_manager(websocket: WebSocket) -> ConnectionManager:
    return websocket.app.state.manager


def get_publisher(websocket: WebSocket) -> EventPublisher:
    return websocket.app.state.publisher

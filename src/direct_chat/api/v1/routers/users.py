from __future__ import annotations

from fastapi import APIRouter

from direct_chat.api.deps import CurrentPrincipal, UoWDep
from direct_chat.api.v1.schemas.user import UserResponse
from direct_chat.services import user_service

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(principal: CurrentPrincipal, uow: UoWDep) -> list[UserResponse]:
    users = await user_service.list_contacts(principal, uow)
    return [UserResponse.from_entity(u) for u in users]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    _principal: CurrentPrincipal,
    uow: UoWDep,
) -> UserResponse:
    user = await user_service.get_user(user_id, uow)
    return UserResponse.from_entity(user)

from __future__ import annotations

from datetime import datetime

from direct_chat.api.v1.schemas.common import CamelModel
from direct_chat.domain.entities.user import User


class UserBrief(CamelModel):
    id: str
    full_name: str
    profile_pic: str

    @classmethod
    def from_entity(cls, user: User) -> UserBrief:
        return cls(id=user.id, full_name=user.full_name, profile_pic=user.profile_pic)


class UserResponse(CamelModel):
    id: str
    username: str
    full_name: str
    profile_pic: str
    about: str
    is_online: bool
    last_active: datetime | None
    created_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> UserResponse:
        return cls(
            id=user.id,
            username=user.username,
            full_name=user.full_name,
            profile_pic=user.profile_pic,
            about=user.about,
            is_online=user.is_online,
            last_active=user.last_active,
            created_at=user.created_at,
        )

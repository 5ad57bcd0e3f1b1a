from __future__ import annotations

from direct_chat.domain.entities.user import User
from direct_chat.infrastructure.db.models.user import UserModel


def model_to_entity(model: UserModel) -> User:
    return User(
        id=model.id,
        username=model.username,
        full_name=model.full_name,
        profile_pic=model.profile_pic,
        about=model.about,
        is_online=model.is_online,
        last_active=model.last_active,
        push_token=model.push_token,
        created_at=model.created_at,
    )


def entity_to_model(entity: User) -> UserModel:
    return UserModel(
        id=entity.id,
        username=entity.username,
        full_name=entity.full_name,
        profile_pic=entity.profile_pic,
        about=entity.about,
        is_online=entity.is_online,
        last_active=entity.last_active,
        push_token=entity.push_token,
        created_at=entity.created_at,
    )

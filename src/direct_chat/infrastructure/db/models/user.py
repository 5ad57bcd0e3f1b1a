from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from direct_chat.infrastructure.db.base import Base


def _new_user_id() -> str:
    return uuid.uuid4().hex


class UserModel(Base):
    __tablename__ = "users"

    # Hex ids never contain the room key separator.
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_user_id)
    username: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(128), nullable=False)
    profile_pic: Mapped[str] = mapped_column(Text, nullable=False, default="")
    about: Mapped[str] = mapped_column(
        Text, nullable=False, default="Hey, I'm using Direct Chat!"
    )
    is_online: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    last_active: Mapped[datetime | None] = mapped_column(
        TIMESTAMP(timezone=True), nullable=True
    )
    push_token: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )

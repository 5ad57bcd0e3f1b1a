from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from direct_chat.domain.entities.user import User


def issue_token(
    user: User,
    secret: str,
    *,
    algorithm: str = "HS256",
    expires_in: timedelta = timedelta(days=7),
    now: datetime | None = None,
) -> str:
    """Mint a token in the layout the verifiers read (``user`` claim)."""
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "user": {
            "id": user.id,
            "username": user.username,
            "fullName": user.full_name,
        },
        "iat": issued_at,
        "exp": issued_at + expires_in,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)

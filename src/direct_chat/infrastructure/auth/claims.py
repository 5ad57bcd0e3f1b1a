from __future__ import annotations

from typing import Any

from direct_chat.application.dto.principal import Principal
from direct_chat.application.exceptions import InvalidCredentialError


def principal_from_claims(payload: dict[str, Any]) -> Principal:
    """Build a Principal from either ``{"user": {...}}`` or flat ``sub`` claims."""
    user = payload.get("user")
    if isinstance(user, dict):
        user_id = user.get("id")
        username = user.get("username", "")
        display_name = user.get("fullName", "")
    else:
        user_id = payload.get("sub")
        username = payload.get("username", "")
        display_name = payload.get("name", "")

    if not user_id:
        raise InvalidCredentialError("Token carries no user id")
    return Principal(
        user_id=str(user_id),
        username=str(username or ""),
        display_name=str(display_name or ""),
    )

"""Print a dev bearer token for an existing user: python -m direct_chat.scripts.issue_token <user_id>"""
from __future__ import annotations

import asyncio
import sys
from datetime import timedelta

from direct_chat.application.exceptions import NotFoundError
from direct_chat.config import settings
from direct_chat.infrastructure.auth.tokens import issue_token
from direct_chat.infrastructure.db.uow import open_uow
from direct_chat.services import user_service


async def _issue(user_id: str) -> str:
    async with open_uow() as uow:
        user = await user_service.get_user(user_id, uow)
    return issue_token(
        user,
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        expires_in=timedelta(days=settings.JWT_EXPIRES_DAYS),
    )


def main() -> None:
    if len(sys.argv) != 2:
        sys.exit("usage: python -m direct_chat.scripts.issue_token <user_id>")
    try:
        token = asyncio.run(_issue(sys.argv[1]))
    except NotFoundError as exc:
        sys.exit(exc.detail)
    print(f"Bearer {token}")


if __name__ == "__main__":
    main()

"""One-time script: create the users/messages tables if they are missing."""
from __future__ import annotations

import asyncio
import logging

from direct_chat.config import settings
from direct_chat.infrastructure.db import models  # noqa: F401
from direct_chat.infrastructure.db.base import Base
from direct_chat.infrastructure.db.session import engine
from direct_chat.logging_config import configure_logging

logger = logging.getLogger(__name__)


async def create_schema() -> None:
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(
            "Schema ready on %s:%s/%s (%s)",
            settings.DB_HOST,
            settings.DB_PORT,
            settings.POSTGRES_DB,
            ", ".join(sorted(Base.metadata.tables)),
        )
    finally:
        await engine.dispose()


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    asyncio.run(create_schema())


if __name__ == "__main__":
    main()

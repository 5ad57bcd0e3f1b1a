from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    POSTGRES_USER: str
    POSTGRES_PASSWORD: str
    POSTGRES_DB: str
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 300

    REDIS_URL: str = "redis://localhost:6379/0"

    JWT_SECRET: str = ""
    JWT_VERIFY_MODE: Literal["hs256", "jwks"] = "hs256"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_DAYS: int = 7
    JWKS_URL: str | None = None

    CORS_ORIGINS: list[str] = ["*"]

    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 3000
    LOG_LEVEL: str = "INFO"
    SLOW_REQUEST_MS: int = 1000

    WS_HEARTBEAT_SECONDS: int = 30

    # "local" keeps fan-out in-process; "redis" relays it through Pub/Sub
    # so several app processes can share rooms.
    FANOUT_BACKEND: Literal["local", "redis"] = "redis"
    REDIS_PUBSUB_CHANNEL: str = "chat.fanout"

    @property
    def database_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.POSTGRES_DB}"
        )

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]

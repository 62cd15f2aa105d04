from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

VERSION = "0.1.0"


class Settings(BaseSettings):
    BASE_URL: str = "https://huggingface.co"
    LOGIN_CALLBACK_URL: str = "huggingchat://login/callback"
    SESSION_COOKIE: str = "hf-chat"
    TOKEN: str | None = None

    REQUEST_TIMEOUT: float = 30.0
    RESOURCE_TIMEOUT: float = 300.0

    USER_AGENT: str = f"huggingchat-client/{VERSION}"

    SESSION_BACKEND: Literal["memory", "redis"] = "memory"
    REDIS_URL: str = "redis://localhost:6379/0"
    SESSION_KEY_PREFIX: str = "hf-chat"

    WEB_SEARCH: bool = False

    LOG_LEVEL: str = "INFO"

    @property
    def login_url(self) -> str:
        return f"{self.BASE_URL}/chat/login?callback={self.LOGIN_CALLBACK_URL}"

    model_config = ConfigDict(
        env_file=".env",
        env_prefix="HUGGINGCHAT_",
        extra="ignore",
    )


settings = Settings()

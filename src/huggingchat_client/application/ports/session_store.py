from __future__ import annotations

from typing import Protocol

from huggingchat_client.application.dto.session import StoredSession
from huggingchat_client.domain.entities.user import User


class SessionStore(Protocol):
    async def load(self) -> StoredSession: ...

    async def save_token(self, token: str | None) -> None: ...

    async def save_user(self, user: User | None) -> None: ...

    async def clear(self) -> None: ...

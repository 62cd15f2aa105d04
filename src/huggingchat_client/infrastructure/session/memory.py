from __future__ import annotations

from huggingchat_client.application.dto.session import StoredSession
from huggingchat_client.domain.entities.user import User


class InMemorySessionStore:
    """Implements application.ports.session_store.SessionStore for one process."""

    def __init__(self) -> None:
        self._token: str | None = None
        self._user: User | None = None

    async def load(self) -> StoredSession:
        return StoredSession(token=self._token, user=self._user)

    async def save_token(self, token: str | None) -> None:
        self._token = token

    async def save_user(self, user: User | None) -> None:
        self._user = user

    async def clear(self) -> None:
        self._token = None
        self._user = None

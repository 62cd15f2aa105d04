from __future__ import annotations

from dataclasses import dataclass

from huggingchat_client.domain.entities.user import User


@dataclass(frozen=True, slots=True)
class StoredSession:
    """What a SessionStore persists between runs."""

    token: str | None = None
    user: User | None = None

"""Redis-backed session persistence."""
from __future__ import annotations

import logging

import redis.asyncio as aioredis
from pydantic import ValidationError as PydanticValidationError

from huggingchat_client.application.dto.session import StoredSession
from huggingchat_client.domain.entities.user import User
from huggingchat_client.infrastructure.http.mappers import user_to_entity, user_to_schema
from huggingchat_client.infrastructure.http.schemas import UserSchema

logger = logging.getLogger(__name__)


class RedisSessionStore:
    """Implements application.ports.session_store.SessionStore.

    Keys are ``{prefix}-token`` and ``{prefix}-user``; the client must be
    created with ``decode_responses=True``.
    """

    def __init__(self, redis: aioredis.Redis, prefix: str = "hf-chat") -> None:
        self._redis = redis
        self._token_key = f"{prefix}-token"
        self._user_key = f"{prefix}-user"

    async def load(self) -> StoredSession:
        token = await self._redis.get(self._token_key)
        raw_user = await self._redis.get(self._user_key)
        user: User | None = None
        if raw_user:
            try:
                user = user_to_entity(UserSchema.model_validate_json(raw_user))
            except PydanticValidationError:
                logger.warning("Discarding unreadable stored user at %s", self._user_key)
                await self._redis.delete(self._user_key)
        return StoredSession(token=token or None, user=user)

    async def save_token(self, token: str | None) -> None:
        if token:
            await self._redis.set(self._token_key, token)
        else:
            await self._redis.delete(self._token_key)

    async def save_user(self, user: User | None) -> None:
        if user is None:
            await self._redis.delete(self._user_key)
            return
        await self._redis.set(
            self._user_key, user_to_schema(user).model_dump_json(by_alias=True)
        )

    async def clear(self) -> None:
        await self._redis.delete(self._token_key, self._user_key)

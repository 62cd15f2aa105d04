"""Shared test fixtures."""
from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator

import pytest

from huggingchat_client.application.dto.message import SendMessageDTO
from huggingchat_client.application.exceptions import NotAuthenticatedError, NotFoundError
from huggingchat_client.application.session import ChatSession
from huggingchat_client.domain.entities.conversation import Conversation
from huggingchat_client.domain.entities.llm_model import LLMModel
from huggingchat_client.domain.entities.message import Message
from huggingchat_client.domain.entities.user import User
from huggingchat_client.domain.value_objects.enums import Author

T0 = datetime(2024, 7, 1, 12, 0, tzinfo=timezone.utc)


def make_conversation(
    *,
    conversation_id: str = "conv-1",
    title: str = "New Chat",
    messages: list[Message] | None = None,
) -> Conversation:
    return Conversation(
        id=conversation_id,
        title=title,
        model_id="meta-llama/Meta-Llama-3.1-70B-Instruct",
        updated_at=T0,
        messages=list(messages or []),
        created_at=T0,
    )


def make_message(
    *,
    message_id: str = "m-1",
    author: Author = Author.USER,
    content: str = "hello",
) -> Message:
    return Message(id=message_id, author=author, content=content, created_at=T0)


def make_user(username: str = "preview_user") -> User:
    return User(
        id="user-1",
        username=username,
        email=f"{username}@example.com",
        hf_user_id="hf-1",
    )


def make_model(model_id: str = "meta-llama/Meta-Llama-3.1-70B-Instruct") -> LLMModel:
    return LLMModel(id=model_id, name=model_id, display_name="Llama 3.1 70B")


class FixedClock:
    def __init__(self, start: datetime = T0) -> None:
        self._now = start

    def now(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


class SequentialIds:
    def __init__(self) -> None:
        self._counter = itertools.count(1)

    def new_id(self) -> str:
        return f"id-{next(self._counter)}"


@dataclass
class FakeChatApi:
    """In-memory ChatApi. ``frames`` scripts what stream_message yields.

    An exception in ``frames`` is raised at that point; ``hang`` keeps the
    stream open after the script until it is cancelled.
    """

    frames: list[str | Exception] = field(default_factory=list)
    hang: bool = False
    token: str | None = "token-abc"
    login_token: str | None = "token-from-login"
    user: User = field(default_factory=make_user)
    conversations: dict[str, Conversation] = field(default_factory=dict)
    models: list[LLMModel] = field(default_factory=list)
    requests: list[tuple[str, SendMessageDTO]] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    renamed: list[tuple[str, str]] = field(default_factory=list)
    stream_closed: bool = False

    def _require_token(self) -> None:
        if not self.token:
            raise NotAuthenticatedError()

    def set_token(self, token: str | None) -> None:
        self.token = token

    async def validate_login(self, code: str, state: str) -> str:
        if not self.login_token:
            raise NotAuthenticatedError("Login did not return a session cookie")
        self.token = self.login_token
        return self.login_token

    async def get_user(self) -> User:
        self._require_token()
        return self.user

    async def list_conversations(self) -> list[Conversation]:
        self._require_token()
        return list(self.conversations.values())

    async def get_conversation(self, conversation_id: str) -> Conversation:
        self._require_token()
        if conversation_id not in self.conversations:
            raise NotFoundError("Resource not found")
        return self.conversations[conversation_id]

    async def create_conversation(self, model_id: str) -> Conversation:
        self._require_token()
        conversation = make_conversation(conversation_id=f"conv-{len(self.conversations) + 1}")
        conversation.model_id = model_id
        self.conversations[conversation.id] = conversation
        return conversation

    async def delete_conversation(self, conversation_id: str) -> None:
        self._require_token()
        if conversation_id not in self.conversations:
            raise NotFoundError("Resource not found")
        del self.conversations[conversation_id]
        self.deleted.append(conversation_id)

    async def update_conversation_title(self, conversation_id: str, title: str) -> None:
        self._require_token()
        self.renamed.append((conversation_id, title))

    async def list_models(self) -> list[LLMModel]:
        self._require_token()
        return list(self.models)

    async def stream_message(
        self, conversation_id: str, request: SendMessageDTO
    ) -> AsyncIterator[str]:
        self._require_token()
        self.requests.append((conversation_id, request))
        try:
            for frame in self.frames:
                await asyncio.sleep(0)
                if isinstance(frame, Exception):
                    raise frame
                yield frame
            if self.hang:
                await asyncio.Event().wait()
        finally:
            self.stream_closed = True


class FakeRedis:
    """The subset of redis.asyncio.Redis used by RedisSessionStore."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> bool:
        self.data[key] = value
        return True

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
        return removed


@pytest.fixture
def api() -> FakeChatApi:
    return FakeChatApi()


@pytest.fixture
def session() -> ChatSession:
    return ChatSession(token="token-abc")


@pytest.fixture
def conversation() -> Conversation:
    return make_conversation()

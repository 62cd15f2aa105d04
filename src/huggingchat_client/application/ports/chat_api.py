from __future__ import annotations

from typing import AsyncIterator, Protocol

from huggingchat_client.application.dto.message import SendMessageDTO
from huggingchat_client.domain.entities.conversation import Conversation
from huggingchat_client.domain.entities.llm_model import LLMModel
from huggingchat_client.domain.entities.user import User


class ChatApi(Protocol):
    def set_token(self, token: str | None) -> None: ...

    async def validate_login(self, code: str, state: str) -> str:
        """Exchange an OAuth code/state pair for a session token."""
        ...

    async def get_user(self) -> User: ...

    async def list_conversations(self) -> list[Conversation]: ...

    async def get_conversation(self, conversation_id: str) -> Conversation: ...

    async def create_conversation(self, model_id: str) -> Conversation: ...

    async def delete_conversation(self, conversation_id: str) -> None: ...

    async def update_conversation_title(
        self, conversation_id: str, title: str
    ) -> None: ...

    async def list_models(self) -> list[LLMModel]: ...

    def stream_message(
        self, conversation_id: str, request: SendMessageDTO
    ) -> AsyncIterator[str]:
        """Yield the raw JSON payload of every ``data:`` line as it arrives."""
        ...

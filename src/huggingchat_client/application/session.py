from __future__ import annotations

from dataclasses import dataclass, field

from huggingchat_client.domain.entities.conversation import Conversation
from huggingchat_client.domain.entities.llm_model import LLMModel
from huggingchat_client.domain.entities.user import User


@dataclass(slots=True)
class ChatSession:
    """In-memory state of the signed-in client: who, and what is cached."""

    token: str | None = None
    current_user: User | None = None
    conversations: list[Conversation] = field(default_factory=list)
    available_models: list[LLMModel] = field(default_factory=list)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def find_conversation(self, conversation_id: str) -> Conversation | None:
        for conversation in self.conversations:
            if conversation.id == conversation_id:
                return conversation
        return None

    def reset(self) -> None:
        self.token = None
        self.current_user = None
        self.conversations = []
        self.available_models = []

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from huggingchat_client.domain.entities.message import Message


@dataclass(slots=True)
class Conversation:
    id: str
    title: str
    model_id: str
    updated_at: datetime
    messages: list[Message] = field(default_factory=list)
    created_at: datetime | None = None
    preprompt: str | None = None
    assistant_id: str | None = None

    def index_of(self, message_id: str) -> int | None:
        for i, message in enumerate(self.messages):
            if message.id == message_id:
                return i
        return None

    def in_flight_message(self) -> Message | None:
        for message in self.messages:
            if message.in_flight:
                return message
        return None

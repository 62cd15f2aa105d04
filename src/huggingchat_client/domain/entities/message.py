from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from huggingchat_client.domain.entities.web_search import WebSearch
from huggingchat_client.domain.value_objects.enums import Author


@dataclass(frozen=True, slots=True)
class Message:
    id: str
    author: Author
    content: str
    created_at: datetime | None
    updated_at: datetime | None = None
    web_search: WebSearch | None = None
    files: tuple[str, ...] = ()
    interrupted: bool = False
    in_flight: bool = False  # client-side only, never sent on the wire

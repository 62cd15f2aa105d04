from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SendMessageDTO:
    prompt: str
    message_id: str
    web_search: bool = False
    files: tuple[str, ...] = ()
    is_retry: bool = False
    is_continue: bool = False

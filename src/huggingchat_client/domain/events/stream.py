"""Events decoded from the ``data:`` frames of a message stream."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from huggingchat_client.domain.entities.web_search import WebSearch


@dataclass(frozen=True, slots=True)
class TokenEvent:
    token: str


@dataclass(frozen=True, slots=True)
class WebSearchEvent:
    web_search: WebSearch


@dataclass(frozen=True, slots=True)
class TitleEvent:
    title: str


@dataclass(frozen=True, slots=True)
class FinalAnswerEvent:
    text: str | None = None


@dataclass(frozen=True, slots=True)
class ErrorEvent:
    message: str


@dataclass(frozen=True, slots=True)
class UnknownEvent:
    """Well-formed frame of a kind this client does not handle."""

    payload: dict[str, Any] = field(default_factory=dict)


StreamEvent = Union[
    TokenEvent,
    WebSearchEvent,
    TitleEvent,
    FinalAnswerEvent,
    ErrorEvent,
    UnknownEvent,
]

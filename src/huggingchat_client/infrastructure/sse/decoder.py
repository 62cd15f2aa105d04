"""Decoding of ``data:`` frames into StreamEvents."""
from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterable, AsyncIterator

from pydantic import ValidationError as PydanticValidationError

from huggingchat_client.domain.events.stream import (
    ErrorEvent,
    FinalAnswerEvent,
    StreamEvent,
    TitleEvent,
    TokenEvent,
    UnknownEvent,
    WebSearchEvent,
)
from huggingchat_client.infrastructure.http.mappers import web_search_to_entity
from huggingchat_client.infrastructure.http.schemas import WebSearchSchema

logger = logging.getLogger(__name__)

DATA_PREFIX = "data:"


def extract_data(line: str) -> str | None:
    """Return the payload of a ``data:`` line, or None for any other line."""
    if not line.startswith(DATA_PREFIX):
        return None
    return line[len(DATA_PREFIX):].strip()


def decode_event(raw: str) -> StreamEvent | None:
    """Decode one frame payload. None means the frame is malformed."""
    try:
        data = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    return _event_from_dict(data)


def _event_from_dict(data: dict[str, Any]) -> StreamEvent | None:
    kind = data.get("type")

    if kind == "finalAnswer":
        text = data.get("text")
        return FinalAnswerEvent(text=text if isinstance(text, str) else None)

    if kind == "error" or (kind == "status" and data.get("status") == "error"):
        message = data.get("message")
        if not isinstance(message, str) or not message:
            message = "Unknown stream error"
        return ErrorEvent(message=message)

    token = data.get("token")
    if isinstance(token, str):
        return TokenEvent(token=token)

    web_search = data.get("webSearch")
    if isinstance(web_search, dict):
        try:
            schema = WebSearchSchema.model_validate(web_search)
        except PydanticValidationError:
            return None
        return WebSearchEvent(web_search=web_search_to_entity(schema))

    title = data.get("title")
    if kind == "title" and isinstance(title, str):
        return TitleEvent(title=title)

    return UnknownEvent(payload=data)


async def iter_events(payloads: AsyncIterable[str]) -> AsyncIterator[StreamEvent]:
    """Decode a payload stream, skipping malformed frames.

    Ends right after the final answer even if the server keeps sending.
    """
    async for raw in payloads:
        event = decode_event(raw)
        if event is None:
            logger.debug("Skipping malformed stream frame: %.200s", raw)
            continue
        yield event
        if isinstance(event, FinalAnswerEvent):
            return

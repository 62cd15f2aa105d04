"""Per-conversation send/stream state machine.

Idle -> Streaming -> Complete -> Idle on a final answer, or
Idle -> Streaming -> Error -> Idle on any failure. Only the active stream
task writes to the in-flight placeholder, and every mutation happens on the
event loop thread.
"""
from __future__ import annotations

import asyncio
import dataclasses
import logging
from contextlib import aclosing
from typing import Callable

from huggingchat_client.application.dto.message import SendMessageDTO
from huggingchat_client.application.exceptions import (
    ChatError,
    ConflictError,
    IncompleteStreamError,
    StreamCancelledError,
    StreamError,
    ValidationError,
)
from huggingchat_client.application.ports.chat_api import ChatApi
from huggingchat_client.application.ports.clock import (
    Clock,
    IdFactory,
    SystemClock,
    UuidFactory,
)
from huggingchat_client.domain.entities.conversation import Conversation
from huggingchat_client.domain.entities.message import Message
from huggingchat_client.domain.events.stream import (
    ErrorEvent,
    FinalAnswerEvent,
    TitleEvent,
    TokenEvent,
    WebSearchEvent,
)
from huggingchat_client.domain.value_objects.enums import Author, SyncState
from huggingchat_client.infrastructure.sse.decoder import iter_events

logger = logging.getLogger(__name__)

OnStateCallback = Callable[[SyncState], None]
OnMessageCallback = Callable[[Message], None]


class ConversationSynchronizer:
    def __init__(
        self,
        conversation: Conversation,
        api: ChatApi,
        *,
        clock: Clock | None = None,
        ids: IdFactory | None = None,
        web_search: bool = False,
        on_state: OnStateCallback | None = None,
        on_message: OnMessageCallback | None = None,
    ) -> None:
        self.conversation = conversation
        self.web_search = web_search
        self.state = SyncState.IDLE
        self.error_message: str | None = None
        self._api = api
        self._clock = clock or SystemClock()
        self._ids = ids or UuidFactory()
        self._on_state = on_state
        self._on_message = on_message
        self._task: asyncio.Task[Message] | None = None
        self._cancel_requested = False

    @property
    def messages(self) -> list[Message]:
        return self.conversation.messages

    @property
    def is_interacting(self) -> bool:
        return self._task is not None

    async def send_message(
        self,
        text: str,
        files: list[str] | None = None,
        *,
        web_search: bool | None = None,
    ) -> Message:
        """Send ``text`` and stream the reply into a placeholder message.

        Returns the frozen assistant message. On any failure the placeholder
        is removed and the error is re-raised; the user message stays.
        """
        if not text.strip():
            raise ValidationError("Message text must not be empty")
        if self._task is not None or self.conversation.in_flight_message() is not None:
            raise ConflictError("A reply is already streaming for this conversation")

        now = self._clock.now()
        user_message = Message(
            id=self._ids.new_id(),
            author=Author.USER,
            content=text,
            created_at=now,
            files=tuple(files or ()),
        )
        placeholder = Message(
            id=self._ids.new_id(),
            author=Author.ASSISTANT,
            content="",
            created_at=now,
            in_flight=True,
        )
        self.conversation.messages.append(user_message)
        self.conversation.messages.append(placeholder)
        self.error_message = None
        self._cancel_requested = False
        self._set_state(SyncState.STREAMING)

        request = SendMessageDTO(
            prompt=text,
            message_id=user_message.id,
            web_search=self.web_search if web_search is None else web_search,
            files=tuple(files or ()),
        )
        self._task = asyncio.create_task(
            self._consume(placeholder, request),
            name=f"stream-{self.conversation.id}",
        )
        try:
            return await self._task
        except asyncio.CancelledError:
            if not self._cancel_requested:
                self._fail(placeholder.id, "Streaming cancelled")
                raise
            exc = StreamCancelledError("Streaming cancelled")
            self._fail(placeholder.id, exc.detail)
            raise exc from None
        except ChatError as exc:
            self._fail(placeholder.id, exc.detail or type(exc).__name__)
            raise
        except Exception as exc:
            logger.exception(
                "Unexpected error while streaming conversation=%s", self.conversation.id,
            )
            self._fail(placeholder.id, str(exc) or type(exc).__name__)
            raise
        finally:
            self._task = None

    def cancel(self) -> bool:
        """Cancel the in-flight stream, if any. Returns whether one existed."""
        if self._task is None or self._task.done():
            return False
        self._cancel_requested = True
        self._task.cancel()
        return True

    async def _consume(self, placeholder: Message, request: SendMessageDTO) -> Message:
        message = placeholder
        finished = False
        payloads = self._api.stream_message(self.conversation.id, request)
        async with aclosing(payloads):
            async for event in iter_events(payloads):
                if isinstance(event, TokenEvent):
                    message = self._replace(
                        dataclasses.replace(message, content=message.content + event.token)
                    )
                elif isinstance(event, WebSearchEvent):
                    merged = (
                        event.web_search
                        if message.web_search is None
                        else message.web_search.merged(event.web_search)
                    )
                    message = self._replace(dataclasses.replace(message, web_search=merged))
                elif isinstance(event, TitleEvent):
                    self.conversation.title = event.title
                elif isinstance(event, ErrorEvent):
                    raise StreamError(event.message)
                elif isinstance(event, FinalAnswerEvent):
                    finished = True
        if not finished:
            raise IncompleteStreamError("Stream closed before the final answer")
        return self._complete(message)

    def _replace(self, message: Message) -> Message:
        index = self.conversation.index_of(message.id)
        if index is not None:
            self.conversation.messages[index] = message
        if self._on_message is not None:
            self._on_message(message)
        return message

    def _complete(self, message: Message) -> Message:
        now = self._clock.now()
        final = self._replace(dataclasses.replace(message, in_flight=False, updated_at=now))
        self.conversation.updated_at = now
        logger.info(
            "Reply complete conversation=%s message=%s chars=%d",
            self.conversation.id,
            final.id,
            len(final.content),
        )
        self._set_state(SyncState.COMPLETE)
        self._set_state(SyncState.IDLE)
        return final

    def _fail(self, placeholder_id: str, reason: str) -> None:
        index = self.conversation.index_of(placeholder_id)
        if index is not None:
            del self.conversation.messages[index]
        self.error_message = reason
        logger.warning(
            "Send failed conversation=%s: %s", self.conversation.id, reason,
        )
        self._set_state(SyncState.ERROR)
        self._set_state(SyncState.IDLE)

    def _set_state(self, state: SyncState) -> None:
        self.state = state
        if self._on_state is not None:
            self._on_state(state)

"""httpx implementation of the chat REST + streaming API."""
from __future__ import annotations

import logging
import time
from typing import Any, AsyncIterator, Callable, TypeVar

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from huggingchat_client.application.dto.message import SendMessageDTO
from huggingchat_client.application.exceptions import (
    ChatError,
    DecodingError,
    ForbiddenError,
    InvalidResponseError,
    NetworkError,
    NotAuthenticatedError,
    NotFoundError,
    RateLimitedError,
    ServerError,
)
from huggingchat_client.domain.entities.conversation import Conversation
from huggingchat_client.domain.entities.llm_model import LLMModel
from huggingchat_client.domain.entities.user import User
from huggingchat_client.infrastructure.http.mappers import (
    conversation_to_entity,
    llm_model_to_entity,
    user_to_entity,
)
from huggingchat_client.infrastructure.http.schemas import (
    ConversationSchema,
    CreatedConversationSchema,
    LLMModelSchema,
    UserSchema,
)
from huggingchat_client.infrastructure.sse.decoder import extract_data

logger = logging.getLogger(__name__)

T = TypeVar("T")

_user_adapter = TypeAdapter(UserSchema)
_conversation_adapter = TypeAdapter(ConversationSchema)
_created_adapter = TypeAdapter(CreatedConversationSchema)
_conversations_adapter = TypeAdapter(list[ConversationSchema])
_models_adapter = TypeAdapter(list[LLMModelSchema])


def error_for_status(status_code: int) -> ChatError:
    if status_code == 401:
        return NotAuthenticatedError()
    if status_code == 403:
        return ForbiddenError("Access denied")
    if status_code == 404:
        return NotFoundError("Resource not found")
    if status_code == 429:
        return RateLimitedError()
    return ServerError(status_code)


def _message_body(request: SendMessageDTO) -> dict[str, Any]:
    return {
        "inputs": request.prompt,
        "id": request.message_id,
        "is_retry": request.is_retry,
        "is_continue": request.is_continue,
        "web_search": request.web_search,
        "files": list(request.files),
    }


class HttpChatApi:
    """Implements application.ports.chat_api.ChatApi."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        cookie_name: str = "hf-chat",
        resource_timeout: float = 300.0,
        token: str | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._cookie_name = cookie_name
        self._resource_timeout = resource_timeout
        self._token = token
        self._monotonic = monotonic

    def set_token(self, token: str | None) -> None:
        self._token = token

    def _auth_headers(self) -> dict[str, str]:
        if not self._token:
            raise NotAuthenticatedError()
        return {"Cookie": f"{self._cookie_name}={self._token}"}

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        auth: bool = True,
        follow_redirects: bool = False,
    ) -> httpx.Response:
        headers = self._auth_headers() if auth else {}
        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                params=params,
                headers=headers,
                follow_redirects=follow_redirects,
            )
        except httpx.TransportError as exc:
            raise NetworkError(f"Network error: {exc}") from exc
        if not response.is_success:
            raise error_for_status(response.status_code)
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise InvalidResponseError("Invalid response from server") from exc

    @staticmethod
    def _decode(data: Any, adapter: TypeAdapter[T]) -> T:
        try:
            return adapter.validate_python(data)
        except PydanticValidationError as exc:
            raise DecodingError(f"Failed to decode response: {exc}") from exc

    # -- auth ----------------------------------------------------------------

    async def validate_login(self, code: str, state: str) -> str:
        await self._request(
            "GET",
            "/chat/login/callback",
            params={"code": code, "state": state},
            auth=False,
            follow_redirects=True,
        )
        token = self._client.cookies.get(self._cookie_name)
        if not token:
            raise NotAuthenticatedError("Login did not return a session cookie")
        self._token = token
        return token

    async def get_user(self) -> User:
        response = await self._request("GET", "/chat/api/user")
        return user_to_entity(self._decode(self._json(response), _user_adapter))

    # -- conversations -------------------------------------------------------

    async def list_conversations(self) -> list[Conversation]:
        response = await self._request("GET", "/chat/api/conversations")
        schemas = self._decode(self._json(response), _conversations_adapter)
        return [conversation_to_entity(s) for s in schemas]

    async def get_conversation(self, conversation_id: str) -> Conversation:
        response = await self._request("GET", f"/chat/api/conversation/{conversation_id}")
        return conversation_to_entity(
            self._decode(self._json(response), _conversation_adapter)
        )

    async def create_conversation(self, model_id: str) -> Conversation:
        response = await self._request(
            "POST", "/chat/conversation", json={"model": model_id},
        )
        data = self._json(response)
        if isinstance(data, dict) and "conversationId" in data and "_id" not in data:
            created = self._decode(data, _created_adapter)
            return await self.get_conversation(created.conversation_id)
        return conversation_to_entity(self._decode(data, _conversation_adapter))

    async def delete_conversation(self, conversation_id: str) -> None:
        await self._request("DELETE", f"/chat/conversation/{conversation_id}")

    async def update_conversation_title(self, conversation_id: str, title: str) -> None:
        await self._request(
            "PATCH", f"/chat/conversation/{conversation_id}", json={"title": title},
        )

    async def list_models(self) -> list[LLMModel]:
        response = await self._request("GET", "/chat/api/models")
        schemas = self._decode(self._json(response), _models_adapter)
        return [llm_model_to_entity(s) for s in schemas]

    # -- streaming -----------------------------------------------------------

    def _check_deadline(self, deadline: float) -> None:
        # Also checked per chunk: bytes may trickle in without a newline.
        if self._monotonic() > deadline:
            raise NetworkError(f"Stream exceeded {self._resource_timeout:.0f}s")

    async def stream_message(
        self, conversation_id: str, request: SendMessageDTO
    ) -> AsyncIterator[str]:
        headers = self._auth_headers()
        headers["Accept"] = "text/event-stream"
        deadline = self._monotonic() + self._resource_timeout

        logger.info(
            "Opening stream conversation=%s message=%s web_search=%s",
            conversation_id,
            request.message_id,
            request.web_search,
        )
        try:
            async with self._client.stream(
                "POST",
                f"/chat/conversation/{conversation_id}",
                json=_message_body(request),
                headers=headers,
            ) as response:
                if not response.is_success:
                    await response.aread()
                    raise error_for_status(response.status_code)
                buffer = ""
                async for chunk in response.aiter_text():
                    self._check_deadline(deadline)
                    *lines, buffer = (buffer + chunk).split("\n")
                    for line in lines:
                        self._check_deadline(deadline)
                        payload = extract_data(line.rstrip("\r"))
                        if payload is not None:
                            yield payload
                payload = extract_data(buffer.rstrip("\r"))
                if payload is not None:
                    yield payload
        except httpx.TransportError as exc:
            raise NetworkError(f"Network error: {exc}") from exc

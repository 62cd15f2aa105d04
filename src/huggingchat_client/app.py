from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator

import httpx
import redis.asyncio as aioredis

from huggingchat_client.application.ports.clock import (
    Clock,
    IdFactory,
    SystemClock,
    UuidFactory,
)
from huggingchat_client.application.ports.session_store import SessionStore
from huggingchat_client.application.session import ChatSession
from huggingchat_client.config import Settings, settings as default_settings
from huggingchat_client.domain.entities.conversation import Conversation
from huggingchat_client.infrastructure.http.client import HttpChatApi
from huggingchat_client.infrastructure.http.hooks import EVENT_HOOKS
from huggingchat_client.infrastructure.session.memory import InMemorySessionStore
from huggingchat_client.infrastructure.session.redis_store import RedisSessionStore
from huggingchat_client.services import session_service
from huggingchat_client.services.conversation_synchronizer import (
    ConversationSynchronizer,
    OnMessageCallback,
    OnStateCallback,
)

logger = logging.getLogger(__name__)


@dataclass
class ChatApp:
    """Wired services for one client run."""

    settings: Settings
    api: HttpChatApi
    store: SessionStore
    session: ChatSession
    clock: Clock = field(default_factory=SystemClock)
    ids: IdFactory = field(default_factory=UuidFactory)

    def synchronizer(
        self,
        conversation: Conversation,
        *,
        on_state: OnStateCallback | None = None,
        on_message: OnMessageCallback | None = None,
    ) -> ConversationSynchronizer:
        return ConversationSynchronizer(
            conversation,
            self.api,
            clock=self.clock,
            ids=self.ids,
            web_search=self.settings.WEB_SEARCH,
            on_state=on_state,
            on_message=on_message,
        )


def create_http_client(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=settings.BASE_URL,
        headers={"User-Agent": settings.USER_AGENT},
        timeout=httpx.Timeout(settings.REQUEST_TIMEOUT),
        event_hooks=EVENT_HOOKS,
        transport=transport,
    )


@asynccontextmanager
async def open_app(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    store: SessionStore | None = None,
) -> AsyncIterator[ChatApp]:
    """Startup / shutdown lifecycle."""
    settings = settings or default_settings
    redis: aioredis.Redis | None = None

    if store is None:
        if settings.SESSION_BACKEND == "redis":
            redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
            store = RedisSessionStore(redis, settings.SESSION_KEY_PREFIX)
            logger.info("Redis session store at %s", settings.REDIS_URL)
        else:
            store = InMemorySessionStore()

    http = create_http_client(settings, transport)
    api = HttpChatApi(
        http,
        cookie_name=settings.SESSION_COOKIE,
        resource_timeout=settings.RESOURCE_TIMEOUT,
    )
    app = ChatApp(settings=settings, api=api, store=store, session=ChatSession())
    logger.info("HTTP client opened for %s", settings.BASE_URL)

    try:
        await session_service.restore_session(
            app.session, store, api, fallback_token=settings.TOKEN,
        )
        yield app
    finally:
        await http.aclose()
        if redis is not None:
            await redis.aclose()
        logger.info("HTTP client closed")

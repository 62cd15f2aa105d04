from __future__ import annotations

import logging

from huggingchat_client.application.ports.chat_api import ChatApi
from huggingchat_client.application.ports.session_store import SessionStore
from huggingchat_client.application.session import ChatSession
from huggingchat_client.domain.entities.user import User

logger = logging.getLogger(__name__)


async def restore_session(
    session: ChatSession,
    store: SessionStore,
    api: ChatApi,
    fallback_token: str | None = None,
) -> bool:
    """Load a persisted token/user into ``session``. Returns is_authenticated.

    ``fallback_token`` is used when nothing was persisted.
    """
    stored = await store.load()
    session.token = stored.token or fallback_token
    session.current_user = stored.user
    api.set_token(session.token)
    return session.is_authenticated


async def complete_login(
    code: str,
    state: str,
    session: ChatSession,
    store: SessionStore,
    api: ChatApi,
) -> User:
    """Exchange the OAuth redirect's code/state for a session and persist it."""
    token = await api.validate_login(code, state)
    api.set_token(token)
    user = await api.get_user()

    session.token = token
    session.current_user = user
    await store.save_token(token)
    await store.save_user(user)
    logger.info("Signed in as %s", user.username)
    return user


async def refresh_user(
    session: ChatSession,
    store: SessionStore,
    api: ChatApi,
) -> User:
    user = await api.get_user()
    session.current_user = user
    await store.save_user(user)
    return user


async def sign_out(
    session: ChatSession,
    store: SessionStore,
    api: ChatApi,
) -> None:
    session.reset()
    api.set_token(None)
    await store.clear()
    logger.info("Signed out")

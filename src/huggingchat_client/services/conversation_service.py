from __future__ import annotations

import logging

from huggingchat_client.application.exceptions import ValidationError
from huggingchat_client.application.ports.chat_api import ChatApi
from huggingchat_client.application.session import ChatSession
from huggingchat_client.domain.entities.conversation import Conversation
from huggingchat_client.domain.entities.llm_model import LLMModel

logger = logging.getLogger(__name__)


async def refresh_conversations(
    session: ChatSession,
    api: ChatApi,
) -> list[Conversation]:
    session.conversations = await api.list_conversations()
    return session.conversations


async def open_conversation(
    conversation_id: str,
    session: ChatSession,
    api: ChatApi,
) -> Conversation:
    """Fetch the full conversation (with messages) and refresh the cache."""
    conversation = await api.get_conversation(conversation_id)
    for i, cached in enumerate(session.conversations):
        if cached.id == conversation.id:
            session.conversations[i] = conversation
            break
    else:
        session.conversations.insert(0, conversation)
    return conversation


async def create_conversation(
    model_id: str,
    session: ChatSession,
    api: ChatApi,
) -> Conversation:
    if not model_id:
        raise ValidationError("A model id is required")
    conversation = await api.create_conversation(model_id)
    session.conversations.insert(0, conversation)
    logger.info("Created conversation %s with model %s", conversation.id, model_id)
    return conversation


async def delete_conversation(
    conversation_id: str,
    session: ChatSession,
    api: ChatApi,
) -> None:
    await api.delete_conversation(conversation_id)
    session.conversations = [
        c for c in session.conversations if c.id != conversation_id
    ]
    logger.info("Deleted conversation %s", conversation_id)


async def rename_conversation(
    conversation_id: str,
    title: str,
    session: ChatSession,
    api: ChatApi,
) -> None:
    title = title.strip()
    if not title:
        raise ValidationError("Title must not be empty")
    await api.update_conversation_title(conversation_id, title)
    cached = session.find_conversation(conversation_id)
    if cached is not None:
        cached.title = title


async def refresh_models(
    session: ChatSession,
    api: ChatApi,
) -> list[LLMModel]:
    session.available_models = await api.list_models()
    return session.available_models

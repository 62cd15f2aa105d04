from __future__ import annotations

from datetime import datetime, timezone

from huggingchat_client.domain.entities.conversation import Conversation
from huggingchat_client.domain.entities.llm_model import (
    LLMModel,
    ModelParameters,
    PromptExample,
)
from huggingchat_client.domain.entities.message import Message
from huggingchat_client.domain.entities.user import Organization, User
from huggingchat_client.domain.entities.web_search import (
    WebSearch,
    WebSearchSource,
    WebSearchUpdate,
)
from huggingchat_client.infrastructure.http.schemas import (
    ConversationSchema,
    LLMModelSchema,
    MessageSchema,
    OrganizationSchema,
    UserSchema,
    WebSearchSchema,
)


def _as_utc(value: datetime | None) -> datetime | None:
    """Timestamps without an offset are UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def web_search_to_entity(schema: WebSearchSchema) -> WebSearch:
    return WebSearch(
        updates=tuple(
            WebSearchUpdate(type=m.type, message=m.message, args=tuple(m.args or ()))
            for m in schema.messages or ()
        ),
        sources=tuple(
            WebSearchSource(link=s.link, title=s.title, hostname=s.hostname)
            for s in schema.sources or ()
        ),
    )


def message_to_entity(schema: MessageSchema) -> Message:
    return Message(
        id=schema.id,
        author=schema.author,
        content=schema.content,
        created_at=_as_utc(schema.created_at),
        updated_at=_as_utc(schema.updated_at),
        web_search=web_search_to_entity(schema.web_search) if schema.web_search else None,
        files=tuple(schema.files or ()),
        interrupted=bool(schema.interrupted),
    )


def conversation_to_entity(schema: ConversationSchema) -> Conversation:
    return Conversation(
        id=schema.id,
        title=schema.title,
        model_id=schema.model,
        updated_at=_as_utc(schema.updated_at) or datetime.now(timezone.utc),
        messages=[message_to_entity(m) for m in schema.messages or ()],
        created_at=_as_utc(schema.created_at),
        preprompt=schema.preprompt,
        assistant_id=schema.assistant_id,
    )


def user_to_entity(schema: UserSchema) -> User:
    return User(
        id=schema.id,
        username=schema.username,
        email=schema.email,
        hf_user_id=schema.hf_user_id,
        avatar_url=schema.avatar_url,
        orgs=tuple(
            Organization(id=o.id, name=o.name, avatar_url=o.avatar_url)
            for o in schema.orgs or ()
        ),
        is_pro=bool(schema.is_pro),
    )


def user_to_schema(entity: User) -> UserSchema:
    return UserSchema(
        id=entity.id,
        username=entity.username,
        email=entity.email,
        avatar_url=entity.avatar_url,
        hf_user_id=entity.hf_user_id,
        orgs=[
            OrganizationSchema(id=o.id, name=o.name, avatar_url=o.avatar_url)
            for o in entity.orgs
        ],
        is_pro=entity.is_pro,
    )


def _parameters_to_entity(schema: LLMModelSchema) -> ModelParameters | None:
    params = schema.parameters
    if params is None:
        return None
    return ModelParameters(
        temperature=params.temperature,
        top_p=params.top_p,
        top_k=params.top_k,
        max_new_tokens=params.max_new_tokens,
        repetition_penalty=params.repetition_penalty,
        stop=tuple(params.stop or ()),
    )


def llm_model_to_entity(schema: LLMModelSchema) -> LLMModel:
    return LLMModel(
        id=schema.id,
        name=schema.name,
        display_name=schema.display_name,
        description=schema.description,
        website_url=schema.website_url,
        model_url=schema.model_url,
        preprompt=schema.preprompt,
        prompt_examples=tuple(
            PromptExample(title=p.title, prompt=p.prompt)
            for p in schema.prompt_examples or ()
        ),
        parameters=_parameters_to_entity(schema),
        multimodal=bool(schema.multimodal),
        unlisted=bool(schema.unlisted),
        tools=bool(schema.tools),
    )

"""Pydantic models for the chat service's JSON payloads."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)

from huggingchat_client.domain.value_objects.enums import Author

_WIRE = ConfigDict(populate_by_name=True, extra="ignore")


def _or_none(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    """Optional fields that fail to parse decode as missing."""
    try:
        return handler(value)
    except ValidationError:
        return None


class WebSearchSourceSchema(BaseModel):
    link: str
    title: str = ""
    hostname: str = ""

    model_config = _WIRE


class WebSearchMessageSchema(BaseModel):
    type: str
    message: str | None = None
    args: list[str] | None = None

    model_config = _WIRE


class WebSearchSchema(BaseModel):
    messages: list[WebSearchMessageSchema] | None = None
    sources: list[WebSearchSourceSchema] | None = None

    model_config = _WIRE


class MessageSchema(BaseModel):
    id: str
    content: str
    author: Author = Field(alias="from")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    web_search: WebSearchSchema | None = Field(default=None, alias="webSearch")
    files: list[str] | None = None
    interrupted: bool | None = None

    model_config = _WIRE

    @field_validator(
        "created_at", "updated_at", "web_search", "files", "interrupted", mode="wrap"
    )
    @classmethod
    def drop_invalid(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        return _or_none(value, handler)


class ConversationSchema(BaseModel):
    id: str = Field(alias="_id")
    title: str
    model: str
    messages: list[MessageSchema] | None = None
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    preprompt: str | None = None
    assistant_id: str | None = Field(default=None, alias="assistantId")

    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", protected_namespaces=()
    )

    @field_validator("messages", "updated_at", "created_at", mode="wrap")
    @classmethod
    def drop_invalid(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        return _or_none(value, handler)


class CreatedConversationSchema(BaseModel):
    """Short form some deployments return from ``POST /chat/conversation``."""

    conversation_id: str = Field(alias="conversationId")

    model_config = _WIRE


class OrganizationSchema(BaseModel):
    id: str = Field(alias="_id")
    name: str
    avatar_url: str | None = Field(default=None, alias="avatarUrl")

    model_config = _WIRE


class UserSchema(BaseModel):
    id: str = Field(alias="_id")
    username: str
    email: str
    avatar_url: str | None = Field(default=None, alias="avatarUrl")
    hf_user_id: str = Field(alias="hfUserId")
    orgs: list[OrganizationSchema] | None = None
    is_pro: bool | None = Field(default=None, alias="isPro")

    model_config = _WIRE


class PromptExampleSchema(BaseModel):
    title: str
    prompt: str

    model_config = _WIRE


class ModelParametersSchema(BaseModel):
    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    max_new_tokens: int | None = None
    repetition_penalty: float | None = None
    stop: list[str] | None = None

    model_config = _WIRE


class LLMModelSchema(BaseModel):
    id: str
    name: str
    display_name: str = Field(alias="displayName")
    description: str | None = None
    website_url: str | None = Field(default=None, alias="websiteUrl")
    model_url: str | None = Field(default=None, alias="modelUrl")
    preprompt: str | None = None
    prompt_examples: list[PromptExampleSchema] | None = Field(
        default=None, alias="promptExamples"
    )
    parameters: ModelParametersSchema | None = None
    multimodal: bool | None = None
    unlisted: bool | None = None
    tools: bool | None = None

    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", protected_namespaces=()
    )

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PromptExample:
    title: str
    prompt: str


@dataclass(frozen=True, slots=True)
class ModelParameters:
    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    max_new_tokens: int | None = None
    repetition_penalty: float | None = None
    stop: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class LLMModel:
    id: str
    name: str
    display_name: str
    description: str | None = None
    website_url: str | None = None
    model_url: str | None = None
    preprompt: str | None = None
    prompt_examples: tuple[PromptExample, ...] = ()
    parameters: ModelParameters | None = None
    multimodal: bool = False
    unlisted: bool = False
    tools: bool = False

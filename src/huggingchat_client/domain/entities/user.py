from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Organization:
    id: str
    name: str
    avatar_url: str | None = None


@dataclass(frozen=True, slots=True)
class User:
    id: str
    username: str
    email: str
    hf_user_id: str
    avatar_url: str | None = None
    orgs: tuple[Organization, ...] = ()
    is_pro: bool = False

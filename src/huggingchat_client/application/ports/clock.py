from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Default wall-clock implementation."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class IdFactory(Protocol):
    def new_id(self) -> str: ...


class UuidFactory:
    def new_id(self) -> str:
        return str(uuid.uuid4())

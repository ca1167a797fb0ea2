from __future__ import annotations

from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class Speaker(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ReadinessState(str, Enum):
    UNINITIALIZED = "UNINITIALIZED"
    INITIALIZING = "INITIALIZING"
    READY = "READY"
    INIT_FAILED = "INIT_FAILED"


def _new_id(kind: str) -> str:
    return f"{kind}-{uuid4().hex}"


class Turn(BaseModel):
    """One message in the conversation. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique identifier of the turn")
    speaker: Speaker
    text: str

    @classmethod
    def user(cls, text: str) -> "Turn":
        return cls(id=_new_id("user"), speaker=Speaker.USER, text=text)

    @classmethod
    def assistant(cls, text: str) -> "Turn":
        return cls(id=_new_id("model"), speaker=Speaker.ASSISTANT, text=text)

    @classmethod
    def failure(cls, text: str) -> "Turn":
        # Failures are rendered as assistant turns, only the id differs.
        return cls(id=_new_id("error"), speaker=Speaker.ASSISTANT, text=text)


class ChatSnapshot(BaseModel):
    """Read-only view of the controller state handed to the presentation layer."""

    model_config = ConfigDict(frozen=True)

    state: ReadinessState
    busy: bool = Field(False, description="True while an exchange is in flight")
    error: Optional[str] = Field(None, description="Banner-level error text")
    turns: List[Turn] = Field(default_factory=list)

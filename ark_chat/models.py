"""
Wire types for the Ark chat-completions API.

Outbound: ``ChatRequest`` carrying the ordered ``Message`` transcript.
Inbound: one ``StreamChunk`` per ``data:`` frame of the streamed response.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "assistant"]


class Message(BaseModel):
    """A single conversation turn. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class ChatRequest(BaseModel):
    model: str
    messages: list[Message]
    max_tokens: int
    temperature: float
    stream: bool = True


class Delta(BaseModel):
    role: str | None = None
    content: str | None = None


class Choice(BaseModel):
    delta: Delta = Field(default_factory=Delta)
    finish_reason: str | None = None
    index: int = 0


class ChunkError(BaseModel):
    code: str | int | None = None
    message: str = ""


class StreamChunk(BaseModel):
    """One decoded unit of the streamed response."""

    id: str | None = None
    choices: list[Choice] = Field(default_factory=list)
    error: ChunkError | None = None

    @property
    def first_choice(self) -> Choice | None:
        # The wire format does not promise at least one choice per chunk.
        return self.choices[0] if self.choices else None

    @property
    def delta_content(self) -> str:
        choice = self.first_choice
        if choice is None:
            return ""
        return choice.delta.content or ""

    @property
    def finish_reason(self) -> str | None:
        choice = self.first_choice
        return choice.finish_reason if choice is not None else None

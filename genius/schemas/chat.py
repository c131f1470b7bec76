"""Pydantic schemas for the chat completion pass-through."""

from typing import Literal

from pydantic import BaseModel, Field

ChatRole = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    """One message in OpenAI chat format."""

    role: ChatRole
    content: str


class ChatRequest(BaseModel):
    """Conversation to forward to the configured chat completion endpoint."""

    messages: list[ChatMessage] = Field(default_factory=list)
    model: str | None = Field(default=None, description="Overrides CHAT_MODEL")
    max_tokens: int | None = Field(default=None, ge=1, le=32768)
    session_id: str | None = Field(default=None, max_length=255)
    system_prompt: str | None = Field(
        default=None,
        description="Prepended as a system message when non-empty",
    )


class ChatResponse(BaseModel):
    """Assistant reply plus usage metadata the client stores with the message."""

    model_config = {"populate_by_name": True}

    success: bool = True
    content: str
    model: str
    tokens_used: int | None = Field(default=None, alias="tokensUsed")
    latency_ms: int = Field(alias="latencyMs")

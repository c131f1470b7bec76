"""Pydantic request/response schemas."""

from genius.schemas.auth import AUTH_ACTIONS, AuthRequest, AuthResponse, PublicUser
from genius.schemas.chat import ChatMessage, ChatRequest, ChatResponse
from genius.schemas.db import DB_ACTIONS, DbRequest, DbResponse
from genius.schemas.health import HealthResponse

__all__ = [
    "AUTH_ACTIONS",
    "AuthRequest",
    "AuthResponse",
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "DB_ACTIONS",
    "DbRequest",
    "DbResponse",
    "HealthResponse",
    "PublicUser",
]

"""Chat endpoint: server-side pass-through to the OpenAI-compatible completion API."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from genius.api.deps import get_current_user
from genius.core.config import Settings, get_settings
from genius.models.user import User
from genius.schemas.chat import ChatRequest, ChatResponse
from genius.services.chat import ChatServiceError, run_chat_completion

router = APIRouter()


@router.post("", response_model=ChatResponse)
async def post_chat(
    body: ChatRequest,
    settings: Annotated[Settings, Depends(get_settings)],
    user: Annotated[User, Depends(get_current_user)],
) -> ChatResponse:
    """
    Forward the conversation to CHAT_COMPLETIONS_URL with the server-held API key
    and return the assistant reply with token usage and latency.
    """
    if not body.messages:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Messages are required",
        )
    try:
        return await run_chat_completion(body, settings, user_id=user.id)
    except ChatServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e

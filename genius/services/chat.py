"""Chat service: forward a conversation to the configured OpenAI-compatible chat completion endpoint."""

import json
import logging
import time
from typing import TYPE_CHECKING, Any

import httpx

from genius.schemas.chat import ChatRequest, ChatResponse

if TYPE_CHECKING:
    from genius.core.config import Settings

logger = logging.getLogger(__name__)

NO_CONTENT_FALLBACK = "No response received."


class ChatServiceError(Exception):
    """Raised when the chat endpoint cannot complete (not configured, unreachable, timeout, or bad response)."""

    def __init__(self, message: str, status_code: int = 502, cause: Exception | None = None) -> None:
        self.message = message
        self.status_code = status_code
        self.cause = cause
        super().__init__(message)


def build_payload(request: ChatRequest, settings: "Settings", user_id: int | None = None) -> dict[str, Any]:
    """OpenAI chat/completions body; system_prompt becomes the leading system message."""
    messages = [m.model_dump() for m in request.messages]
    if request.system_prompt and request.system_prompt.strip():
        messages.insert(0, {"role": "system", "content": request.system_prompt})
    payload: dict[str, Any] = {
        "model": request.model or settings.CHAT_MODEL,
        "messages": messages,
        "max_tokens": request.max_tokens or settings.CHAT_MAX_TOKENS,
        "stream": False,
    }
    if request.session_id:
        payload["session_id"] = request.session_id
    if user_id is not None:
        payload["user_id"] = str(user_id)
    return payload


def _extract_content(body: dict[str, Any]) -> str:
    choices = body.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return NO_CONTENT_FALLBACK
    message = choices[0].get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    return content or NO_CONTENT_FALLBACK


async def run_chat_completion(
    request: ChatRequest,
    settings: "Settings",
    user_id: int | None = None,
) -> ChatResponse:
    """
    Send the conversation to CHAT_COMPLETIONS_URL and return the assistant reply.

    Raises ChatServiceError when the endpoint is not configured (503), unreachable
    or timed out (503), returns a non-200 status (502), or returns a non-JSON body (502).
    """
    if not settings.CHAT_COMPLETIONS_URL:
        raise ChatServiceError("Chat endpoint is not configured. Set CHAT_COMPLETIONS_URL.", status_code=503)

    payload = build_payload(request, settings, user_id=user_id)
    headers = {"Content-Type": "application/json"}
    if settings.CHAT_API_KEY is not None and settings.CHAT_API_KEY.get_secret_value():
        headers["Authorization"] = f"Bearer {settings.CHAT_API_KEY.get_secret_value()}"
    timeout = httpx.Timeout(settings.CHAT_REQUEST_TIMEOUT_SEC)
    start = time.perf_counter()

    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(settings.CHAT_COMPLETIONS_URL, json=payload, headers=headers)
    except httpx.ConnectError as e:
        logger.info(
            "Chat completion request failed",
            extra={"llm_latency_seconds": time.perf_counter() - start, "model": payload["model"], "status": "error"},
        )
        raise ChatServiceError("Chat endpoint is unreachable.", status_code=503, cause=e) from e
    except httpx.TimeoutException as e:
        logger.info(
            "Chat completion request failed",
            extra={"llm_latency_seconds": time.perf_counter() - start, "model": payload["model"], "status": "error"},
        )
        raise ChatServiceError(
            "Chat endpoint timed out. Try increasing CHAT_REQUEST_TIMEOUT_SEC.",
            status_code=503,
            cause=e,
        ) from e
    except httpx.HTTPError as e:
        raise ChatServiceError("Chat endpoint request failed.", cause=e) from e
    elapsed = time.perf_counter() - start

    if response.status_code != 200:
        raise ChatServiceError(f"Chat endpoint returned status {response.status_code}")

    try:
        body = response.json()
    except json.JSONDecodeError as e:
        raise ChatServiceError("Chat endpoint response body is not valid JSON.", cause=e) from e
    if not isinstance(body, dict):
        raise ChatServiceError("Chat endpoint response is not a JSON object.")

    usage = body.get("usage") if isinstance(body.get("usage"), dict) else {}
    tokens_used = usage.get("total_tokens")
    logger.info(
        "Chat completion request completed",
        extra={"llm_latency_seconds": elapsed, "model": payload["model"], "total_tokens": tokens_used},
    )
    return ChatResponse(
        content=_extract_content(body),
        model=payload["model"],
        tokens_used=tokens_used if isinstance(tokens_used, int) else None,
        latency_ms=int(elapsed * 1000),
    )

"""Chat API endpoint - streams assistant events as newline-delimited JSON"""

import json
import logging
import time
from typing import Any, Iterator, Literal

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from ..config import Settings, get_settings
from ..dependencies import get_chat_assistant
from ..domain.ai import ChatError
from .assistant import ChatAssistant

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    messages: list[ChatMessage] = Field(..., min_length=1)


def _ndjson(event: dict[str, Any]) -> str:
    return json.dumps(event) + "\n"


def _event_stream(
    assistant: ChatAssistant,
    messages: list[dict[str, Any]],
    deadline: float,
) -> Iterator[str]:
    try:
        for event in assistant.stream(messages, deadline=deadline):
            yield _ndjson(event)
    except ChatError as e:
        logger.error(f"Chat failed: {e}", extra={"error_type": type(e).__name__})
        yield _ndjson({"type": "error", "error": "The assistant is temporarily unavailable"})
        return

    yield _ndjson({"type": "finish"})


@router.post("/chat")
def chat(
    request: ChatRequest,
    assistant: ChatAssistant = Depends(get_chat_assistant),
    settings: Settings = Depends(get_settings),
):
    """
    Conversational product search.

    Streams one JSON object per line:
        {"type": "text", "content": ...}
        {"type": "tool_result", "tool_name": "search", "tool_call_id": ...,
         "input": {"query": ...}, "result": [...]}
        {"type": "error", "error": ...}  (provider failure or deadline)
        {"type": "finish"}

    The whole response is bounded by CHAT_MAX_DURATION_SECONDS.
    """
    deadline = time.monotonic() + settings.CHAT_MAX_DURATION_SECONDS
    messages = [m.model_dump() for m in request.messages]

    return StreamingResponse(
        _event_stream(assistant, messages, deadline),
        media_type="application/x-ndjson",
    )

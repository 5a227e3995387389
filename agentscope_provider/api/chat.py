"""
Chat API

Streams an AgentScope reply for the chat client as a UI message stream.
"""

import logging
from typing import Annotated, Any, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.background import BackgroundTask

from agentscope_provider.api.ui_stream import UI_MESSAGE_STREAM_HEADERS, encode_ui_message_stream
from agentscope_provider.common.errors import AgentScopeError, InvalidPromptError
from agentscope_provider.config import get_settings
from agentscope_provider.domain.call import CallOptions
from agentscope_provider.domain.prompt import (
    AssistantTurn,
    ConversationTurn,
    FilePart,
    ReasoningPart,
    SystemTurn,
    TextPart,
    UserTurn,
)
from agentscope_provider.providers.agentscope import AgentScopeProvider, get_default_provider

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Chat"])


class UIMessagePart(BaseModel):
    """One part of a chat client message; unknown part types are kept as-is."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str
    text: Optional[str] = None
    url: Optional[str] = None
    media_type: Optional[str] = Field(default=None, alias="mediaType")
    filename: Optional[str] = None


class UIMessage(BaseModel):
    id: Optional[str] = None
    role: str
    parts: list[UIMessagePart] = Field(default_factory=list)


class ChatRequest(BaseModel):
    """POST /api/chat body"""

    model_config = ConfigDict(populate_by_name=True)

    messages: list[UIMessage]
    user_id: Optional[str] = Field(default=None, alias="userId")
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    model: Optional[str] = None


def ui_messages_to_prompt(messages: list[UIMessage]) -> list[ConversationTurn]:
    """
    Convert chat client messages into conversation turns.

    Parts without a model-facing meaning (step markers, data parts) are skipped.
    """
    prompt: list[ConversationTurn] = []
    for message in messages:
        if message.role == "system":
            text = "".join(p.text or "" for p in message.parts if p.type == "text")
            prompt.append(SystemTurn(content=text))
            continue

        content: list[Any] = []
        for part in message.parts:
            if part.type == "text":
                content.append(TextPart(text=part.text or ""))
            elif part.type == "file" and part.url:
                content.append(
                    FilePart(
                        data=part.url,
                        media_type=part.media_type or "application/octet-stream",
                        filename=part.filename,
                    )
                )
            elif part.type == "reasoning" and message.role == "assistant":
                content.append(ReasoningPart(text=part.text or ""))

        if message.role == "user":
            prompt.append(UserTurn(content=content))
        elif message.role == "assistant":
            prompt.append(AssistantTurn(content=content))
        else:
            raise InvalidPromptError(
                message=f"Unsupported message role: {message.role}",
                code="unsupported_role",
                details={"role": message.role},
            )
    return prompt


def get_provider() -> AgentScopeProvider:
    """Get the AgentScope provider dependency"""
    return get_default_provider()


ProviderDep = Annotated[AgentScopeProvider, Depends(get_provider)]


@router.post("/api/chat")
async def chat(request: ChatRequest, provider: ProviderDep):
    """
    Chat endpoint

    Starts a streaming AgentScope call and returns its parts as a UI message
    stream. Errors raised before the stream starts are returned as JSON.
    """
    settings = get_settings()
    try:
        options = CallOptions(
            prompt=ui_messages_to_prompt(request.messages),
            provider_options={
                "agentscope": {
                    "userId": request.user_id or settings.CHAT_DEFAULT_USER_ID,
                    "sessionId": request.session_id or settings.CHAT_DEFAULT_SESSION_ID,
                }
            },
        )
        model = provider(request.model or settings.AGENTSCOPE_MODEL_ID)
        result = await model.do_stream(options)
    except AgentScopeError as e:
        logger.warning("Chat request failed: %s", e.message)
        return JSONResponse(
            content=e.to_dict(include_details=settings.DEBUG),
            status_code=e.status_code,
        )

    return StreamingResponse(
        encode_ui_message_stream(result.stream),
        media_type="text/event-stream",
        headers=UI_MESSAGE_STREAM_HEADERS,
        background=BackgroundTask(result.aclose),
    )

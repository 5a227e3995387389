"""
UI Message Stream Encoding

Encodes normalized stream parts as the UI message stream consumed by the chat
client: SSE data lines carrying one JSON chunk each, ended by data: [DONE].
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Optional

from agentscope_provider.common.errors import AgentScopeError
from agentscope_provider.domain.stream import (
    ErrorPart,
    FinishPart,
    ReasoningDeltaPart,
    ReasoningEndPart,
    ReasoningStartPart,
    StreamPart,
    TextDeltaPart,
    TextEndPart,
    TextStartPart,
    ToolCallStreamPart,
    ToolResultStreamPart,
)

logger = logging.getLogger(__name__)

UI_MESSAGE_STREAM_HEADERS = {
    "x-vercel-ai-ui-message-stream": "v1",
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
}


def format_sse_event(payload: dict[str, Any]) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


def _parse_tool_input(raw: str) -> Any:
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        return raw


class UIMessageStreamEncoder:
    """
    Normalized stream part → UI message stream chunks

    stream-start and response-metadata have no UI counterpart; the finish part
    closes the step and the message.
    """

    def __init__(self, message_id: Optional[str] = None) -> None:
        self.message_id = message_id
        self.finished = False

    def start(self) -> list[dict[str, Any]]:
        start: dict[str, Any] = {"type": "start"}
        if self.message_id:
            start["messageId"] = self.message_id
        return [start, {"type": "start-step"}]

    def encode(self, part: StreamPart) -> list[dict[str, Any]]:
        if isinstance(part, (TextStartPart, TextEndPart, ReasoningStartPart, ReasoningEndPart)):
            return [{"type": part.type, "id": part.id}]
        if isinstance(part, (TextDeltaPart, ReasoningDeltaPart)):
            return [{"type": part.type, "id": part.id, "delta": part.delta}]
        if isinstance(part, ToolCallStreamPart):
            return [
                {
                    "type": "tool-input-available",
                    "toolCallId": part.tool_call_id,
                    "toolName": part.tool_name,
                    "input": _parse_tool_input(part.input),
                    "providerExecuted": part.provider_executed,
                }
            ]
        if isinstance(part, ToolResultStreamPart):
            return [
                {
                    "type": "tool-output-available",
                    "toolCallId": part.tool_call_id,
                    "output": part.result,
                    "providerExecuted": part.provider_executed,
                }
            ]
        if isinstance(part, ErrorPart):
            return [{"type": "error", "errorText": part.message}]
        if isinstance(part, FinishPart):
            return self.finish(part.finish_reason.value)
        return []

    def finish(self, finish_reason: Optional[str] = None) -> list[dict[str, Any]]:
        if self.finished:
            return []
        self.finished = True
        finish: dict[str, Any] = {"type": "finish"}
        if finish_reason:
            finish["messageMetadata"] = {"finishReason": finish_reason}
        return [{"type": "finish-step"}, finish]


async def encode_ui_message_stream(
    parts: AsyncIterator[StreamPart],
    message_id: Optional[str] = None,
) -> AsyncIterator[str]:
    """
    Encode a live part stream as UI message stream SSE text.

    Failures while reading the upstream stream are reported as an error chunk
    so the client can render them.
    """
    encoder = UIMessageStreamEncoder(message_id=message_id)
    for chunk in encoder.start():
        yield format_sse_event(chunk)

    try:
        async for part in parts:
            for chunk in encoder.encode(part):
                yield format_sse_event(chunk)
    except AgentScopeError as e:
        logger.warning("AgentScope stream failed: %s", e.message)
        yield format_sse_event({"type": "error", "errorText": e.message})
    except Exception as e:
        logger.error("Unexpected stream error: %s", e, exc_info=True)
        yield format_sse_event({"type": "error", "errorText": "An error occurred."})

    yield "data: [DONE]\n\n"

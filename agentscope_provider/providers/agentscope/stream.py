"""
AgentScope SSE Stream Decoding

Reduces the AgentScope runtime's SSE records into normalized stream parts.

The runtime multiplexes text, reasoning and plugin (tool) output in one event
stream and its ids are not stable across record kinds (a message record may
carry an empty id while the following content chunk carries a real one), so
the decoder keeps one logical id per output kind for the whole stream.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncIterable, AsyncIterator, Optional

from agentscope_provider.common.errors import InvalidResponseDataError
from agentscope_provider.common.sse import SSEEvent, iter_sse_events
from agentscope_provider.common.usage import normalize_usage
from agentscope_provider.domain.call import CallWarning
from agentscope_provider.domain.stream import (
    ErrorPart,
    FinishPart,
    FinishReason,
    ReasoningDeltaPart,
    ReasoningEndPart,
    ReasoningStartPart,
    ResponseMetadataPart,
    StreamPart,
    StreamStartPart,
    TextDeltaPart,
    TextEndPart,
    TextStartPart,
    ToolCallStreamPart,
    ToolResultStreamPart,
    Usage,
)
from agentscope_provider.providers.agentscope.finish_reason import (
    map_agentscope_finish_reason,
)

logger = logging.getLogger(__name__)

DEFAULT_TEXT_ID = "agentscope-text-0"
DEFAULT_REASONING_ID = "agentscope-reasoning-0"
DEFAULT_TOOL_NAME = "plugin_call"


class EventKind(str, Enum):
    """Branch selected for one decoded record."""

    RESPONSE = "response"
    ERROR = "error"
    MESSAGE = "message"
    PLUGIN_CALL = "plugin_call"
    PLUGIN_CALL_OUTPUT = "plugin_call_output"
    CONTENT = "content"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ClassifiedEvent:
    kind: EventKind
    # Resolved kind string (type, else object, else SSE event name)
    name: Optional[str]
    is_reasoning: bool


def _as_string(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _first_present(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def resolve_event_kind(payload: dict[str, Any], event_name: Optional[str] = None) -> Optional[str]:
    """
    Resolve the kind of a record: payload `type`, else payload `object`, else the SSE event name.
    """
    return _as_string(payload.get("type")) or _as_string(payload.get("object")) or event_name


def classify_event(payload: dict[str, Any], event_name: Optional[str] = None) -> ClassifiedEvent:
    """
    Classify a decoded record into exactly one EventKind.

    Precedence: response, error, message, plugin_call_output, plugin_call, content.
    """
    name = resolve_event_kind(payload, event_name)
    obj = payload.get("object") if isinstance(payload.get("object"), str) else None
    type_ = payload.get("type")
    is_reasoning = name == "reasoning" or obj == "reasoning" or type_ == "reasoning"

    if name == "response" or obj == "response":
        kind = EventKind.RESPONSE
    elif payload.get("error"):
        kind = EventKind.ERROR
    elif name == "message" or obj == "message":
        kind = EventKind.MESSAGE
    elif name == "plugin_call_output":
        kind = EventKind.PLUGIN_CALL_OUTPUT
    elif name == "plugin_call":
        kind = EventKind.PLUGIN_CALL
    elif name in ("content", "text", "reasoning") or obj == "content" or type_ == "text" or is_reasoning:
        kind = EventKind.CONTENT
    else:
        kind = EventKind.UNKNOWN

    return ClassifiedEvent(kind=kind, name=name, is_reasoning=is_reasoning)


def extract_message_text(message: Any) -> Optional[str]:
    """
    Concatenate the text content items of an AgentScope message.

    Returns:
        str: Joined text, or None when the message has no text items
    """
    if not isinstance(message, dict) or not isinstance(message.get("content"), list):
        return None

    texts = [
        item["text"]
        for item in message["content"]
        if isinstance(item, dict) and item.get("type") == "text" and isinstance(item.get("text"), str)
    ]
    if not texts:
        return None
    return "".join(texts)


def normalize_tool_input(raw: Any) -> str:
    """Serialize tool arguments to text."""
    if isinstance(raw, str):
        return raw
    if raw is None:
        return ""
    try:
        return json.dumps(raw, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(raw)


@dataclass(frozen=True)
class ToolMeta:
    tool_name: str
    tool_call_id: str
    input: Any
    result: Any


def extract_tool_meta(payload: dict[str, Any], event_name: Optional[str] = None) -> ToolMeta:
    """
    Extract tool name, call id, input and result from a plugin record.

    Top-level fields win over the `data` objects nested in the content list.
    """
    content_name = None
    content_id = None
    content_input = None
    content_result = None

    content = payload.get("content")
    if isinstance(content, list):
        for item in content:
            if not isinstance(item, dict) or not isinstance(item.get("data"), dict):
                continue
            data = item["data"]
            content_name = content_name or _as_string(data.get("name")) or _as_string(data.get("tool_name"))
            content_id = content_id or _as_string(data.get("id")) or _as_string(data.get("call_id"))
            if content_input is None:
                content_input = _first_present(data.get("input"), data.get("arguments"), data.get("params"))
            if content_result is None:
                content_result = _first_present(data.get("output"), data.get("result"))

    tool_name = (
        _as_string(payload.get("name"))
        or _as_string(payload.get("tool_name"))
        or content_name
        or event_name
        or DEFAULT_TOOL_NAME
    )
    tool_call_id = (
        _as_string(payload.get("msg_id"))
        or _as_string(payload.get("call_id"))
        or _as_string(payload.get("id"))
        or content_id
        or tool_name
    )

    return ToolMeta(
        tool_name=tool_name,
        tool_call_id=tool_call_id,
        input=_first_present(
            payload.get("arguments"),
            payload.get("params"),
            payload.get("input"),
            payload.get("data"),
            content_input,
        ),
        result=_first_present(
            payload.get("output"),
            payload.get("result"),
            payload.get("data"),
            content_result,
        ),
    )


class AgentScopeStreamTransformer:
    """
    AgentScope SSE → normalized stream parts

    Holds the decoder state of exactly one streaming call. Feed it with
    start(), then transform() for every SSE event, then flush() at end of
    stream; each returns the parts to emit, in order.
    """

    def __init__(
        self,
        model_id: str,
        warnings: Optional[list[CallWarning]] = None,
        warn_unknown_events: bool = True,
    ) -> None:
        self.model_id = model_id
        self.warnings = list(warnings or [])
        self.warn_unknown_events = warn_unknown_events

        self.finish_reason = FinishReason.UNKNOWN
        self.usage = Usage()
        self.response_id: Optional[str] = None
        self.text_id: Optional[str] = None
        self.reasoning_id: Optional[str] = None
        self.started_text_ids: dict[str, None] = {}
        self.started_reasoning_ids: dict[str, None] = {}
        self.started_tool_call_ids: set[str] = set()
        self._warned_kinds: set[str] = set()

    def start(self) -> list[StreamPart]:
        return [StreamStartPart(warnings=self.warnings)]

    def transform(self, event: SSEEvent) -> list[StreamPart]:
        """
        Reduce one SSE event.

        A record that fails to decode yields an error part and marks the
        finish reason as error; later records are still processed.
        """
        if not event.data or event.data == "[DONE]":
            return []

        try:
            payload = json.loads(event.data)
        except ValueError as e:
            logger.warning("Malformed AgentScope SSE record: %s", e)
            self.finish_reason = FinishReason.ERROR
            return [ErrorPart(error=e)]

        if not isinstance(payload, dict):
            self.finish_reason = FinishReason.ERROR
            return [
                ErrorPart(
                    error=InvalidResponseDataError(
                        message="AgentScope SSE data is not a valid object",
                        data=payload,
                    )
                )
            ]

        status = payload.get("status")
        if isinstance(status, str):
            self.finish_reason = map_agentscope_finish_reason(status)

        classified = classify_event(payload, event.event)
        handler = {
            EventKind.RESPONSE: self._on_response,
            EventKind.ERROR: self._on_error,
            EventKind.MESSAGE: self._on_message,
            EventKind.PLUGIN_CALL: self._on_plugin_call,
            EventKind.PLUGIN_CALL_OUTPUT: self._on_plugin_call_output,
            EventKind.CONTENT: self._on_content,
        }.get(classified.kind)

        if handler is None:
            self._warn_unknown(payload, classified, event.event)
            return []
        return handler(payload, classified, event.event)

    def flush(self) -> list[StreamPart]:
        """Close every open reasoning stream, then every open text stream, then finish."""
        parts: list[StreamPart] = [ReasoningEndPart(id=i) for i in self.started_reasoning_ids]
        parts.extend(TextEndPart(id=i) for i in self.started_text_ids)
        parts.append(FinishPart(finish_reason=self.finish_reason, usage=self.usage))
        return parts

    def _on_response(self, payload, classified, event_name) -> list[StreamPart]:
        parts: list[StreamPart] = []
        if self.response_id is None and isinstance(payload.get("id"), str):
            self.response_id = payload["id"]
            parts.append(ResponseMetadataPart(id=self.response_id, model_id=self.model_id))

        usage = normalize_usage(payload.get("usage"))
        if usage is not None:
            self.usage = usage
        return parts

    def _on_error(self, payload, classified, event_name) -> list[StreamPart]:
        self.finish_reason = FinishReason.ERROR
        return [ErrorPart(error=payload["error"])]

    def _on_message(self, payload, classified, event_name) -> list[StreamPart]:
        text = extract_message_text(payload)
        if not text:
            return []
        message_id = payload.get("id") if isinstance(payload.get("id"), str) else None
        return self._delta(text, message_id, classified.is_reasoning)

    def _on_content(self, payload, classified, event_name) -> list[StreamPart]:
        text = payload.get("text")
        if not isinstance(text, str) or not text:
            return []
        msg_id = payload.get("msg_id") if isinstance(payload.get("msg_id"), str) else None
        return self._delta(text, msg_id, classified.is_reasoning)

    def _on_plugin_call(self, payload, classified, event_name) -> list[StreamPart]:
        meta = extract_tool_meta(payload, event_name)
        return self._start_tool_call(meta.tool_call_id, meta.tool_name, normalize_tool_input(meta.input))

    def _on_plugin_call_output(self, payload, classified, event_name) -> list[StreamPart]:
        meta = extract_tool_meta(payload, event_name)
        # Consumers expect a tool-call before its result
        parts = self._start_tool_call(meta.tool_call_id, meta.tool_name, "")
        parts.append(
            ToolResultStreamPart(
                tool_call_id=meta.tool_call_id,
                tool_name=meta.tool_name,
                result=meta.result if meta.result is not None else payload,
            )
        )
        return parts

    def _start_tool_call(self, tool_call_id: str, tool_name: str, input: str) -> list[StreamPart]:
        if tool_call_id in self.started_tool_call_ids:
            return []
        self.started_tool_call_ids.add(tool_call_id)
        return [ToolCallStreamPart(tool_call_id=tool_call_id, tool_name=tool_name, input=input)]

    def _delta(self, text: str, candidate_id: Optional[str], reasoning: bool) -> list[StreamPart]:
        candidate = candidate_id.strip() if candidate_id else ""
        parts: list[StreamPart] = []

        if reasoning:
            if self.reasoning_id is None:
                self.reasoning_id = candidate or DEFAULT_REASONING_ID
            if self.reasoning_id not in self.started_reasoning_ids:
                self.started_reasoning_ids[self.reasoning_id] = None
                parts.append(ReasoningStartPart(id=self.reasoning_id))
            parts.append(ReasoningDeltaPart(id=self.reasoning_id, delta=text))
        else:
            if self.text_id is None:
                self.text_id = candidate or DEFAULT_TEXT_ID
            if self.text_id not in self.started_text_ids:
                self.started_text_ids[self.text_id] = None
                parts.append(TextStartPart(id=self.text_id))
            parts.append(TextDeltaPart(id=self.text_id, delta=text))
        return parts

    def _warn_unknown(self, payload, classified: ClassifiedEvent, event_name: Optional[str]) -> None:
        key = str(
            classified.name
            or payload.get("object")
            or payload.get("type")
            or event_name
            or "unknown"
        )
        if not self.warn_unknown_events or key in self._warned_kinds:
            return
        self._warned_kinds.add(key)
        logger.warning("Unhandled AgentScope SSE event kind: %s", key)


async def decode_agentscope_stream(
    chunks: AsyncIterable[bytes],
    transformer: AgentScopeStreamTransformer,
) -> AsyncIterator[StreamPart]:
    """
    Decode an AgentScope SSE byte stream into normalized parts.

    Bytes are pulled only as the caller consumes parts.

    Args:
        chunks: Response body chunks
        transformer: Decoder state for this call

    Yields:
        StreamPart: stream-start, decoded parts, then end markers and finish
    """
    for part in transformer.start():
        yield part

    async for event in iter_sse_events(chunks):
        for part in transformer.transform(event):
            yield part

    for part in transformer.flush():
        yield part

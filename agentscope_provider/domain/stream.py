"""
Normalized Stream Domain Model

Vendor-agnostic output units produced by a chat model call. Streaming calls
emit these parts in order; single-shot calls reuse FinishReason and Usage.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from agentscope_provider.domain.call import CallWarning


class FinishReason(str, Enum):
    """Why a model response ended."""

    STOP = "stop"
    LENGTH = "length"
    CONTENT_FILTER = "content-filter"
    TOOL_CALLS = "tool-calls"
    ERROR = "error"
    OTHER = "other"
    UNKNOWN = "unknown"


@dataclass
class Usage:
    """
    Token usage

    Every field stays None until the vendor reports it.
    """

    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    total_tokens: Optional[int] = None
    reasoning_tokens: Optional[int] = None
    cached_input_tokens: Optional[int] = None

    def to_dict(self) -> dict[str, Optional[int]]:
        return {
            "inputTokens": self.input_tokens,
            "outputTokens": self.output_tokens,
            "totalTokens": self.total_tokens,
            "reasoningTokens": self.reasoning_tokens,
            "cachedInputTokens": self.cached_input_tokens,
        }


@dataclass
class StreamStartPart:
    warnings: list[CallWarning] = field(default_factory=list)
    type: str = field(default="stream-start", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "warnings": [w.to_dict() for w in self.warnings]}


@dataclass
class ResponseMetadataPart:
    id: str
    model_id: Optional[str] = None
    type: str = field(default="response-metadata", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "id": self.id, "modelId": self.model_id}


@dataclass
class TextStartPart:
    id: str
    type: str = field(default="text-start", init=False)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class TextDeltaPart:
    id: str
    delta: str
    type: str = field(default="text-delta", init=False)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class TextEndPart:
    id: str
    type: str = field(default="text-end", init=False)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ReasoningStartPart:
    id: str
    type: str = field(default="reasoning-start", init=False)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ReasoningDeltaPart:
    id: str
    delta: str
    type: str = field(default="reasoning-delta", init=False)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ReasoningEndPart:
    id: str
    type: str = field(default="reasoning-end", init=False)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ToolCallStreamPart:
    """A tool invocation executed on the AgentScope side."""

    tool_call_id: str
    tool_name: str
    # Serialized arguments (JSON text)
    input: str = ""
    provider_executed: bool = True
    type: str = field(default="tool-call", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "toolCallId": self.tool_call_id,
            "toolName": self.tool_name,
            "input": self.input,
            "providerExecuted": self.provider_executed,
        }


@dataclass
class ToolResultStreamPart:
    tool_call_id: str
    tool_name: str
    result: Any = None
    provider_executed: bool = True
    type: str = field(default="tool-result", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "toolCallId": self.tool_call_id,
            "toolName": self.tool_name,
            "result": self.result,
            "providerExecuted": self.provider_executed,
        }


@dataclass
class FinishPart:
    finish_reason: FinishReason
    usage: Usage
    type: str = field(default="finish", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "finishReason": self.finish_reason.value,
            "usage": self.usage.to_dict(),
        }


@dataclass
class ErrorPart:
    """
    Error surfaced inside the stream

    `error` is either the vendor's error object or the exception raised while
    decoding one record.
    """

    error: Any
    type: str = field(default="error", init=False)

    @property
    def message(self) -> str:
        if isinstance(self.error, dict):
            message = self.error.get("message")
            if isinstance(message, str) and message:
                return message
        return str(self.error)

    def to_dict(self) -> dict[str, Any]:
        error = self.error if isinstance(self.error, (dict, str)) else str(self.error)
        return {"type": self.type, "error": error}


StreamPart = Union[
    StreamStartPart,
    ResponseMetadataPart,
    TextStartPart,
    TextDeltaPart,
    TextEndPart,
    ReasoningStartPart,
    ReasoningDeltaPart,
    ReasoningEndPart,
    ToolCallStreamPart,
    ToolResultStreamPart,
    FinishPart,
    ErrorPart,
]

"""
Domain model module initialization
"""

from agentscope_provider.domain.call import CallOptions, CallWarning, ToolDefinition
from agentscope_provider.domain.prompt import (
    AssistantTurn,
    ContentPart,
    ConversationTurn,
    FilePart,
    Prompt,
    ReasoningPart,
    SystemTurn,
    TextPart,
    ToolCallPart,
    ToolResultPart,
    UserTurn,
)
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

__all__ = [
    "CallOptions",
    "CallWarning",
    "ToolDefinition",
    "AssistantTurn",
    "ContentPart",
    "ConversationTurn",
    "FilePart",
    "Prompt",
    "ReasoningPart",
    "SystemTurn",
    "TextPart",
    "ToolCallPart",
    "ToolResultPart",
    "UserTurn",
    "ErrorPart",
    "FinishPart",
    "FinishReason",
    "ReasoningDeltaPart",
    "ReasoningEndPart",
    "ReasoningStartPart",
    "ResponseMetadataPart",
    "StreamPart",
    "StreamStartPart",
    "TextDeltaPart",
    "TextEndPart",
    "TextStartPart",
    "ToolCallStreamPart",
    "ToolResultStreamPart",
    "Usage",
]

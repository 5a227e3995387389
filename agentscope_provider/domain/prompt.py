"""
Conversation Domain Model

Vendor-neutral representation of the prompt passed to a chat model: an
ordered list of system / user / assistant turns, each with content parts.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union


@dataclass
class TextPart:
    text: str
    type: str = field(default="text", init=False)


@dataclass
class FilePart:
    """
    File reference

    `data` is either a URL (already uploaded) or the inline file bytes.
    """

    data: Union[str, bytes]
    media_type: str
    filename: Optional[str] = None
    type: str = field(default="file", init=False)


@dataclass
class ReasoningPart:
    text: str
    type: str = field(default="reasoning", init=False)


@dataclass
class ToolCallPart:
    tool_call_id: str
    tool_name: str
    input: Any = None
    type: str = field(default="tool-call", init=False)


@dataclass
class ToolResultPart:
    tool_call_id: str
    tool_name: str
    output: Any = None
    type: str = field(default="tool-result", init=False)


ContentPart = Union[TextPart, FilePart, ReasoningPart, ToolCallPart, ToolResultPart]


@dataclass
class SystemTurn:
    content: str
    role: str = field(default="system", init=False)


@dataclass
class UserTurn:
    content: list[ContentPart] = field(default_factory=list)
    role: str = field(default="user", init=False)


@dataclass
class AssistantTurn:
    content: list[ContentPart] = field(default_factory=list)
    role: str = field(default="assistant", init=False)


ConversationTurn = Union[SystemTurn, UserTurn, AssistantTurn]
Prompt = list[ConversationTurn]

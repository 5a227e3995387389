"""
Call Options Domain Model

Defines the inbound call shape shared by single-shot and streaming calls.
"""

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from agentscope_provider.domain.prompt import Prompt


@dataclass
class ToolDefinition:
    """Function tool offered to the model"""

    name: str
    description: Optional[str] = None
    parameters: dict[str, Any] = field(default_factory=dict)


@dataclass
class CallWarning:
    """
    Call Warning

    Reports a call setting the provider ignores.

    type is "unsupported-setting", "unsupported-tool" or "other".
    """

    type: str
    setting: Optional[str] = None
    tool: Optional[str] = None
    details: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.type}
        if self.setting is not None:
            result["setting"] = self.setting
        if self.tool is not None:
            result["tool"] = self.tool
        if self.details is not None:
            result["details"] = self.details
        return result


@dataclass
class CallOptions:
    """
    Chat Model Call Options

    Conversation, sampling parameters, per-call provider options and an
    optional abort signal.
    """

    # Ordered conversation turns
    prompt: "Prompt"
    # Sampling parameters
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    presence_penalty: Optional[float] = None
    frequency_penalty: Optional[float] = None
    max_output_tokens: Optional[int] = None
    stop_sequences: Optional[list[str]] = None
    seed: Optional[int] = None
    # Output format, e.g. {"type": "json"}
    response_format: Optional[dict[str, Any]] = None
    tools: Optional[list[ToolDefinition]] = None
    tool_choice: Optional[Any] = None
    # Call-level headers (take precedence over every other header source)
    headers: Optional[dict[str, str]] = None
    # Provider-keyed options, e.g. {"agentscope": {"userId": "u1"}}
    provider_options: Optional[dict[str, dict[str, Any]]] = None
    # Set to abort the in-flight request
    abort_signal: Optional[asyncio.Event] = None

"""
Chat Model Base Class

Defines the abstract interface for chat language models.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

from agentscope_provider.domain.call import CallOptions, CallWarning
from agentscope_provider.domain.stream import FinishReason, StreamPart, Usage


@dataclass
class GenerateResult:
    """
    Single-shot Result Data Class

    Encapsulates the completed response and the raw request/response for diagnostics.
    """

    # Content parts, e.g. [{"type": "text", "text": "..."}]
    content: list[dict[str, Any]]
    finish_reason: FinishReason
    usage: Usage
    # Request body sent upstream
    request_body: Optional[dict[str, Any]] = None
    # Upstream response headers
    response_headers: dict[str, str] = field(default_factory=dict)
    # Parsed upstream response body
    response_body: Any = None
    warnings: list[CallWarning] = field(default_factory=list)

    @property
    def text(self) -> str:
        """Concatenated text content"""
        return "".join(part.get("text", "") for part in self.content if part.get("type") == "text")


@dataclass
class StreamResult:
    """
    Streaming Result Data Class

    `stream` is live: parts are decoded as the caller iterates it. The
    upstream connection is released when the stream is exhausted; a caller
    that stops early must call aclose() (or use `async with`).
    """

    stream: AsyncIterator[StreamPart]
    request_body: Optional[dict[str, Any]] = None
    response_headers: dict[str, str] = field(default_factory=dict)
    # Releases the upstream response and client; must be idempotent
    on_close: Optional[Callable[[], Awaitable[None]]] = field(default=None, repr=False)

    async def aclose(self) -> None:
        """Stop the stream and release the upstream connection"""
        aclose = getattr(self.stream, "aclose", None)
        if aclose is not None:
            await aclose()
        if self.on_close is not None:
            await self.on_close()

    async def __aenter__(self) -> "StreamResult":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.aclose()


class LanguageModel(ABC):
    """
    Chat Language Model Abstract Base Class

    Defines the common interface for chat models, including single-shot and streaming calls.
    """

    specification_version = "v2"

    def __init__(self, model_id: str):
        self.model_id = model_id

    @property
    @abstractmethod
    def provider(self) -> str:
        """Provider name, also the key of this provider's entry in CallOptions.provider_options"""

    @abstractmethod
    async def do_generate(self, options: CallOptions) -> GenerateResult:
        """
        Run a single-shot call

        Args:
            options: Call options

        Returns:
            GenerateResult: Completed response
        """

    @abstractmethod
    async def do_stream(self, options: CallOptions) -> StreamResult:
        """
        Run a streaming call

        Args:
            options: Call options

        Returns:
            StreamResult: Live stream of normalized parts
        """

"""
AgentScope Chat Model

Implements single-shot (POST {processPath}) and streaming (POST {streamPath},
text/event-stream) calls against an AgentScope runtime.
"""

import asyncio
import contextlib
import json
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from agentscope_provider.common.errors import (
    APICallError,
    InvalidArgumentError,
    InvalidResponseDataError,
    NoContentGeneratedError,
    RequestAbortedError,
)
from agentscope_provider.common.usage import normalize_usage
from agentscope_provider.domain.call import CallOptions, CallWarning
from agentscope_provider.domain.stream import StreamPart, Usage
from agentscope_provider.providers.agentscope.errors import (
    assert_object,
    build_agentscope_api_error,
)
from agentscope_provider.providers.agentscope.finish_reason import (
    map_agentscope_finish_reason,
)
from agentscope_provider.providers.agentscope.messages import (
    convert_to_agentscope_messages,
)
from agentscope_provider.providers.agentscope.stream import (
    AgentScopeStreamTransformer,
    decode_agentscope_stream,
    extract_message_text,
)
from agentscope_provider.providers.base import GenerateResult, LanguageModel, StreamResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AgentScopeProviderOptions(BaseModel):
    """Per-call options read from CallOptions.provider_options["agentscope"]"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: Optional[str] = Field(default=None, alias="userId")
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    headers: Optional[dict[str, str]] = None


@dataclass
class AgentScopeLanguageModelConfig:
    """
    Chat Model Configuration

    Shared by every model created from one provider.
    """

    # Base URL without trailing slash
    base_url: str
    stream_path: str
    process_path: str
    # Default user id, used when the call provides none
    user_id: Optional[str]
    session_id: Optional[str] = None
    # Returns the configured default headers
    headers: Optional[Callable[[], dict[str, str]]] = None
    # Builds the HTTP client for one call (custom transports, tests)
    client_factory: Optional[Callable[[], httpx.AsyncClient]] = None
    # Request timeout (seconds)
    timeout: float = 1800
    warn_unknown_events: bool = True


async def _next_chunk(chunks: AsyncIterator[bytes]) -> Optional[bytes]:
    try:
        return await chunks.__anext__()
    except StopAsyncIteration:
        return None


async def _await_unless_aborted(aw: Awaitable[T], abort_signal: Optional[asyncio.Event]) -> T:
    """
    Await aw, cancelling it if abort_signal fires first.

    Raises:
        RequestAbortedError: abort_signal was set before aw completed
    """
    if abort_signal is None:
        return await aw
    if abort_signal.is_set():
        if asyncio.iscoroutine(aw):
            aw.close()
        raise RequestAbortedError()

    task = asyncio.ensure_future(aw)
    waiter = asyncio.ensure_future(abort_signal.wait())
    try:
        done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except BaseException:
        task.cancel()
        raise
    finally:
        waiter.cancel()

    if task in done:
        return task.result()

    task.cancel()
    with contextlib.suppress(asyncio.CancelledError, httpx.HTTPError):
        await task
    raise RequestAbortedError()


class AgentScopeChatLanguageModel(LanguageModel):
    """
    AgentScope Chat Model

    Supports:
    - do_generate: single-shot call returning the last assistant message text
    - do_stream: streaming call returning live normalized stream parts
    """

    def __init__(self, model_id: str, config: AgentScopeLanguageModelConfig):
        super().__init__(model_id)
        self.config = config

    @property
    def provider(self) -> str:
        return "agentscope"

    def _parse_provider_options(self, options: CallOptions) -> Optional[AgentScopeProviderOptions]:
        raw = (options.provider_options or {}).get(self.provider)
        if raw is None:
            return None
        try:
            return AgentScopeProviderOptions.model_validate(raw)
        except PydanticValidationError as e:
            raise InvalidArgumentError(
                argument="providerOptions",
                message=f"Invalid {self.provider} provider options",
                details={"errors": e.errors(include_url=False)},
            ) from e

    def _collect_warnings(self, options: CallOptions) -> list[CallWarning]:
        warnings: list[CallWarning] = []

        for tool in options.tools or []:
            warnings.append(
                CallWarning(
                    type="unsupported-tool",
                    tool=tool.name,
                    details="AgentScope tool calling is not wired to the chat model interface",
                )
            )

        if options.tool_choice:
            warnings.append(
                CallWarning(
                    type="unsupported-setting",
                    setting="toolChoice",
                    details="AgentScope does not support toolChoice",
                )
            )

        if options.top_k is not None:
            warnings.append(
                CallWarning(
                    type="unsupported-setting",
                    setting="topK",
                    details="AgentScope does not support topK; the setting is ignored",
                )
            )

        if options.response_format and options.response_format.get("type") == "json":
            warnings.append(
                CallWarning(
                    type="unsupported-setting",
                    setting="responseFormat",
                    details="AgentScope only supports text output",
                )
            )

        return warnings

    def _get_request_body(
        self,
        options: CallOptions,
        provider_options: Optional[AgentScopeProviderOptions],
        stream: bool,
    ) -> dict[str, Any]:
        messages = convert_to_agentscope_messages(options.prompt)

        # An explicit override wins even when empty
        user_id = self.config.user_id
        session_id = self.config.session_id
        if provider_options is not None and provider_options.user_id is not None:
            user_id = provider_options.user_id
        if provider_options is not None and provider_options.session_id is not None:
            session_id = provider_options.session_id
        if not user_id:
            raise InvalidArgumentError(argument="userId", message="user_id must not be empty")

        body = {
            "user_id": user_id,
            "session_id": session_id,
            "input": messages,
            "stream": stream,
            "temperature": options.temperature,
            "top_p": options.top_p,
            "presence_penalty": options.presence_penalty,
            "frequency_penalty": options.frequency_penalty,
            "max_tokens": options.max_output_tokens,
            "stop": options.stop_sequences,
            "seed": options.seed,
            "model": self.model_id,
        }
        return {key: value for key, value in body.items() if value is not None}

    def _get_headers(
        self,
        options: CallOptions,
        provider_options: Optional[AgentScopeProviderOptions],
    ) -> dict[str, str]:
        """
        Merge headers; call-level headers override provider-option headers,
        which override configured defaults.
        """
        headers = {"Content-Type": "application/json"}
        sources = (
            self.config.headers() if self.config.headers else None,
            provider_options.headers if provider_options else None,
            options.headers,
        )
        for source in sources:
            if source:
                headers.update({k: v for k, v in source.items() if v is not None})
        return headers

    def _create_client(self) -> httpx.AsyncClient:
        if self.config.client_factory is not None:
            return self.config.client_factory()
        return httpx.AsyncClient(timeout=httpx.Timeout(self.config.timeout))

    async def _send(
        self,
        client: httpx.AsyncClient,
        url: str,
        headers: dict[str, str],
        body: dict[str, Any],
        stream: bool,
        abort_signal: Optional[asyncio.Event],
    ) -> httpx.Response:
        logger.debug(
            "AgentScope Request: url=%s stream=%s body=%s",
            url,
            stream,
            json.dumps(body, ensure_ascii=False),
        )
        request = client.build_request("POST", url, headers=headers, json=body)
        try:
            return await _await_unless_aborted(client.send(request, stream=stream), abort_signal)
        except httpx.TimeoutException as e:
            raise APICallError(
                message=f"Request timeout: {e}",
                url=url,
                request_body_values=body,
                is_retryable=True,
            ) from e
        except httpx.RequestError as e:
            raise APICallError(
                message=f"Request error: {e}",
                url=url,
                request_body_values=body,
                is_retryable=True,
            ) from e

    async def do_generate(self, options: CallOptions) -> GenerateResult:
        provider_options = self._parse_provider_options(options)
        warnings = self._collect_warnings(options)
        body = self._get_request_body(options, provider_options, stream=False)
        headers = self._get_headers(options, provider_options)
        url = f"{self.config.base_url}{self.config.process_path}"

        async with self._create_client() as client:
            response = await self._send(client, url, headers, body, False, options.abort_signal)

            if not response.is_success:
                raise await build_agentscope_api_error(response, url, body)

            try:
                parsed = response.json()
            except ValueError as e:
                raise InvalidResponseDataError(
                    message="Failed to parse AgentScope response JSON",
                    data=response.text,
                ) from e

        assert_object(parsed, "AgentScope response")
        error = parsed.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else None
            raise InvalidResponseDataError(
                message=message or "AgentScope returned an error",
                data=parsed,
            )

        output = parsed.get("output")
        messages = [m for m in output if isinstance(m, dict)] if isinstance(output, list) else []
        assistant_messages = [m for m in messages if m.get("role") == "assistant"]
        # Responses without roles: fall back to the last output message
        last_message = assistant_messages[-1] if assistant_messages else (messages[-1] if messages else None)

        text = extract_message_text(last_message)
        if not text:
            raise NoContentGeneratedError(message="AgentScope returned no text content")

        status = parsed.get("status")
        if status is None and last_message is not None:
            status = last_message.get("status")

        return GenerateResult(
            content=[{"type": "text", "text": text}],
            finish_reason=map_agentscope_finish_reason(status),
            usage=normalize_usage(parsed.get("usage")) or Usage(),
            request_body=body,
            response_headers=dict(response.headers),
            response_body=parsed,
            warnings=warnings,
        )

    async def do_stream(self, options: CallOptions) -> StreamResult:
        provider_options = self._parse_provider_options(options)
        warnings = self._collect_warnings(options)
        body = self._get_request_body(options, provider_options, stream=True)
        headers = self._get_headers(options, provider_options)
        url = f"{self.config.base_url}{self.config.stream_path}"
        abort_signal = options.abort_signal

        client = self._create_client()
        try:
            response = await self._send(client, url, headers, body, True, abort_signal)
        except BaseException:
            await client.aclose()
            raise

        try:
            if not response.is_success:
                raise await build_agentscope_api_error(response, url, body)
            if response.status_code == 204 or response.headers.get("content-length") == "0":
                raise InvalidResponseDataError(message="AgentScope stream response is empty")
        except BaseException:
            await response.aclose()
            await client.aclose()
            raise

        transformer = AgentScopeStreamTransformer(
            model_id=self.model_id,
            warnings=warnings,
            warn_unknown_events=self.config.warn_unknown_events,
        )

        async def release() -> None:
            await response.aclose()
            await client.aclose()

        return StreamResult(
            stream=self._stream_parts(client, response, transformer, url, body, abort_signal),
            request_body=body,
            response_headers=dict(response.headers),
            on_close=release,
        )

    async def _stream_parts(
        self,
        client: httpx.AsyncClient,
        response: httpx.Response,
        transformer: AgentScopeStreamTransformer,
        url: str,
        body: dict[str, Any],
        abort_signal: Optional[asyncio.Event],
    ) -> AsyncIterator[StreamPart]:
        parts = decode_agentscope_stream(self._iter_body(response, abort_signal), transformer)
        try:
            async for part in parts:
                yield part
        except RequestAbortedError:
            # Aborted streams end without a finish part
            logger.debug("AgentScope stream aborted: url=%s", url)
        except httpx.HTTPError as e:
            raise APICallError(
                message=f"Stream read error: {e}",
                url=url,
                request_body_values=body,
                status_code=response.status_code,
                is_retryable=True,
            ) from e
        finally:
            await parts.aclose()
            await response.aclose()
            await client.aclose()

    @staticmethod
    async def _iter_body(
        response: httpx.Response,
        abort_signal: Optional[asyncio.Event],
    ) -> AsyncIterator[bytes]:
        chunks = response.aiter_bytes()
        while True:
            chunk = await _await_unless_aborted(_next_chunk(chunks), abort_signal)
            if chunk is None:
                return
            yield chunk

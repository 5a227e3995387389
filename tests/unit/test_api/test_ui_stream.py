"""
UI Message Stream Encoding Unit Tests
"""

import json

import pytest

from agentscope_provider.api.ui_stream import UIMessageStreamEncoder, encode_ui_message_stream
from agentscope_provider.common.errors import APICallError
from agentscope_provider.domain.stream import (
    ErrorPart,
    FinishPart,
    FinishReason,
    ResponseMetadataPart,
    StreamStartPart,
    TextDeltaPart,
    TextEndPart,
    TextStartPart,
    ToolCallStreamPart,
    ToolResultStreamPart,
    Usage,
)


def _decode(lines: list[str]) -> list:
    chunks = []
    for line in lines:
        assert line.startswith("data: ") and line.endswith("\n\n")
        data = line[len("data: "):-2]
        chunks.append(data if data == "[DONE]" else json.loads(data))
    return chunks


def test_encoder_maps_text_and_finish():
    encoder = UIMessageStreamEncoder(message_id="m1")

    chunks = encoder.start()
    for part in [
        StreamStartPart(),
        ResponseMetadataPart(id="resp_1"),
        TextStartPart(id="t"),
        TextDeltaPart(id="t", delta="hi"),
        TextEndPart(id="t"),
        FinishPart(finish_reason=FinishReason.STOP, usage=Usage()),
    ]:
        chunks.extend(encoder.encode(part))

    assert chunks == [
        {"type": "start", "messageId": "m1"},
        {"type": "start-step"},
        {"type": "text-start", "id": "t"},
        {"type": "text-delta", "id": "t", "delta": "hi"},
        {"type": "text-end", "id": "t"},
        {"type": "finish-step"},
        {"type": "finish", "messageMetadata": {"finishReason": "stop"}},
    ]
    assert encoder.finish() == []


def test_encoder_maps_tool_parts():
    encoder = UIMessageStreamEncoder()

    call = encoder.encode(ToolCallStreamPart(tool_call_id="c1", tool_name="search", input='{"q": "x"}'))
    result = encoder.encode(ToolResultStreamPart(tool_call_id="c1", tool_name="search", result={"hits": 1}))

    assert call == [
        {
            "type": "tool-input-available",
            "toolCallId": "c1",
            "toolName": "search",
            "input": {"q": "x"},
            "providerExecuted": True,
        }
    ]
    assert result[0]["type"] == "tool-output-available"
    assert result[0]["output"] == {"hits": 1}


def test_encoder_keeps_unparseable_tool_input_as_text():
    encoder = UIMessageStreamEncoder()
    chunk = encoder.encode(ToolCallStreamPart(tool_call_id="c1", tool_name="t", input="not json"))[0]
    assert chunk["input"] == "not json"


def test_encoder_maps_error_part():
    encoder = UIMessageStreamEncoder()
    assert encoder.encode(ErrorPart(error={"message": "boom"})) == [{"type": "error", "errorText": "boom"}]


@pytest.mark.asyncio
async def test_encode_stream_ends_with_done():
    async def parts():
        yield StreamStartPart()
        yield TextStartPart(id="t")
        yield TextDeltaPart(id="t", delta="hello")
        yield TextEndPart(id="t")
        yield FinishPart(finish_reason=FinishReason.STOP, usage=Usage())

    lines = [line async for line in encode_ui_message_stream(parts())]
    chunks = _decode(lines)

    assert chunks[-1] == "[DONE]"
    assert [c["type"] for c in chunks[:-1]] == [
        "start",
        "start-step",
        "text-start",
        "text-delta",
        "text-end",
        "finish-step",
        "finish",
    ]


@pytest.mark.asyncio
async def test_encode_stream_reports_upstream_failure():
    async def parts():
        yield TextStartPart(id="t")
        raise APICallError(message="Stream read error: reset", url="http://localhost:8000/stream")

    chunks = _decode([line async for line in encode_ui_message_stream(parts())])

    assert chunks[-2] == {"type": "error", "errorText": "Stream read error: reset"}
    assert chunks[-1] == "[DONE]"


@pytest.mark.asyncio
async def test_encode_stream_hides_unexpected_errors():
    async def parts():
        raise RuntimeError("secret")
        yield  # pragma: no cover

    chunks = _decode([line async for line in encode_ui_message_stream(parts())])

    assert chunks[-2] == {"type": "error", "errorText": "An error occurred."}

"""
Stream Part Domain Model Unit Tests
"""

from agentscope_provider.common.errors import InvalidResponseDataError
from agentscope_provider.domain import (
    CallWarning,
    ErrorPart,
    FinishPart,
    FinishReason,
    ResponseMetadataPart,
    StreamStartPart,
    ToolCallStreamPart,
    Usage,
)


def test_finish_part_serializes_camel_case_usage():
    part = FinishPart(finish_reason=FinishReason.CONTENT_FILTER, usage=Usage(input_tokens=1, total_tokens=3))

    assert part.to_dict() == {
        "type": "finish",
        "finishReason": "content-filter",
        "usage": {
            "inputTokens": 1,
            "outputTokens": None,
            "totalTokens": 3,
            "reasoningTokens": None,
            "cachedInputTokens": None,
        },
    }


def test_stream_start_serializes_warnings():
    part = StreamStartPart(warnings=[CallWarning(type="unsupported-setting", setting="topK")])
    assert part.to_dict() == {
        "type": "stream-start",
        "warnings": [{"type": "unsupported-setting", "setting": "topK"}],
    }


def test_tool_call_defaults_to_provider_executed():
    part = ToolCallStreamPart(tool_call_id="c1", tool_name="search")
    assert part.input == ""
    assert part.to_dict()["providerExecuted"] is True


def test_response_metadata_serializes_model_id():
    assert ResponseMetadataPart(id="resp_1", model_id="m").to_dict() == {
        "type": "response-metadata",
        "id": "resp_1",
        "modelId": "m",
    }


def test_error_part_message():
    assert ErrorPart(error={"message": "boom", "code": "E"}).message == "boom"
    assert ErrorPart(error={"code": "E"}).message == "{'code': 'E'}"
    assert ErrorPart(error=InvalidResponseDataError(message="bad record")).message == "bad record"
    assert ErrorPart(error=ValueError("x")).to_dict() == {"type": "error", "error": "x"}

"""
AgentScope Message Conversion Unit Tests
"""

import base64
from dataclasses import dataclass

import pytest

from agentscope_provider.common.errors import InvalidPromptError
from agentscope_provider.domain.prompt import (
    AssistantTurn,
    FilePart,
    ReasoningPart,
    SystemTurn,
    TextPart,
    ToolCallPart,
    ToolResultPart,
    UserTurn,
)
from agentscope_provider.providers.agentscope.messages import convert_to_agentscope_messages


def test_converts_system_and_user_messages():
    messages = convert_to_agentscope_messages(
        [SystemTurn(content="hi"), UserTurn(content=[TextPart(text="hello")])]
    )

    assert len(messages) == 2
    assert messages[0] == {
        "object": "message",
        "type": "message",
        "role": "system",
        "content": [{"type": "text", "text": "hi"}],
    }
    assert messages[1]["role"] == "user"
    assert messages[1]["content"][0] == {"type": "text", "text": "hello"}


def test_maps_url_file_part_to_image_content():
    messages = convert_to_agentscope_messages(
        [UserTurn(content=[FilePart(data="http://localhost/img.png", media_type="image/png")])]
    )
    assert messages[0]["content"][0] == {"type": "image", "image_url": "http://localhost/img.png"}


def test_maps_inline_bytes_to_base64_file_content():
    messages = convert_to_agentscope_messages(
        [UserTurn(content=[FilePart(data=b"\x00\x01pdf", media_type="application/pdf", filename="a.pdf")])]
    )
    assert messages[0]["content"][0] == {
        "type": "file",
        "file_data": base64.b64encode(b"\x00\x01pdf").decode("ascii"),
        "filename": "a.pdf",
    }


def test_ignores_unsupported_assistant_parts_but_keeps_reasoning_as_text():
    messages = convert_to_agentscope_messages(
        [
            AssistantTurn(
                content=[
                    ReasoningPart(text="thinking..."),
                    ToolResultPart(tool_call_id="c1", tool_name="demo", output={"ok": True}),
                    TextPart(text="final answer"),
                ]
            )
        ]
    )

    assert len(messages) == 1
    assert messages[0]["content"] == [
        {"type": "text", "text": "thinking..."},
        {"type": "text", "text": "final answer"},
    ]


def test_assistant_with_only_tool_parts_gets_empty_text():
    messages = convert_to_agentscope_messages(
        [AssistantTurn(content=[ToolCallPart(tool_call_id="c1", tool_name="search", input={})])]
    )
    assert messages[0]["content"] == [{"type": "text", "text": ""}]


def test_no_message_has_empty_content():
    messages = convert_to_agentscope_messages(
        [SystemTurn(content=""), UserTurn(content=[]), AssistantTurn(content=[])]
    )
    assert all(len(message["content"]) >= 1 for message in messages)


@pytest.mark.parametrize(
    "part",
    [
        ReasoningPart(text="hmm"),
        ToolCallPart(tool_call_id="c1", tool_name="search"),
        ToolResultPart(tool_call_id="c1", tool_name="search", output="r"),
    ],
)
def test_unsupported_user_part_raises(part):
    with pytest.raises(InvalidPromptError) as exc_info:
        convert_to_agentscope_messages([UserTurn(content=[TextPart(text="a"), part])])
    assert exc_info.value.code == "unsupported_content"


def test_unknown_role_raises():
    @dataclass
    class ToolTurn:
        content: list
        role: str = "tool"

    with pytest.raises(InvalidPromptError) as exc_info:
        convert_to_agentscope_messages([ToolTurn(content=[])])
    assert exc_info.value.code == "unsupported_role"

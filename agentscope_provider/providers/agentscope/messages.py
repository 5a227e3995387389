"""
Prompt → AgentScope message conversion

AgentScope accepts text, image (by URL) and file (base64) content. It has no
reasoning or tool-calling channel, so assistant reasoning is sent as plain
text and assistant tool parts are dropped. User turns are strict: any content
the runtime cannot accept is rejected.
"""

import base64
from typing import Any, Union

from agentscope_provider.common.errors import InvalidPromptError
from agentscope_provider.domain.prompt import ConversationTurn, Prompt

AgentScopeContent = dict[str, Any]
AgentScopeMessagePayload = dict[str, Any]


def _text_content(text: str) -> AgentScopeContent:
    return {"type": "text", "text": text}


def _file_content(data: Union[str, bytes], filename: Any = None) -> AgentScopeContent:
    if isinstance(data, (bytes, bytearray, memoryview)):
        content: AgentScopeContent = {
            "type": "file",
            "file_data": base64.b64encode(bytes(data)).decode("ascii"),
        }
        if filename:
            content["filename"] = filename
        return content

    return {"type": "image", "image_url": str(data)}


def _message(role: str, content: list[AgentScopeContent]) -> AgentScopeMessagePayload:
    return {
        "object": "message",
        "type": "message",
        "role": role,
        "content": content,
    }


def _convert_user_content(turn: ConversationTurn) -> list[AgentScopeContent]:
    content = []
    for part in turn.content:
        part_type = getattr(part, "type", None)
        if part_type == "text":
            content.append(_text_content(part.text))
        elif part_type == "file":
            content.append(_file_content(part.data, part.filename))
        else:
            raise InvalidPromptError(
                message=f"Unsupported user content part type: {part_type}",
                code="unsupported_content",
                details={"part_type": part_type},
            )

    if not content:
        content.append(_text_content(""))
    return content


def _convert_assistant_content(turn: ConversationTurn) -> list[AgentScopeContent]:
    content = []
    for part in turn.content:
        part_type = getattr(part, "type", None)
        if part_type in ("text", "reasoning"):
            content.append(_text_content(part.text))
        # tool-call, tool-result, file: no AgentScope equivalent

    if not content:
        # AgentScope rejects messages with empty content
        content.append(_text_content(""))
    return content


def convert_to_agentscope_messages(prompt: Prompt) -> list[AgentScopeMessagePayload]:
    """
    Convert conversation turns into the AgentScope `input` message list.

    Args:
        prompt: Ordered conversation turns

    Returns:
        list: AgentScope messages, each with a non-empty content list

    Raises:
        InvalidPromptError: unknown role, or unsupported user content
    """
    messages: list[AgentScopeMessagePayload] = []
    for turn in prompt:
        role = getattr(turn, "role", None)
        if role == "system":
            messages.append(_message("system", [_text_content(turn.content)]))
        elif role == "user":
            messages.append(_message("user", _convert_user_content(turn)))
        elif role == "assistant":
            messages.append(_message("assistant", _convert_assistant_content(turn)))
        else:
            raise InvalidPromptError(
                message=f"Unsupported message role: {role}",
                code="unsupported_role",
                details={"role": role},
            )
    return messages

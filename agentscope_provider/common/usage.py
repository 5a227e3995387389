"""
Usage Normalization Helpers

Normalize token usage objects reported by the AgentScope runtime, which may use
snake_case, camelCase or OpenAI-style (prompt/completion) key names.
"""

from __future__ import annotations

from typing import Any, Optional

from agentscope_provider.domain.stream import Usage


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return None


def _first_int(usage: dict[str, Any], *keys: str) -> Optional[int]:
    for key in keys:
        value = _as_int(usage.get(key))
        if value is not None:
            return value
    return None


def normalize_usage(raw: Any) -> Optional[Usage]:
    """
    Normalize a vendor usage object

    Args:
        raw: usage value from a response or stream record

    Returns:
        Usage: Normalized usage, or None when raw is not an object
    """
    if not isinstance(raw, dict):
        return None

    return Usage(
        input_tokens=_first_int(raw, "input_tokens", "prompt_tokens", "inputTokens", "promptTokens"),
        output_tokens=_first_int(
            raw, "output_tokens", "completion_tokens", "outputTokens", "completionTokens"
        ),
        total_tokens=_first_int(raw, "total_tokens", "totalTokens"),
        reasoning_tokens=_first_int(raw, "reasoning_tokens", "reasoningTokens"),
        cached_input_tokens=_first_int(raw, "cached_input_tokens", "cachedInputTokens"),
    )

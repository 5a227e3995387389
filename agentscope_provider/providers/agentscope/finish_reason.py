"""
AgentScope status → normalized finish reason
"""

from typing import Any

from agentscope_provider.domain.stream import FinishReason

_STATUS_FINISH_REASONS: dict[str, FinishReason] = {
    "completed": FinishReason.STOP,
    "failed": FinishReason.ERROR,
    "canceled": FinishReason.OTHER,
    "rejected": FinishReason.CONTENT_FILTER,
    "in_progress": FinishReason.UNKNOWN,
    "created": FinishReason.UNKNOWN,
    "queued": FinishReason.UNKNOWN,
}


def map_agentscope_finish_reason(status: Any = None) -> FinishReason:
    """
    Map an AgentScope response/message status to a FinishReason.

    Unrecognized or missing statuses map to FinishReason.UNKNOWN.
    """
    if not isinstance(status, str):
        return FinishReason.UNKNOWN
    return _STATUS_FINISH_REASONS.get(status, FinishReason.UNKNOWN)

"""
AgentScope Finish Reason Mapping Unit Tests
"""

import pytest

from agentscope_provider.domain.stream import FinishReason
from agentscope_provider.providers.agentscope.finish_reason import map_agentscope_finish_reason


@pytest.mark.parametrize(
    "status, expected",
    [
        ("completed", FinishReason.STOP),
        ("failed", FinishReason.ERROR),
        ("canceled", FinishReason.OTHER),
        ("rejected", FinishReason.CONTENT_FILTER),
        ("in_progress", FinishReason.UNKNOWN),
        ("created", FinishReason.UNKNOWN),
        ("queued", FinishReason.UNKNOWN),
    ],
)
def test_known_statuses(status, expected):
    assert map_agentscope_finish_reason(status) == expected


@pytest.mark.parametrize("status", [None, "", "COMPLETED", "weird", 42, {"status": "completed"}])
def test_unknown_input_maps_to_unknown(status):
    assert map_agentscope_finish_reason(status) == FinishReason.UNKNOWN


def test_missing_status_maps_to_unknown():
    assert map_agentscope_finish_reason() == FinishReason.UNKNOWN

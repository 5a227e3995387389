"""
Test Configuration Module
"""

from typing import Callable

import httpx
import pytest

from agentscope_provider.providers.agentscope import (
    AgentScopeChatLanguageModel,
    AgentScopeLanguageModelConfig,
)


@pytest.fixture
def make_model() -> Callable[..., AgentScopeChatLanguageModel]:
    """
    Build a chat model whose HTTP traffic goes to `handler`

    The handler receives the httpx.Request and returns an httpx.Response.
    """

    def factory(handler, model_id: str = "test-model", **overrides) -> AgentScopeChatLanguageModel:
        values = {
            "base_url": "http://localhost:8000",
            "stream_path": "/stream",
            "process_path": "/process",
            "user_id": "u1",
            "client_factory": lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        }
        values.update(overrides)
        return AgentScopeChatLanguageModel(model_id, AgentScopeLanguageModelConfig(**values))

    return factory

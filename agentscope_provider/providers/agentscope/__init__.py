"""
AgentScope provider module initialization
"""

from agentscope_provider.providers.agentscope.chat_model import (
    AgentScopeChatLanguageModel,
    AgentScopeLanguageModelConfig,
    AgentScopeProviderOptions,
)
from agentscope_provider.providers.agentscope.finish_reason import map_agentscope_finish_reason
from agentscope_provider.providers.agentscope.messages import convert_to_agentscope_messages
from agentscope_provider.providers.agentscope.provider import (
    AgentScopeProvider,
    AgentScopeProviderSettings,
    create_agentscope,
    get_default_provider,
)
from agentscope_provider.providers.agentscope.stream import (
    AgentScopeStreamTransformer,
    decode_agentscope_stream,
)

__all__ = [
    "AgentScopeChatLanguageModel",
    "AgentScopeLanguageModelConfig",
    "AgentScopeProviderOptions",
    "AgentScopeProvider",
    "AgentScopeProviderSettings",
    "AgentScopeStreamTransformer",
    "convert_to_agentscope_messages",
    "create_agentscope",
    "decode_agentscope_stream",
    "get_default_provider",
    "map_agentscope_finish_reason",
]

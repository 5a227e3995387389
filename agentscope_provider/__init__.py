"""
AgentScope Provider

Adapts a vendor-neutral chat model interface to the AgentScope runtime's
HTTP / Server-Sent-Events protocol.
"""

from agentscope_provider.providers.agentscope import (
    AgentScopeChatLanguageModel,
    AgentScopeProvider,
    AgentScopeProviderSettings,
    create_agentscope,
)

__version__ = "0.1.0"
__all__ = [
    "AgentScopeChatLanguageModel",
    "AgentScopeProvider",
    "AgentScopeProviderSettings",
    "create_agentscope",
]

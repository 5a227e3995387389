"""
Chat model providers module initialization
"""

from agentscope_provider.providers.base import GenerateResult, LanguageModel, StreamResult

__all__ = [
    "GenerateResult",
    "LanguageModel",
    "StreamResult",
]

"""
API Router Module Initialization
"""

from agentscope_provider.api.chat import router as chat_router

__all__ = [
    "chat_router",
]

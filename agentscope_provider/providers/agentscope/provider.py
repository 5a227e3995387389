"""
AgentScope Provider Factory

Creates AgentScope chat models sharing one configuration.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Optional

import httpx

from agentscope_provider.common.errors import NoSuchModelError
from agentscope_provider.config import get_settings
from agentscope_provider.providers.agentscope.chat_model import (
    AgentScopeChatLanguageModel,
    AgentScopeLanguageModelConfig,
)

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_MODEL_ID = "agentscope-runtime"


@dataclass
class AgentScopeProviderSettings:
    """Provider settings; unset paths and base URL fall back to the runtime defaults."""

    user_id: Optional[str]
    base_url: Optional[str] = None
    stream_path: Optional[str] = None
    process_path: Optional[str] = None
    headers: Optional[dict[str, str]] = None
    session_id: Optional[str] = None
    client_factory: Optional[Callable[[], httpx.AsyncClient]] = None
    timeout: Optional[float] = None
    warn_unknown_events: bool = True


def _without_trailing_slash(url: Optional[str]) -> Optional[str]:
    return url.rstrip("/") if url else None


def build_config(settings: AgentScopeProviderSettings) -> AgentScopeLanguageModelConfig:
    headers = dict(settings.headers) if settings.headers else None
    return AgentScopeLanguageModelConfig(
        base_url=_without_trailing_slash(settings.base_url) or DEFAULT_BASE_URL,
        stream_path=settings.stream_path or "/stream",
        process_path=settings.process_path or "/process",
        user_id=settings.user_id,
        session_id=settings.session_id,
        headers=(lambda: headers) if headers else None,
        client_factory=settings.client_factory,
        timeout=settings.timeout if settings.timeout is not None else get_settings().HTTP_TIMEOUT,
        warn_unknown_events=settings.warn_unknown_events,
    )


class AgentScopeProvider:
    """
    AgentScope Provider

    Calling the provider returns a chat model; AgentScope offers no embedding
    or image models.
    """

    def __init__(self, settings: AgentScopeProviderSettings):
        self.config = build_config(settings)

    def __call__(self, model_id: Optional[str] = None) -> AgentScopeChatLanguageModel:
        return self.language_model(model_id)

    def language_model(self, model_id: Optional[str] = None) -> AgentScopeChatLanguageModel:
        return AgentScopeChatLanguageModel(model_id or DEFAULT_MODEL_ID, self.config)

    def text_embedding_model(self, model_id: str):
        raise NoSuchModelError(model_id=model_id, model_type="textEmbeddingModel")

    def image_model(self, model_id: str):
        raise NoSuchModelError(model_id=model_id, model_type="imageModel")


def create_agentscope(settings: AgentScopeProviderSettings) -> AgentScopeProvider:
    """
    Create an AgentScope provider

    Args:
        settings: Provider settings

    Returns:
        AgentScopeProvider: Callable model factory
    """
    return AgentScopeProvider(settings)


@lru_cache()
def get_default_provider() -> AgentScopeProvider:
    """
    Get the provider configured from application settings (Singleton)

    Returns:
        AgentScopeProvider: Provider built from AGENTSCOPE_* settings
    """
    settings = get_settings()
    return create_agentscope(
        AgentScopeProviderSettings(
            base_url=settings.AGENTSCOPE_BASE_URL,
            stream_path=settings.AGENTSCOPE_STREAM_PATH,
            process_path=settings.AGENTSCOPE_PROCESS_PATH,
            user_id=settings.AGENTSCOPE_USER_ID,
            session_id=settings.AGENTSCOPE_SESSION_ID,
            timeout=settings.HTTP_TIMEOUT,
            warn_unknown_events=settings.WARN_UNKNOWN_EVENTS,
        )
    )

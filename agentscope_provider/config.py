"""
Configuration Management Module

Configures the AgentScope adapter via environment variables or .env file.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application Configuration Class

    All configuration items can be overridden by environment variables, with names matching fields (uppercase).
    """

    # Application Config
    APP_NAME: str = "AgentScope Provider"
    DEBUG: bool = False

    # AgentScope Runtime Config
    # Base URL of the AgentScope runtime (trailing slash is stripped)
    AGENTSCOPE_BASE_URL: Optional[str] = None
    # Path used for streaming (SSE) calls
    AGENTSCOPE_STREAM_PATH: str = "/stream"
    # Path used for single-shot calls
    AGENTSCOPE_PROCESS_PATH: str = "/process"
    # Default user id sent as user_id when the caller provides none
    AGENTSCOPE_USER_ID: str = "demo-user"
    # Default session id sent as session_id when the caller provides none
    AGENTSCOPE_SESSION_ID: Optional[str] = None
    # Model id used when none is requested
    AGENTSCOPE_MODEL_ID: str = "agentscope-runtime"

    # HTTP Client Config
    # Request timeout (seconds)
    HTTP_TIMEOUT: int = 1800

    # Stream Decoding Config
    # Log a warning (once per kind) for unhandled SSE event kinds
    WARN_UNKNOWN_EVENTS: bool = True

    # Chat API Config
    # Fallback identifiers used by POST /api/chat
    CHAT_DEFAULT_USER_ID: str = "wk-ios"
    CHAT_DEFAULT_SESSION_ID: str = "test01"

    # CORS Config
    # Comma-separated list of allowed origins for CORS
    # Example: "http://localhost:8081,https://example.com"
    ALLOWED_ORIGINS: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get application configuration (Singleton)

    Returns:
        Settings: Application configuration instance
    """
    return Settings()

"""
Configuration Management Module

Configures upstream endpoints and HTTP client limits via environment variables or .env file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application Configuration Class

    All configuration items can be overridden by environment variables, with names matching fields (uppercase).
    """

    # Application Config
    APP_NAME: str = "Key Relay"
    DEBUG: bool = False

    # Groq Upstream Config
    # Base URL that the path suffix (after GROQ_ROUTE_PREFIX) is appended to
    GROQ_BASE_URL: str = "https://api.groq.com/openai/v1"
    # Inbound paths starting with this prefix are forwarded to Groq
    GROQ_ROUTE_PREFIX: str = "/groq"

    # Gemini Upstream Config
    # Inbound path and query are appended verbatim
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com"

    # HTTP Client Config
    # Request timeout (seconds)
    HTTP_TIMEOUT: int = 300
    # Connection pool limits
    HTTP_MAX_CONNECTIONS: int = 100
    HTTP_MAX_KEEPALIVE_CONNECTIONS: int = 20

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get application configuration (Singleton)

    Returns:
        Settings: Application configuration instance
    """
    return Settings()

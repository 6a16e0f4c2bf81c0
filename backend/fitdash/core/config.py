"""
Application configuration.
All sensitive values loaded from environment variables.
"""
from typing import List, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Record store
    DATABASE_URL: str = "postgresql+asyncpg://postgres:postgres@db:5432/fitdash"
    DOCUMENT_NAMESPACE: str = "artifacts"
    APP_ID: str = "default-app-id"

    # Identity - fixed user id for single-user deployments, anonymous otherwise
    USER_ID: Optional[str] = None

    # AI Provider Configuration
    # Supported providers: gemini
    AI_PROVIDER: str = "gemini"
    AI_API_KEY: str = ""
    AI_BASE_URL: Optional[str] = None  # Custom base URL if needed
    AI_MODEL: Optional[str] = None  # Custom model name
    AI_TIMEOUT: float = 60.0

    # Provider-specific API keys (optional, falls back to AI_API_KEY)
    GEMINI_API_KEY: Optional[str] = None

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or console

    # AI Debug Logging - enables prompt/response content logging
    # WARNING: Set to True only for debugging, logs may contain personal data
    AI_DEBUG_LOG: bool = False
    # Maximum length of message content to log (0 = unlimited)
    AI_DEBUG_LOG_MAX_LENGTH: int = 2000

    def get_api_key(self, provider: str) -> str:
        """Get API key for a specific provider."""
        provider_keys = {
            "gemini": self.GEMINI_API_KEY,
        }
        # Return provider-specific key if set, otherwise fall back to AI_API_KEY
        return provider_keys.get(provider.lower()) or self.AI_API_KEY

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()

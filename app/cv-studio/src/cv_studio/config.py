"""Configuration settings for cv-studio service."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Service
    SERVICE_NAME: str = "cv-studio"
    DEBUG: bool = False

    # LLM Provider
    LLM_TYPE: str = "openai"  # openai, anthropic, ollama, openai_compatible
    LLM_ENDPOINT: str = ""  # Custom endpoint URL (for local/proxy)
    LLM_API_KEY: str = ""
    LLM_MODEL: str = "gpt-4o-mini"
    LLM_MAX_TOKENS: int = 4096
    LLM_TEMPERATURE: float = 0.2

    # Processing limits
    MAX_FILE_SIZE_MB: int = 10
    MAX_SESSIONS: int = 500

    # Output language used when neither the request nor the CV names one
    DEFAULT_LANGUAGE: str = "en"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # LLM (any OpenAI-compatible endpoint; defaults to Gemini)
    LLM_API_KEY: str = ""
    LLM_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    LLM_FAST_MODEL: str = "gemini-2.5-flash"
    LLM_REASONING_MODEL: str = "gemini-2.5-pro"

    # Literature search
    SEMANTIC_SCHOLAR_API_KEY: str = ""
    SEARCH_RESULT_LIMIT: int = 50

    # Agents
    AGENT_MAX_RETRIES: int = 0

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./scholarpulse.db"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # App
    DEBUG: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()

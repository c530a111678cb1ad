"""
Configuration management for the Ledger Chat finance agent.
Centralized settings with environment variable validation.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache
from dotenv import load_dotenv

load_dotenv(override=True)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Supabase Configuration (transactions, chat, budgets, patterns, preferences)
    supabase_url: str
    supabase_service_key: str

    # Groq Configuration
    groq_api_key: str

    # App Configuration
    debug: bool = False

    # Agent Model Configuration
    agent_model: str = "llama-3.1-8b-instant"
    model_temperature: float = 0.2
    model_max_tokens: int = 600
    model_timeout_seconds: float = 20.0

    # Context Assembly
    context_transaction_limit: int = 10
    context_history_limit: int = 10

    # Analytics
    unusual_spending_threshold: float = 20.0  # percent deviation from expected monthly spend

    # CORS Configuration
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()

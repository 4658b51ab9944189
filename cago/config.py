from pydantic_settings import BaseSettings
from functools import lru_cache
import os

class Settings(BaseSettings):
    # API Keys
    anthropic_api_key: str = ""
    openai_api_key: str = ""

    # LLM provider: "anthropic" or "openai"
    llm_provider: str = "anthropic"
    anthropic_model: str = "claude-sonnet-4-20250514"
    openai_model: str = "gpt-4.1-mini"

    # Test Mode - canned model responses, no upstream calls
    test_mode: bool = False

    # App Settings
    app_name: str = "Cago"
    app_version: str = "1.0.0"
    debug: bool = True
    log_level: str = "INFO"

    # API Settings
    backend_host: str = "0.0.0.0"
    backend_port: int = int(os.getenv("PORT", "3001"))
    allowed_origins: str = "http://localhost:5173,http://localhost:3000"

    # Rate limiting (slowapi)
    rate_limit_enabled: bool = True
    generation_rate_limit: str = "30/hour"

    # Read.ai integration
    readai_base_url: str = "https://api.read.ai/v1"
    readai_timeout_seconds: float = 15.0

    # Meeting notes
    max_upload_bytes: int = 10 * 1024 * 1024  # 10MB
    max_notes_chars: int = 30000
    meeting_history_limit: int = 10

    class Config:
        env_file = ".env"

@lru_cache()
def get_settings() -> Settings:
    return Settings()

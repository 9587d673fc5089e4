from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    anthropic_api_key: str = ""
    narrative_model: str = "claude-sonnet-4-5"
    insight_relay_url: str = "http://127.0.0.1:8000/api/insight"
    insight_timeout_seconds: float = 30.0
    cors_origins: list[str] = ["http://localhost:3000"]
    log_level: str = "INFO"
    company_name: str = "Nexalis Solutions"
    max_sessions: int = 1000

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()

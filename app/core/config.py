# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Supabase Postgres connection string)
      - SUPABASE_URL
      - SUPABASE_KEY (anon key)
      - OPENAI_API_KEY

    Optional:
      - SUPABASE_JWT_SECRET (verify access tokens locally instead of
        asking Supabase Auth on every request)
      - OPENAI_BASE_URL (OpenAI-compatible gateways)
    """

    PROJECT_NAME: str = "Book Generator Backend"
    API_PREFIX: str = "/api"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Supabase / DB config
    DATABASE_URL: str
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str | None = None
    SUPABASE_JWT_ALG: str = "HS256"
    AUTH_COOKIE_NAME: str = "sb-access-token"

    # LLM provider
    OPENAI_API_KEY: str
    OPENAI_BASE_URL: str | None = None
    DEFAULT_MODEL: str = "gpt-4o-mini"
    # OpenAI client timeout: bounds each request and read, not a whole stream
    ASK_MAX_DURATION_SECONDS: float = 30.0

    # Landing redirect target for signed-in users
    DASHBOARD_PATH: str = "/dashboard"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()

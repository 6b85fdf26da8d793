from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized runtime configuration loaded from environment variables.
    """

    SUPABASE_URL: str
    SUPABASE_SERVICE_ROLE_KEY: str
    SUPABASE_ANON_KEY: str | None = None
    COMMENTS_TABLE: str = "comments"
    AUDIT_LOG_TABLE: str = "audit_logs"
    # The store rejects membership filters with more values than this.
    MEMBERSHIP_FILTER_LIMIT: int = Field(10, ge=1, le=10)
    API_PREFIX: str = "/api"
    APP_NAME: str = "Bookshelf Ratings API"
    ALLOWED_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()

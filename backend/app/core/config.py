from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "StartupDetective"
    debug: bool = False

    # API
    frontend_url: str = "http://localhost:5173"
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:8080",
    ]

    # Redis (board snapshot persistence)
    redis_url: str = "redis://localhost:6379"
    persist_snapshots: bool = False  # env: PERSIST_SNAPSHOTS
    snapshot_ttl_seconds: int | None = None  # None = keep forever


@lru_cache
def get_settings() -> Settings:
    return Settings()

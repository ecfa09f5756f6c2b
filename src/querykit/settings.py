"""Settings for querykit."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class QueryKitSettings(BaseSettings):
    """querykit configuration settings."""

    # SQLite
    SQLITE_DATABASE: str = ":memory:"
    SQLITE_STRICT_MODE: bool = True

    # PostgreSQL
    PG_HOST: str = "localhost"
    PG_PORT: str = "5432"
    PG_DBNAME: Optional[str] = None
    PG_USER: str = "postgres"
    PG_PASSWORD: str = "postgres"

    # Query model
    DEFAULT_MODEL_VERSION: int = 0
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = QueryKitSettings()

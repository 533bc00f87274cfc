from functools import lru_cache
from typing import Dict, Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database settings
    DB_URL: str = "sqlite+aiosqlite:///./finance.db"
    DB_ECHO: bool = False  # Set to True for SQL query logging

    # API settings
    API_VERSION: str = "v1"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Ledger settings
    BASE_CURRENCY: Literal["ARS", "USD", "EUR"] = "USD"
    EXCHANGE_RATES: Optional[Dict[str, float]] = None  # units per USD, e.g. {"ARS": 850}
    DEFAULT_USER_ID: str = "default"
    SEED_SAMPLE_DATA: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        validate_default=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Returns cached Settings instance to avoid reloading .env file on every access
    """
    return Settings()

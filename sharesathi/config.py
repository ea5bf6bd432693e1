"""
Application settings
"""
from pydantic_settings import BaseSettings
from pathlib import Path
from typing import Optional


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "ShareSathi"
    APP_VERSION: str = "1.2.0"
    APP_ENV: str = "development"
    DEBUG: bool = False

    # Database (durable key/value storage for the stores)
    DATABASE_URL: str = "sqlite:///./sharesathi.db"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = True

    # Groq LLM
    GROQ_API_KEY: Optional[str] = None
    GROQ_MODEL: str = "llama-3.1-8b-instant"
    GROQ_MAX_TOKENS: int = 500
    GROQ_TEMPERATURE: float = 0.7

    # Outbound HTTP
    HTTP_TIMEOUT_SECONDS: float = 8.0
    HTTP_USER_AGENT: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

    # Quote cache
    QUOTE_CACHE_TTL_SECONDS: int = 300  # 5 minutes
    CACHE_PURGE_MINUTES: int = 5

    # Watchlists
    MAX_WATCHLISTS: int = 10
    MAX_STOCKS_PER_WATCHLIST: int = 50
    WATCHLIST_STORAGE_KEY: str = "sharesathi-watchlists"
    SETTINGS_STORAGE_KEY: str = "sharesathi-settings"

    # Market data
    BATCH_MAX_SYMBOLS: int = 50
    NEWS_MAX_ITEMS: int = 25
    SEARCH_MAX_RESULTS: int = 15

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()

# Project paths
BASE_DIR = Path(__file__).resolve().parent.parent
PACKAGE_DIR = Path(__file__).resolve().parent
DATA_DIR = PACKAGE_DIR / "data"

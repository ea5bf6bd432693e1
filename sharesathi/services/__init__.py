"""
Business logic services
"""
from sharesathi.services.storage_service import KeyValueStorage
from sharesathi.services.watchlist_service import WatchlistStore
from sharesathi.services.settings_service import SettingsStore, DisplaySettings
from sharesathi.services.quote_cache import quote_cache, QuoteCache
from sharesathi.services.stock_catalog import stock_catalog, StockCatalog
from sharesathi.services.stock_service import stock_service, StockService
from sharesathi.services.market_service import market_service, MarketService
from sharesathi.services.news_service import news_service, NewsService
from sharesathi.services.chat_service import chat_service, ChatService

__all__ = [
    "KeyValueStorage",
    "WatchlistStore",
    "SettingsStore",
    "DisplaySettings",
    "quote_cache",
    "QuoteCache",
    "stock_catalog",
    "StockCatalog",
    "stock_service",
    "StockService",
    "market_service",
    "MarketService",
    "news_service",
    "NewsService",
    "chat_service",
    "ChatService",
]

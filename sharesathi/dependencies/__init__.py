"""
Dependency injection
Stores live on app.state (built in the lifespan); services are module singletons
"""
from fastapi import Request

from sharesathi.services.chat_service import ChatService, chat_service
from sharesathi.services.market_service import MarketService, market_service
from sharesathi.services.news_service import NewsService, news_service
from sharesathi.services.settings_service import SettingsStore
from sharesathi.services.stock_service import StockService, stock_service
from sharesathi.services.watchlist_service import WatchlistStore


def get_watchlist_store(request: Request) -> WatchlistStore:
    return request.app.state.watchlist_store


def get_settings_store(request: Request) -> SettingsStore:
    return request.app.state.settings_store


def get_stock_service() -> StockService:
    return stock_service


def get_market_service() -> MarketService:
    return market_service


def get_news_service() -> NewsService:
    return news_service


def get_chat_service() -> ChatService:
    return chat_service


__all__ = [
    "get_watchlist_store",
    "get_settings_store",
    "get_stock_service",
    "get_market_service",
    "get_news_service",
    "get_chat_service",
]

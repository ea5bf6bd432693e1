"""
API routers
"""
from sharesathi.routers.watchlist import router as watchlist_router
from sharesathi.routers.settings import router as settings_router
from sharesathi.routers.stock import router as stock_router
from sharesathi.routers.stock import timemachine_router
from sharesathi.routers.stocks import router as stocks_router
from sharesathi.routers.market import router as market_router
from sharesathi.routers.search import router as search_router
from sharesathi.routers.news import router as news_router
from sharesathi.routers.chat import router as chat_router
from sharesathi.routers.learn import router as learn_router

__all__ = [
    "watchlist_router",
    "settings_router",
    "stock_router",
    "timemachine_router",
    "stocks_router",
    "market_router",
    "search_router",
    "news_router",
    "chat_router",
    "learn_router",
]

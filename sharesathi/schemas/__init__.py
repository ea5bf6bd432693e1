"""
Pydantic schemas
"""
from sharesathi.schemas.watchlist import (
    CamelModel,
    Watchlist,
    WatchlistSnapshot,
    WatchlistResponse,
    WatchlistListResponse,
    WatchlistOverviewResponse,
)
from sharesathi.schemas.stock import (
    PricePoint,
    InvestmentResult,
    TimeMachineResponse,
    StockQuote,
    BatchQuote,
    BatchResponse,
)

__all__ = [
    "CamelModel",
    "Watchlist",
    "WatchlistSnapshot",
    "WatchlistResponse",
    "WatchlistListResponse",
    "WatchlistOverviewResponse",
    "PricePoint",
    "InvestmentResult",
    "TimeMachineResponse",
    "StockQuote",
    "BatchQuote",
    "BatchResponse",
]

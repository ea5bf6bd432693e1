"""
Watchlist schemas
Persisted snapshot uses camelCase keys; the API accepts either spelling
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

SNAPSHOT_VERSION = 1


class CamelModel(BaseModel):
    """Base model serialised with camelCase aliases"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ==================== Store ====================

class Watchlist(CamelModel):
    """Named, ordered, de-duplicated collection of ticker symbols"""
    id: str
    name: str = Field(..., min_length=1, max_length=30)
    symbols: List[str] = Field(default_factory=list)
    is_default: bool = False
    order: int = 0
    created_at: datetime
    updated_at: datetime

    @field_validator("symbols")
    @classmethod
    def dedupe_symbols(cls, value: List[str]) -> List[str]:
        # first occurrence wins, insertion order kept
        return list(dict.fromkeys(value))


class WatchlistSnapshot(CamelModel):
    """Everything the watchlist store persists under its storage key"""
    version: int = SNAPSHOT_VERSION
    watchlists: List[Watchlist]
    active_watchlist_id: str


# ==================== Requests ====================

class WatchlistCreate(BaseModel):
    """Create watchlist request"""
    name: str = Field("", max_length=100)


class WatchlistRename(BaseModel):
    """Rename watchlist request"""
    name: str = Field(..., max_length=100)


class StockAdd(BaseModel):
    """Add stock request"""
    symbol: str = Field(..., min_length=1, max_length=20)


class StockReorder(BaseModel):
    """Reorder stocks request"""
    symbols: List[str]


# ==================== Responses ====================

class ResponseBase(CamelModel):
    """Base response"""
    success: bool = True
    message: Optional[str] = None


class WatchlistResponse(ResponseBase):
    """Single watchlist response"""
    data: Optional[Watchlist] = None


class WatchlistListResponse(ResponseBase):
    """All watchlists"""
    data: List[Watchlist] = []
    active_watchlist_id: str
    total: int = 0
    can_create: bool = True


class OverviewStock(CamelModel):
    """Watchlist row: catalog metadata overlaid with the live quote"""
    symbol: str
    name: str
    short_name: str
    price: float = 0
    change: float = 0
    change_percent: float = 0
    market_cap: float = 0
    volume: float = 0
    fifty_two_week_high: float = 0
    fifty_two_week_low: float = 0
    fifty_two_week_position: Optional[float] = None
    is_live: bool = False


class WatchlistMetrics(CamelModel):
    """Aggregate movement of a watchlist"""
    total_value: float = 0
    total_market_cap: float = 0
    gainers: int = 0
    losers: int = 0
    unchanged: int = 0
    avg_change: float = 0
    top_gainer: Optional[str] = None
    top_loser: Optional[str] = None
    total_change: float = 0


class WatchlistOverviewResponse(ResponseBase):
    """Watchlist with live rows and metrics"""
    data: Watchlist
    stocks: List[OverviewStock] = []
    metrics: WatchlistMetrics

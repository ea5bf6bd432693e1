"""
Market data schemas
"""
from datetime import date, datetime
from typing import Dict, List, NamedTuple, Optional, Union

from pydantic import BaseModel, Field, computed_field

from sharesathi.schemas.watchlist import CamelModel


class PricePoint(NamedTuple):
    """One (date, price) observation of a historical series"""
    date: Union[date, datetime]
    price: float


# ==================== Time machine ====================

class InvestmentResult(CamelModel):
    """Outcome of a historical what-if investment"""
    investment_date: date
    investment_price: float
    current_price: float
    shares: float
    invested_amount: float
    current_value: float
    profit: float
    profit_percent: float
    years_back: int
    actual_years: float
    cagr: float  # fraction, 0.12 == 12% a year

    @computed_field
    @property
    def cagr_percent(self) -> float:
        return self.cagr * 100


class TimeMachineResponse(CamelModel):
    """History lookup plus calculation (result is None when undefined)"""
    symbol: str
    amount: float
    years: int
    current_price: float
    history_points: int
    result: Optional[InvestmentResult] = None


# ==================== Quotes ====================

class HistoryPoint(CamelModel):
    date: str
    price: float


class OhlcvPoint(CamelModel):
    date: str
    close: float
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    volume: Optional[float] = None


class StockQuote(CamelModel):
    """Single stock snapshot"""
    symbol: str
    name: str
    short_name: str
    price: float
    previous_close: float
    change: float
    change_percent: float
    open: float = 0
    high: float = 0
    low: float = 0
    volume: float = 0
    market_cap: float = 0  # crores
    fifty_two_week_high: float = 0
    fifty_two_week_low: float = 0
    price_history: List[OhlcvPoint] = []
    timestamp: datetime
    is_live: bool = True


class BatchQuote(CamelModel):
    """Live snapshot with multi-period change percentages"""
    symbol: str
    name: str
    short_name: str
    price: float
    change: float
    change_percent: float
    change_percent_week: float = 0
    change_percent_month: float = 0
    change_percent_year: float = 0
    change_percent5_year: float = Field(0, alias="changePercent5Year")
    change_percent10_year: float = Field(0, alias="changePercent10Year")
    volume: float = 0
    fifty_two_week_high: float = 0
    fifty_two_week_low: float = 0
    is_live: bool = True


class BatchRequest(BaseModel):
    symbols: List[str]


class BatchResponse(CamelModel):
    stocks: Dict[str, BatchQuote]
    fetched: int
    requested: int


class HistoryResponse(CamelModel):
    symbol: str
    history: List[HistoryPoint] = []
    current_price: float = 0
    currency: str = "INR"


class ChartResponse(CamelModel):
    symbol: str
    interval: str
    range: str
    price_history: List[OhlcvPoint] = []


class SearchResult(CamelModel):
    symbol: str
    name: str
    short_name: str
    exchange: str
    yahoo_symbol: str


class MarketIndex(CamelModel):
    name: str
    symbol: str
    value: float
    previous_close: float = 0
    change: float
    change_percent: float


class MarketStock(CamelModel):
    """Row of the market table (BSE bhavcopy / index constituents)"""
    symbol: str
    bse_code: Optional[str] = None
    name: str
    short_name: str
    price: float
    previous_close: float
    change: float
    change_percent: float
    volume: float = 0
    exchange: str = "BSE"
    isin: Optional[str] = None
    industry: Optional[str] = None

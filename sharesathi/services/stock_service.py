"""
Stock service
Quotes, history and the time machine on top of the Yahoo client,
with batch quotes served through the quote cache
"""
import logging
from datetime import date, datetime
from typing import Dict, List, Optional

from sharesathi.config import settings
from sharesathi.data_sources.yahoo_finance import YahooFinanceClient, yahoo_finance
from sharesathi.exceptions import StockNotFoundError, ValidationError
from sharesathi.schemas.stock import (
    BatchQuote,
    BatchResponse,
    ChartResponse,
    HistoryResponse,
    StockQuote,
    TimeMachineResponse,
)
from sharesathi.services.calculator_service import calculate_investment
from sharesathi.services.quote_cache import QuoteCache, quote_cache
from sharesathi.services.stock_catalog import StockCatalog, stock_catalog

logger = logging.getLogger(__name__)


def history_period_for(years: int) -> str:
    """Smallest Yahoo range that covers years of history"""
    if years <= 5:
        return "5y"
    if years <= 10:
        return "10y"
    return "max"


def normalize_symbols(symbols: List[str], limit: int) -> List[str]:
    """Trimmed, de-duplicated symbols in request order, at most limit"""
    seen = []
    for symbol in symbols:
        symbol = (symbol or "").strip()
        if symbol and symbol not in seen:
            seen.append(symbol)
    return seen[:limit]


class StockService:
    """Stock data service"""

    def __init__(
        self,
        client: Optional[YahooFinanceClient] = None,
        cache: Optional[QuoteCache] = None,
        catalog: Optional[StockCatalog] = None,
    ):
        self.client = client or yahoo_finance
        self.cache = cache if cache is not None else quote_cache
        self.catalog = catalog or stock_catalog

    async def get_quote(self, symbol: str) -> StockQuote:
        quote = await self.client.get_quote(symbol)
        if quote is None:
            raise StockNotFoundError(symbol)
        return quote

    async def get_history(self, symbol: str, period: str = "5y") -> HistoryResponse:
        return await self.client.get_history(symbol, period)

    async def get_chart(self, symbol: str, interval: str = "1d", range_: str = "5d") -> ChartResponse:
        return await self.client.get_chart(symbol, interval, range_)

    def get_info(self, symbol: str) -> Dict:
        info = self.client.get_stock_info(symbol)
        if info is None:
            raise StockNotFoundError(symbol)
        return info

    # ==================== Batch ====================

    async def get_batch_quotes(self, symbols: List[str]) -> BatchResponse:
        """
        Quotes for up to BATCH_MAX_SYMBOLS symbols

        Fresh cache entries are served as is; the rest are fetched together.
        A fetch only lands in the cache if nothing newer got there first.
        """
        requested = normalize_symbols(symbols, settings.BATCH_MAX_SYMBOLS)
        if not requested:
            raise ValidationError("symbols array required")

        stocks: Dict[str, BatchQuote] = self.cache.get_many(requested)
        missing = [s for s in requested if s not in stocks]

        if missing:
            fetched_at = self.cache.now()
            fetched = await self.client.get_batch_quotes(
                missing,
                nse_symbols={s: self.catalog.get_nse_symbol(s) for s in missing},
                names={s: self.catalog.get_names(s) for s in missing},
            )
            for symbol, quote in fetched.items():
                if not self.cache.put(symbol, quote, fetched_at=fetched_at):
                    quote = self.cache.get(symbol) or quote
                stocks[symbol] = quote

        logger.debug(f"Batch: {len(requested) - len(missing)} cached, {len(missing)} fetched")

        ordered = {s: stocks[s] for s in requested if s in stocks}
        return BatchResponse(stocks=ordered, fetched=len(ordered), requested=len(requested))

    # ==================== Time machine ====================

    async def get_time_machine(
        self,
        symbol: str,
        amount: float,
        years: int,
        now: Optional[datetime] = None,
    ) -> TimeMachineResponse:
        """
        What an investment of amount made years ago would be worth today

        The result is None when there is no usable history or current price.
        """
        if amount <= 0:
            raise ValidationError("amount must be positive")
        if years <= 0:
            raise ValidationError("years must be positive")

        history = await self.client.get_history(symbol, history_period_for(years))
        points = [(date.fromisoformat(p.date), p.price) for p in history.history]

        result = calculate_investment(points, amount, history.current_price, years, now=now)
        if result is None:
            logger.info(f"Time machine undefined for {symbol} ({years}y, {len(points)} points)")

        return TimeMachineResponse(
            symbol=symbol,
            amount=amount,
            years=years,
            current_price=history.current_price,
            history_points=len(points),
            result=result,
        )


stock_service = StockService()

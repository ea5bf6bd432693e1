"""
Yahoo Finance data source
Indian stocks via the public chart / search endpoints (.BO = BSE, .NS = NSE),
company profiles via the yfinance package
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
import yfinance as yf

from sharesathi.config import settings
from sharesathi.schemas.stock import (
    BatchQuote,
    ChartResponse,
    HistoryPoint,
    HistoryResponse,
    MarketIndex,
    OhlcvPoint,
    SearchResult,
    StockQuote,
)

logger = logging.getLogger(__name__)

CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"
SEARCH_URL = "https://query1.finance.yahoo.com/v1/finance/search"

BSE_SUFFIX = ".BO"
NSE_SUFFIX = ".NS"

# Batch change periods, each measured against the range's chartPreviousClose
BATCH_RANGES = {
    "change_percent": "1d",
    "change_percent_week": "5d",
    "change_percent_month": "1mo",
    "change_percent_year": "1y",
    "change_percent5_year": "5y",
    "change_percent10_year": "10y",
}

INDICES = (
    ("^BSESN", "SENSEX"),
    ("^NSEI", "NIFTY 50"),
)


# ==================== Parsing ====================

def parse_chart_result(payload: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """chart.result[0] of a chart response, None when absent"""
    if not isinstance(payload, dict):
        return None
    results = (payload.get("chart") or {}).get("result") or []
    return results[0] if results else None


def has_series(result: Optional[Dict[str, Any]]) -> bool:
    return bool(result and result.get("timestamp"))


def _quote_arrays(result: Dict[str, Any]) -> Dict[str, List]:
    quotes = (result.get("indicators") or {}).get("quote") or [{}]
    return quotes[0] or {}


def _at(values: Optional[List], i: int):
    if not values or i >= len(values):
        return None
    return values[i]


def _timestamp_to_datetime(ts: int) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc)


def extract_close_history(result: Optional[Dict[str, Any]]) -> List[HistoryPoint]:
    """(date, close) points, dropping null and non-positive closes"""
    if not has_series(result):
        return []

    closes = _quote_arrays(result).get("close") or []
    history = []
    for i, ts in enumerate(result["timestamp"]):
        close = _at(closes, i)
        if close is None or close <= 0:
            continue
        history.append(HistoryPoint(
            date=_timestamp_to_datetime(ts).date().isoformat(),
            price=close,
        ))
    return history


def extract_ohlcv(result: Optional[Dict[str, Any]], positive_only: bool = True) -> List[OhlcvPoint]:
    """OHLCV points with ISO timestamps, dropping null closes"""
    if not has_series(result):
        return []

    quote = _quote_arrays(result)
    points = []
    for i, ts in enumerate(result["timestamp"]):
        close = _at(quote.get("close"), i)
        if close is None or (positive_only and close <= 0):
            continue
        points.append(OhlcvPoint(
            date=_timestamp_to_datetime(ts).isoformat(),
            close=close,
            open=_at(quote.get("open"), i),
            high=_at(quote.get("high"), i),
            low=_at(quote.get("low"), i),
            volume=_at(quote.get("volume"), i),
        ))
    return points


def previous_close(meta: Dict[str, Any], price: float) -> float:
    return meta.get("chartPreviousClose") or meta.get("previousClose") or price


def change_from_result(price: float, result: Optional[Dict[str, Any]]) -> float:
    """Percent change of price against the range's chartPreviousClose"""
    if not result:
        return 0.0
    prev_close = (result.get("meta") or {}).get("chartPreviousClose")
    if not prev_close or prev_close <= 0:
        return 0.0
    return (price - prev_close) / prev_close * 100


def parse_search_results(payload: Optional[Dict[str, Any]], limit: int) -> List[SearchResult]:
    """
    Indian equities from a search response

    Only .NS / .BO equities; one row per symbol, NSE preferred over BSE.
    """
    quotes = (payload or {}).get("quotes") or []

    unique: Dict[str, SearchResult] = {}
    for q in quotes:
        yahoo_symbol = q.get("symbol") or ""
        if q.get("quoteType") != "EQUITY":
            continue
        if not (yahoo_symbol.endswith(NSE_SUFFIX) or yahoo_symbol.endswith(BSE_SUFFIX)):
            continue

        is_nse = yahoo_symbol.endswith(NSE_SUFFIX)
        clean = yahoo_symbol[:-len(NSE_SUFFIX)]
        result = SearchResult(
            symbol=clean,
            name=q.get("longname") or q.get("shortname") or clean,
            short_name=q.get("shortname") or clean,
            exchange="NSE" if is_nse else "BSE",
            yahoo_symbol=yahoo_symbol,
        )

        existing = unique.get(clean)
        if existing is None or (is_nse and existing.exchange == "BSE"):
            unique[clean] = result

    return list(unique.values())[:limit]


# ==================== Client ====================

class YahooFinanceClient:
    """Yahoo Finance client"""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.transport = transport
        self.headers = {
            "User-Agent": settings.HTTP_USER_AGENT,
            "Accept": "application/json",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self.headers,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            transport=self.transport,
        )

    async def _fetch_chart(
        self,
        client: httpx.AsyncClient,
        yahoo_symbol: str,
        interval: str,
        range_: str,
    ) -> Optional[Dict[str, Any]]:
        """chart.result[0] for one symbol, None on any failure"""
        try:
            response = await client.get(
                CHART_URL.format(symbol=yahoo_symbol),
                params={"interval": interval, "range": range_},
            )
            if response.status_code != 200:
                logger.debug(f"Chart {yahoo_symbol} {range_}: HTTP {response.status_code}")
                return None
            return parse_chart_result(response.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Chart request failed {yahoo_symbol} {range_}: {e}")
            return None

    async def _fetch_series(
        self,
        client: httpx.AsyncClient,
        symbol: str,
        interval: str,
        range_: str,
    ) -> Optional[Dict[str, Any]]:
        """BSE first, NSE when BSE has no series"""
        result = await self._fetch_chart(client, f"{symbol}{BSE_SUFFIX}", interval, range_)
        if not has_series(result):
            result = await self._fetch_chart(client, f"{symbol}{NSE_SUFFIX}", interval, range_)
        return result if has_series(result) else None

    # ==================== Single stock ====================

    async def get_quote(self, symbol: str) -> Optional[StockQuote]:
        """
        Latest BSE quote with 5 days of daily bars

        Returns:
            StockQuote, or None when Yahoo has no data for the symbol
        """
        async with self._client() as client:
            result = await self._fetch_chart(client, f"{symbol}{BSE_SUFFIX}", "1d", "5d")

        if not result:
            logger.info(f"No quote for {symbol}")
            return None

        meta = result.get("meta") or {}
        price = meta.get("regularMarketPrice") or 0
        prev_close = previous_close(meta, price)
        change = price - prev_close

        return StockQuote(
            symbol=symbol,
            name=meta.get("longName") or meta.get("shortName") or symbol,
            short_name=(meta.get("symbol") or symbol).replace(BSE_SUFFIX, ""),
            price=price,
            previous_close=prev_close,
            change=change,
            change_percent=change / prev_close * 100 if prev_close > 0 else 0,
            open=meta.get("regularMarketOpen") or 0,
            high=meta.get("regularMarketDayHigh") or 0,
            low=meta.get("regularMarketDayLow") or 0,
            volume=meta.get("regularMarketVolume") or 0,
            market_cap=(meta.get("marketCap") or 0) / 10000000,  # crores
            fifty_two_week_high=meta.get("fiftyTwoWeekHigh") or 0,
            fifty_two_week_low=meta.get("fiftyTwoWeekLow") or 0,
            price_history=extract_ohlcv(result, positive_only=False),
            timestamp=datetime.now(timezone.utc),
            is_live=True,
        )

    async def get_history(self, symbol: str, period: str = "5y") -> HistoryResponse:
        """Monthly closes over period; empty history when unavailable"""
        async with self._client() as client:
            result = await self._fetch_series(client, symbol, "1mo", period)

        if result is None:
            logger.info(f"No history for {symbol} ({period})")
            return HistoryResponse(symbol=symbol)

        meta = result.get("meta") or {}
        closes = _quote_arrays(result).get("close") or []
        current_price = meta.get("regularMarketPrice") or (closes[-1] if closes and closes[-1] else 0)

        return HistoryResponse(
            symbol=symbol,
            history=extract_close_history(result),
            current_price=current_price,
            currency=meta.get("currency") or "INR",
        )

    async def get_chart(self, symbol: str, interval: str = "1d", range_: str = "5d") -> ChartResponse:
        """OHLCV series for charts; empty when unavailable"""
        async with self._client() as client:
            result = await self._fetch_series(client, symbol, interval, range_)

        return ChartResponse(
            symbol=symbol,
            interval=interval,
            range=range_,
            price_history=extract_ohlcv(result),
        )

    # ==================== Batch ====================

    async def _fetch_batch_quote(
        self,
        client: httpx.AsyncClient,
        symbol: str,
        nse_symbol: Optional[str],
        names: Dict[str, str],
    ) -> Optional[BatchQuote]:
        primary = f"{nse_symbol}{NSE_SUFFIX}" if nse_symbol else f"{symbol}{BSE_SUFFIX}"
        fallback = f"{symbol}{BSE_SUFFIX}"

        ranges = list(BATCH_RANGES.items())
        # short ranges first, they drive the headline numbers
        short = await asyncio.gather(*[
            self._fetch_chart(client, primary, "1d", r) for _, r in ranges[:3]
        ])
        longer = await asyncio.gather(*[
            self._fetch_chart(client, primary, "1d", r) for _, r in ranges[3:]
        ])
        results = dict(zip([field for field, _ in ranges], list(short) + list(longer)))

        if nse_symbol:
            for field, range_ in ranges:
                if results[field] is None:
                    results[field] = await self._fetch_chart(client, fallback, "1d", range_)

        daily = results["change_percent"]
        if not daily:
            return None

        meta = daily.get("meta") or {}
        price = meta.get("regularMarketPrice") or 0
        changes = {field: change_from_result(price, result) for field, result in results.items()}

        return BatchQuote(
            symbol=symbol,
            name=names["name"],
            short_name=names["short_name"],
            price=price,
            change=price - previous_close(meta, price),
            volume=meta.get("regularMarketVolume") or 0,
            fifty_two_week_high=meta.get("fiftyTwoWeekHigh") or 0,
            fifty_two_week_low=meta.get("fiftyTwoWeekLow") or 0,
            is_live=True,
            **changes,
        )

    async def get_batch_quotes(
        self,
        symbols: List[str],
        nse_symbols: Optional[Dict[str, Optional[str]]] = None,
        names: Optional[Dict[str, Dict[str, str]]] = None,
    ) -> Dict[str, BatchQuote]:
        """
        Quotes for many symbols at once

        Each symbol is fetched concurrently; a failure only drops that symbol.

        Args:
            symbols: BSE codes
            nse_symbols: BSE code -> NSE ticker (preferred when known)
            names: BSE code -> {"name", "short_name"}

        Returns:
            {symbol: BatchQuote} for the symbols that could be fetched
        """
        nse_symbols = nse_symbols or {}
        names = names or {}

        async with self._client() as client:
            fetched = await asyncio.gather(
                *[
                    self._fetch_batch_quote(
                        client,
                        symbol,
                        nse_symbols.get(symbol),
                        names.get(symbol) or {"name": symbol, "short_name": symbol},
                    )
                    for symbol in symbols
                ],
                return_exceptions=True,
            )

        quotes = {}
        for symbol, outcome in zip(symbols, fetched):
            if isinstance(outcome, Exception):
                logger.warning(f"Batch quote failed {symbol}: {outcome}")
            elif outcome is not None:
                quotes[symbol] = outcome

        logger.info(f"Batch quotes: {len(quotes)}/{len(symbols)}")
        return quotes

    # ==================== Indices ====================

    async def _fetch_index(self, client: httpx.AsyncClient, symbol: str, name: str) -> Optional[MarketIndex]:
        result = await self._fetch_chart(client, symbol, "1d", "1d")
        meta = (result or {}).get("meta")
        if not meta:
            logger.warning(f"No data for index {name}")
            return None

        price = meta.get("regularMarketPrice") or 0
        prev_close = previous_close(meta, price)
        change = price - prev_close
        return MarketIndex(
            name=name,
            symbol=symbol,
            value=price,
            previous_close=prev_close,
            change=change,
            change_percent=change / prev_close * 100 if prev_close > 0 else 0,
        )

    async def get_indices(self) -> List[MarketIndex]:
        """SENSEX and NIFTY 50; zero-valued placeholders when both fail"""
        async with self._client() as client:
            fetched = await asyncio.gather(*[
                self._fetch_index(client, symbol, name) for symbol, name in INDICES
            ])

        indices = [index for index in fetched if index is not None]
        if not indices:
            return [
                MarketIndex(name=name, symbol=symbol, value=0, change=0, change_percent=0)
                for symbol, name in INDICES
            ]
        return indices

    # ==================== Search ====================

    async def search(self, query: str, limit: Optional[int] = None) -> List[SearchResult]:
        """Indian equities matching query; empty for queries under 2 characters"""
        if not query or len(query) < 2:
            return []

        params = {
            "q": query,
            "quotesCount": 20,
            "newsCount": 0,
            "enableFuzzyQuery": "true",
            "quotesQueryId": "tss_match_phrase_query",
        }
        try:
            async with self._client() as client:
                response = await client.get(SEARCH_URL, params=params)
            if response.status_code != 200:
                logger.error(f"Yahoo search failed: HTTP {response.status_code}")
                return []
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Yahoo search failed: {e}")
            return []

        return parse_search_results(payload, limit or settings.SEARCH_MAX_RESULTS)

    # ==================== yfinance ====================

    def get_stock_info(self, symbol: str) -> Optional[Dict[str, Any]]:
        """
        Company profile via yfinance

        Args:
            symbol: BSE code or NSE ticker, without suffix

        Returns:
            dict with name, sector, industry, market cap (crores) or None
        """
        for suffix in (BSE_SUFFIX, NSE_SUFFIX):
            try:
                info = yf.Ticker(f"{symbol}{suffix}").info
            except Exception as e:
                logger.error(f"yfinance info failed {symbol}{suffix}: {e}")
                continue

            if not info or "symbol" not in info:
                continue

            return {
                "symbol": symbol,
                "yahoo_symbol": info.get("symbol"),
                "name": info.get("longName") or info.get("shortName") or symbol,
                "currency": info.get("currency", "INR"),
                "market_cap": (info.get("marketCap") or 0) / 10000000,
                "sector": info.get("sector"),
                "industry": info.get("industry"),
                "website": info.get("website"),
                "summary": info.get("longBusinessSummary"),
                "pe_ratio": info.get("trailingPE"),
                "dividend_yield": info.get("dividendYield"),
                "fifty_two_week_high": info.get("fiftyTwoWeekHigh"),
                "fifty_two_week_low": info.get("fiftyTwoWeekLow"),
            }

        logger.warning(f"No profile for {symbol}")
        return None

    def get_usd_inr(self) -> Optional[float]:
        """USD/INR last close via yfinance"""
        try:
            hist = yf.Ticker("INR=X").history(period="5d")
        except Exception as e:
            logger.error(f"yfinance INR=X failed: {e}")
            return None

        if hist is None or hist.empty:
            return None
        return float(hist["Close"].iloc[-1])


# Global client
yahoo_finance = YahooFinanceClient()

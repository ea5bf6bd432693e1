"""
Market service
Indices, the all-stocks table (BSE bhavcopy) and index constituents
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pandas as pd

from sharesathi.data_sources.nse_bse import INDEX_LISTS, NseBseClient, nse_bse, parse_bhavcopy
from sharesathi.data_sources.yahoo_finance import YahooFinanceClient, yahoo_finance
from sharesathi.exceptions import DataSourceError, StockNotFoundError, ValidationError
from sharesathi.schemas.stock import MarketIndex, MarketStock
from sharesathi.utils.market_hours import get_market_status, get_market_status_text, now_ist

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("volume", "change", "name")
EXCHANGES = ("all", "bse", "nse")
DEFAULT_INDEX = "nifty50"


def sort_and_paginate(df: pd.DataFrame, sort: str, limit: int, offset: int) -> Dict[str, Any]:
    """
    Sort the bhavcopy table and cut one page

    volume / change sort descending, name ascending.
    """
    if sort == "volume":
        df = df.sort_values("volume", ascending=False, kind="stable")
    elif sort == "change":
        df = df.sort_values("change_percent", ascending=False, kind="stable")
    elif sort == "name":
        df = df.sort_values("name", key=lambda s: s.str.lower(), kind="stable")

    total = len(df)
    page = df.iloc[offset:offset + limit]
    return {
        "rows": page.to_dict("records"),
        "total": total,
        "offset": offset,
        "limit": limit,
        "has_more": offset + limit < total,
    }


def merge_constituents(constituents: pd.DataFrame, bhavcopy: pd.DataFrame) -> pd.DataFrame:
    """Index constituents with bhavcopy prices; constituents without a price are dropped"""
    prices = bhavcopy[["symbol", "price", "previous_close", "volume"]].drop_duplicates("symbol")
    merged = constituents.merge(prices, on="symbol", how="left")
    merged[["price", "previous_close", "volume"]] = (
        merged[["price", "previous_close", "volume"]].fillna(0.0).astype(float)
    )
    merged = merged[merged["price"] > 0].copy()

    merged["change"] = merged["price"] - merged["previous_close"]
    merged["change_percent"] = 0.0
    has_prev = merged["previous_close"] > 0
    merged.loc[has_prev, "change_percent"] = (
        merged.loc[has_prev, "change"] / merged.loc[has_prev, "previous_close"] * 100
    )
    return merged.reset_index(drop=True)


def advance_decline(df: pd.DataFrame) -> Dict[str, int]:
    if df.empty:
        return {"advances": 0, "declines": 0, "unchanged": 0}
    return {
        "advances": int((df["change_percent"] > 0).sum()),
        "declines": int((df["change_percent"] < 0).sum()),
        "unchanged": int((df["change_percent"] == 0).sum()),
    }


class MarketService:
    """Market overview service"""

    def __init__(
        self,
        yahoo: Optional[YahooFinanceClient] = None,
        archives: Optional[NseBseClient] = None,
    ):
        self.yahoo = yahoo or yahoo_finance
        self.archives = archives or nse_bse

    async def get_indices(self) -> List[MarketIndex]:
        return await self.yahoo.get_indices()

    def get_status(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now_ist(now)
        return {
            "status": get_market_status(now),
            "text": get_market_status_text(now),
            "time": now.isoformat(),
        }

    def get_all_stocks(
        self,
        exchange: str = "all",
        limit: int = 500,
        offset: int = 0,
        sort: str = "volume",
    ) -> Dict[str, Any]:
        """
        Every BSE-listed stock with end-of-day prices

        NSE lists carry no prices, so only BSE rows are served.
        """
        if exchange not in EXCHANGES:
            raise ValidationError(f"Unknown exchange: {exchange}")
        if sort not in SORT_OPTIONS:
            raise ValidationError(f"Unknown sort: {sort}")
        if limit <= 0 or offset < 0:
            raise ValidationError("limit must be positive and offset non-negative")

        if exchange in ("all", "bse"):
            df = self.archives.get_bhavcopy()
        else:
            df = parse_bhavcopy("")

        page = sort_and_paginate(df, sort, limit, offset)
        stocks = [
            MarketStock(
                symbol=row["symbol"],
                bse_code=row["bse_code"] or None,
                name=row["name"],
                short_name=row["symbol"],
                price=row["price"],
                previous_close=row["previous_close"],
                change=row["change"],
                change_percent=row["change_percent"],
                volume=row["volume"],
                exchange="BSE",
                isin=row["isin"] or None,
            )
            for row in page["rows"]
        ]

        return {
            "stocks": stocks,
            "total": page["total"],
            "offset": page["offset"],
            "limit": page["limit"],
            "has_more": page["has_more"],
        }

    def get_index_constituents(self, index_id: str = DEFAULT_INDEX) -> Dict[str, Any]:
        """
        Constituents of an NSE index priced from the BSE bhavcopy

        Raises:
            ValidationError: unknown index
            DataSourceError: constituent list unavailable
            StockNotFoundError: the list came back empty
        """
        index_id = (index_id or DEFAULT_INDEX).lower()
        if index_id not in INDEX_LISTS:
            raise ValidationError(f"Invalid index: {index_id}")

        constituents = self.archives.get_index_constituents(index_id)
        if constituents is None:
            raise DataSourceError("NSE", f"could not fetch {index_id} constituents")
        if constituents.empty:
            raise StockNotFoundError(index_id)

        merged = merge_constituents(constituents, self.archives.get_bhavcopy())
        stocks = [
            MarketStock(
                symbol=row["symbol"],
                name=row["name"],
                short_name=row["symbol"],
                price=row["price"],
                previous_close=row["previous_close"],
                change=row["change"],
                change_percent=row["change_percent"],
                volume=row["volume"],
                exchange="NSE",
                isin=row["isin"] or None,
                industry=row["industry"] or None,
            )
            for row in merged.to_dict("records")
        ]
        logger.info(f"{index_id}: {len(stocks)}/{len(constituents)} constituents priced")

        return {
            "index": INDEX_LISTS[index_id][0],
            "timestamp": datetime.now(timezone.utc),
            "advance": advance_decline(merged),
            "stocks": stocks,
            "count": len(stocks),
        }


market_service = MarketService()

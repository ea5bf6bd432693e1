"""
Watchlist overview
Live rows plus gainers / losers metrics for one watchlist
"""
import logging
from typing import Dict, List, Optional

from sharesathi.schemas.watchlist import OverviewStock, Watchlist, WatchlistMetrics
from sharesathi.services.stock_catalog import StockCatalog, stock_catalog
from sharesathi.services.stock_service import StockService
from sharesathi.utils.metrics import fifty_two_week_position, merge_stock_lists, summarize_watchlist

logger = logging.getLogger(__name__)


def placeholder_rows(symbols: List[str], catalog: StockCatalog) -> List[Dict]:
    """Metadata-only rows in watchlist order; unknown symbols named after themselves"""
    rows = []
    for symbol in symbols:
        row = catalog.get_stock_by_symbol(symbol)
        if row is None:
            row = {
                "symbol": symbol,
                "name": symbol,
                "short_name": symbol,
                "price": 0.0,
                "change": 0.0,
                "change_percent": 0.0,
                "market_cap": 0.0,
            }
        rows.append(dict(row, symbol=symbol))
    return rows


async def get_watchlist_overview(
    watchlist: Watchlist,
    stocks: StockService,
    catalog: Optional[StockCatalog] = None,
) -> Dict:
    """
    Returns:
        {"stocks": [OverviewStock], "metrics": WatchlistMetrics}
    """
    catalog = catalog or stock_catalog
    if not watchlist.symbols:
        return {"stocks": [], "metrics": WatchlistMetrics()}

    batch = await stocks.get_batch_quotes(watchlist.symbols)
    live = [
        quote.model_dump(include={
            "symbol", "name", "short_name", "price", "change", "change_percent",
            "volume", "fifty_two_week_high", "fifty_two_week_low", "is_live",
        })
        for quote in batch.stocks.values()
    ]

    # live quote wins, catalog fills market cap and offline rows
    rows = merge_stock_lists(live, placeholder_rows(watchlist.symbols, catalog))
    by_symbol = {row["symbol"]: row for row in rows}
    ordered = [by_symbol[s] for s in watchlist.symbols if s in by_symbol]

    result = []
    for row in ordered:
        row["fifty_two_week_position"] = fifty_two_week_position(
            row.get("price", 0),
            row.get("fifty_two_week_low", 0),
            row.get("fifty_two_week_high", 0),
        )
        result.append(OverviewStock(**row))

    logger.debug(f"Overview {watchlist.id}: {len(live)}/{len(watchlist.symbols)} live")
    return {
        "stocks": result,
        "metrics": WatchlistMetrics(**summarize_watchlist(ordered)),
    }

"""
Watchlist metrics
Small aggregations over in-memory stock rows
"""
from typing import Any, Dict, List, Optional

import pandas as pd


def fifty_two_week_position(price: float, low: float, high: float) -> Optional[float]:
    """
    Where the price sits inside its 52-week range, 0 (at the low) to 100 (at the high)

    None when the range is unknown or empty.
    """
    if not price or price <= 0 or not high or not low or high <= low:
        return None
    position = (price - low) / (high - low) * 100
    return max(0.0, min(100.0, position))


def merge_stock_lists(
    primary: List[Dict[str, Any]],
    secondary: List[Dict[str, Any]],
    key: str = "symbol",
) -> List[Dict[str, Any]]:
    """
    Merge two stock lists by symbol

    Fields from primary win over secondary for the same symbol.
    Primary order is kept; symbols only in secondary follow in their order.
    """
    secondary_by_key = {}
    for row in secondary:
        secondary_by_key.setdefault(row[key], row)

    merged = []
    seen = set()
    for row in primary:
        k = row[key]
        if k in seen:
            continue
        seen.add(k)
        merged.append({**secondary_by_key.get(k, {}), **row})

    for k, row in secondary_by_key.items():
        if k not in seen:
            merged.append(dict(row))
    return merged


def summarize_watchlist(stocks: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Gainers / losers / average change for a list of stock rows

    Rows need price, change and change_percent; market_cap is optional.
    Stocks without a live price are left out of the movement counts.
    """
    empty = {
        "total_value": 0.0,
        "total_market_cap": 0.0,
        "gainers": 0,
        "losers": 0,
        "unchanged": 0,
        "avg_change": 0.0,
        "top_gainer": None,
        "top_loser": None,
        "total_change": 0.0,
    }
    if not stocks:
        return empty

    df = pd.DataFrame(stocks)
    for column in ("price", "change", "change_percent", "market_cap"):
        if column not in df:
            df[column] = 0.0
    df[["price", "change", "change_percent", "market_cap"]] = (
        df[["price", "change", "change_percent", "market_cap"]].fillna(0.0).astype(float)
    )

    priced = df[df["price"] > 0]
    gainers = priced[priced["change_percent"] > 0]
    losers = priced[priced["change_percent"] < 0]

    top_gainer = gainers.loc[gainers["change_percent"].idxmax(), "symbol"] if not gainers.empty else None
    top_loser = losers.loc[losers["change_percent"].idxmin(), "symbol"] if not losers.empty else None

    return {
        "total_value": float(df["price"].sum()),
        "total_market_cap": float(df["market_cap"].sum()),
        "gainers": int(len(gainers)),
        "losers": int(len(losers)),
        "unchanged": int((priced["change_percent"] == 0).sum()),
        "avg_change": float(priced["change_percent"].mean()) if not priced.empty else 0.0,
        "top_gainer": top_gainer,
        "top_loser": top_loser,
        "total_change": float(df["change"].sum()),
    }

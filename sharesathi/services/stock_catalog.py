"""
Stock catalog
Bundled metadata (BSE code, NSE symbol, names, market cap) for known stocks;
prices always come from the market data sources
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from sharesathi.config import DATA_DIR

logger = logging.getLogger(__name__)

CATALOG_FILE = DATA_DIR / "all_stocks.json"
NSE_PREFIX = "NSE_"


class StockCatalog:
    """Lookup of stock metadata by BSE code"""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else CATALOG_FILE
        self._by_symbol: Optional[Dict[str, Dict[str, Any]]] = None

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if self._by_symbol is None:
            try:
                with open(self.path, encoding="utf-8") as f:
                    rows = json.load(f)
            except (OSError, ValueError) as e:
                logger.error(f"Failed to read stock catalog {self.path}: {e}")
                rows = []
            self._by_symbol = {row["symbol"]: row for row in rows if row.get("symbol")}
            logger.debug(f"Stock catalog loaded: {len(self._by_symbol)} entries")
        return self._by_symbol

    def all(self) -> List[Dict[str, Any]]:
        return list(self._load().values())

    def get(self, symbol: str) -> Optional[Dict[str, Any]]:
        """Raw entry; NSE_-prefixed symbols fall back to the bare code"""
        by_symbol = self._load()
        row = by_symbol.get(symbol)
        if row is None and symbol.startswith(NSE_PREFIX):
            row = by_symbol.get(symbol[len(NSE_PREFIX):])
        return row

    def get_stock_by_symbol(self, symbol: str) -> Optional[Dict[str, Any]]:
        """
        Stock placeholder row (metadata only, zero prices)

        Returns:
            {"symbol", "name", "short_name", "price", "change",
             "change_percent", "market_cap"} or None
        """
        row = self.get(symbol)
        if row is None:
            return None
        return {
            "symbol": row["symbol"],
            "name": row.get("name") or row["symbol"],
            "short_name": row.get("shortName") or row["symbol"],
            "price": 0.0,
            "change": 0.0,
            "change_percent": 0.0,
            "market_cap": float(row.get("marketCap") or 0),
        }

    def get_nse_symbol(self, symbol: str) -> Optional[str]:
        """NSE ticker for a BSE code, if known"""
        row = self.get(symbol)
        if row is None:
            return None
        return row.get("nseSymbol") or row.get("shortName") or None

    def get_names(self, symbol: str) -> Dict[str, str]:
        """name / short_name, defaulting to the symbol itself"""
        row = self.get(symbol) or {}
        return {
            "name": row.get("name") or symbol,
            "short_name": row.get("shortName") or symbol,
        }


stock_catalog = StockCatalog()

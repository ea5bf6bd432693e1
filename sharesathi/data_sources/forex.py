"""
USD / INR exchange rate
Primary: fawazahmed0 currency API (jsDelivr); fallback: yfinance INR=X
"""
import logging
from typing import Any, Dict, Optional

import requests

from sharesathi.data_sources.yahoo_finance import yahoo_finance

logger = logging.getLogger(__name__)

CURRENCY_API = "https://cdn.jsdelivr.net/npm/@fawazahmed0/currency-api@latest/v1/currencies/usd.json"


class ForexClient:
    """USD/INR client"""

    def __init__(self):
        self.session = requests.Session()

    def _from_currency_api(self) -> Optional[Dict[str, Any]]:
        try:
            response = self.session.get(CURRENCY_API, timeout=10)
            response.raise_for_status()
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning(f"Currency API failed: {e}")
            return None

        rate = (data.get("usd") or {}).get("inr")
        if not rate:
            return None
        return {"usd_inr": float(rate), "date": data.get("date"), "source": "currency-api"}

    def get_usd_inr(self) -> Optional[Dict[str, Any]]:
        """
        Returns:
            {"usd_inr", "date", "source"} or None when every source failed
        """
        result = self._from_currency_api()
        if result:
            return result

        rate = yahoo_finance.get_usd_inr()
        if rate:
            logger.info("USD/INR served from yfinance fallback")
            return {"usd_inr": rate, "date": None, "source": "yfinance"}

        logger.error("USD/INR unavailable from all sources")
        return None


forex = ForexClient()

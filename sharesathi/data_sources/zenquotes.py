"""
ZenQuotes data source
Random investing quote, local list when the API is unreachable
"""
import logging
import random
from typing import Dict

import requests

logger = logging.getLogger(__name__)

RANDOM_URL = "https://zenquotes.io/api/random"

FALLBACK_QUOTES = [
    {"quote": "The stock market is a device for transferring money from the impatient to the patient.", "author": "Warren Buffett"},
    {"quote": "In investing, what is comfortable is rarely profitable.", "author": "Robert Arnott"},
    {"quote": "Know what you own, and know why you own it.", "author": "Peter Lynch"},
    {"quote": "Risk comes from not knowing what you're doing.", "author": "Warren Buffett"},
    {"quote": "The best time to plant a tree was 20 years ago. The second best time is now.", "author": "Chinese Proverb"},
    {"quote": "Compound interest is the eighth wonder of the world.", "author": "Albert Einstein"},
    {"quote": "Price is what you pay. Value is what you get.", "author": "Warren Buffett"},
    {"quote": "Time in the market beats timing the market.", "author": "Ken Fisher"},
]


class ZenQuotesClient:
    """ZenQuotes client"""

    def __init__(self):
        self.session = requests.Session()

    def get_fallback_quote(self) -> Dict[str, str]:
        return dict(random.choice(FALLBACK_QUOTES), source="fallback")

    def get_random_quote(self) -> Dict[str, str]:
        """
        Returns:
            {"quote", "author", "source"}; source is "zenquotes" or "fallback"
        """
        try:
            response = self.session.get(RANDOM_URL, timeout=5)
            response.raise_for_status()
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning(f"ZenQuotes unavailable, using fallback: {e}")
            return self.get_fallback_quote()

        if not data or not isinstance(data, list) or not data[0].get("q"):
            return self.get_fallback_quote()

        return {
            "quote": data[0]["q"],
            "author": data[0].get("a") or "Unknown",
            "source": "zenquotes",
        }


zenquotes = ZenQuotesClient()

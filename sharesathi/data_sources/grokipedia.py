"""
Grokipedia data source
Encyclopedia articles for the Learn section
"""
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from sharesathi.exceptions import DataSourceError

logger = logging.getLogger(__name__)

BASE_URL = "https://grokipedia-api.com/page"
MAX_REFERENCES = 5


def parse_article(data: Dict[str, Any]) -> Dict[str, Any]:
    """API page payload to the article shape we serve"""
    return {
        "title": data.get("title") or "",
        "slug": data.get("slug") or "",
        "content": data.get("content_text") or "",
        "word_count": data.get("word_count") or 0,
        "references_count": data.get("references_count") or 0,
        "references": (data.get("references") or [])[:MAX_REFERENCES],
    }


class GrokipediaClient:
    """Grokipedia API client"""

    def __init__(self):
        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
        })

    def get_article(self, slug: str) -> Optional[Dict[str, Any]]:
        """
        Fetch one article

        Returns:
            Article dict, or None when the page does not exist

        Raises:
            DataSourceError: request failed for any other reason
        """
        url = f"{BASE_URL}/{quote(slug, safe='')}"
        try:
            response = self.session.get(url, timeout=10)
        except requests.exceptions.RequestException as e:
            logger.error(f"Grokipedia request failed {slug}: {e}")
            raise DataSourceError("Grokipedia", str(e)) from e

        if response.status_code == 404:
            logger.info(f"Grokipedia article not found: {slug}")
            return None
        if response.status_code != 200:
            logger.error(f"Grokipedia error {slug}: HTTP {response.status_code}")
            raise DataSourceError("Grokipedia", f"HTTP {response.status_code}")

        try:
            return parse_article(response.json())
        except ValueError as e:
            raise DataSourceError("Grokipedia", "invalid JSON") from e


grokipedia = GrokipediaClient()

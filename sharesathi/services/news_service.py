"""
Market news
Google News RSS search, India edition
"""
import calendar
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional
from urllib.parse import urlencode

import feedparser
import requests
from bs4 import BeautifulSoup

from sharesathi.config import settings

logger = logging.getLogger(__name__)

GOOGLE_NEWS_RSS = "https://news.google.com/rss/search"
DEFAULT_QUERY = "Indian stock market BSE NSE"


def build_query(symbol: Optional[str] = None, query: Optional[str] = None) -> str:
    """Stock-specific query when a symbol is given, else free text, else the market default"""
    if symbol:
        return f"{symbol} stock BSE India"
    if query:
        return query
    return DEFAULT_QUERY


def build_feed_url(query: str) -> str:
    params = {"q": query, "hl": "en-IN", "gl": "IN", "ceid": "IN:en"}
    return f"{GOOGLE_NEWS_RSS}?{urlencode(params)}"


def clean_text(text: str) -> str:
    """Strip tags and decode entities"""
    if not text:
        return ""
    return BeautifulSoup(text, "html.parser").get_text(" ", strip=True)


def parse_news_feed(content, limit: Optional[int] = None) -> List[Dict]:
    """
    RSS document to news items, newest first

    Args:
        content: raw feed (bytes or str)
        limit: max items taken from the feed

    Returns:
        [{title, link, pub_date, published, source, snippet}, ...]
    """
    limit = limit or settings.NEWS_MAX_ITEMS
    feed = feedparser.parse(content)

    if feed.bozo and feed.bozo_exception:
        logger.warning(f"RSS parse warning: {feed.bozo_exception}")

    items = []
    for entry in feed.entries[:limit]:
        title = clean_text(entry.get("title", ""))
        link = entry.get("link", "")
        if not title or not link:
            continue

        published = None
        if entry.get("published_parsed"):
            published = datetime.fromtimestamp(calendar.timegm(entry.published_parsed), tz=timezone.utc)

        source = entry.get("source") or {}
        items.append({
            "title": title,
            "link": link,
            "pub_date": entry.get("published", ""),
            "published": published,
            "source": clean_text(source.get("title", "")) or "News",
            "snippet": clean_text(entry.get("summary", "")) or None,
        })

    oldest = datetime.min.replace(tzinfo=timezone.utc)
    items.sort(key=lambda item: item["published"] or oldest, reverse=True)
    return items


class NewsService:
    """News fetcher"""

    def __init__(self):
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": settings.HTTP_USER_AGENT,
        })

    def get_news(self, symbol: Optional[str] = None, query: Optional[str] = None) -> Dict:
        """
        Returns:
            {"query", "items", "timestamp"}; items is empty when the feed is unavailable
        """
        search_query = build_query(symbol, query)
        url = build_feed_url(search_query)
        logger.info(f"Fetching news: {search_query}")

        try:
            response = self.session.get(url, timeout=settings.HTTP_TIMEOUT_SECONDS)
            response.raise_for_status()
            items = parse_news_feed(response.content)
        except requests.exceptions.RequestException as e:
            logger.error(f"Google News fetch failed: {e}")
            items = []

        return {
            "query": search_query,
            "items": items,
            "timestamp": datetime.now(timezone.utc),
        }


news_service = NewsService()

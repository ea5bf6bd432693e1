"""
Learn API routes
Encyclopedia articles, daily investing quote and USD/INR
"""
import logging

from fastapi import APIRouter

from sharesathi.data_sources.forex import forex
from sharesathi.data_sources.grokipedia import grokipedia
from sharesathi.data_sources.zenquotes import zenquotes
from sharesathi.exceptions import ArticleNotFoundError, DataSourceError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Learn"])


@router.get("/api/learn/{slug}", summary="Learn article")
def get_article(slug: str):
    """Article text with up to 5 references"""
    article = grokipedia.get_article(slug)
    if article is None:
        raise ArticleNotFoundError(slug)
    return article


@router.get("/api/quote", summary="Investing quote")
def get_quote():
    """Random quote; a built-in one when the API is down"""
    return zenquotes.get_random_quote()


@router.get("/api/forex", summary="USD / INR")
def get_forex():
    rate = forex.get_usd_inr()
    if rate is None:
        raise DataSourceError("Forex", "USD/INR unavailable")
    return rate

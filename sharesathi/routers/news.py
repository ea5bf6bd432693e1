"""
News API route
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from sharesathi.dependencies import get_news_service
from sharesathi.schemas.watchlist import CamelModel
from sharesathi.services.news_service import NewsService

router = APIRouter(prefix="/api/news", tags=["News"])


class NewsItem(CamelModel):
    title: str
    link: str
    pub_date: str = ""
    published: Optional[datetime] = None
    source: str = "News"
    snippet: Optional[str] = None


class NewsResponse(CamelModel):
    query: str
    items: List[NewsItem] = []
    timestamp: datetime


@router.get("", response_model=NewsResponse, summary="Market news")
def get_news(
    symbol: Optional[str] = Query(None, description="Stock-specific news"),
    q: Optional[str] = Query(None, description="Free text search"),
    service: NewsService = Depends(get_news_service),
):
    """Latest 25 Google News headlines, newest first"""
    return service.get_news(symbol=symbol, query=q)

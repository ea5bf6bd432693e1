"""
Stock search API route
"""
import logging
from typing import List

from fastapi import APIRouter, Query

from sharesathi.data_sources.yahoo_finance import yahoo_finance
from sharesathi.schemas.stock import SearchResult
from sharesathi.schemas.watchlist import CamelModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/search", tags=["Search"])


class SearchResponse(CamelModel):
    results: List[SearchResult] = []


@router.get("", response_model=SearchResponse, summary="Search Indian stocks")
async def search_stocks(q: str = Query("", description="Company name or ticker")):
    """NSE / BSE equities; queries shorter than 2 characters return nothing"""
    return SearchResponse(results=await yahoo_finance.search(q.strip()))

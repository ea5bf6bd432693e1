"""
Market API routes
Headline indices, index constituents and market status
"""
import logging
from datetime import datetime
from typing import Dict, List

from fastapi import APIRouter, Depends, Query

from sharesathi.dependencies import get_market_service
from sharesathi.schemas.stock import MarketIndex, MarketStock
from sharesathi.schemas.watchlist import CamelModel
from sharesathi.services.market_service import DEFAULT_INDEX, MarketService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Market"])


class ConstituentsResponse(CamelModel):
    index: str
    timestamp: datetime
    advance: Dict[str, int]
    stocks: List[MarketStock]
    count: int


@router.get("/api/indices", response_model=List[MarketIndex], summary="SENSEX and NIFTY 50")
async def get_indices(service: MarketService = Depends(get_market_service)):
    """Both indices fetched together; zero values when Yahoo is down"""
    return await service.get_indices()


@router.get("/api/indices/constituents", response_model=ConstituentsResponse, summary="Index constituents")
def get_constituents(
    index: str = Query(DEFAULT_INDEX, description="nifty50, niftybank, niftyit, ..."),
    service: MarketService = Depends(get_market_service),
):
    """NSE index members priced from the latest BSE bhavcopy, with advances / declines"""
    return service.get_index_constituents(index)


@router.get("/api/market/status", summary="Market status")
def get_market_status(service: MarketService = Depends(get_market_service)):
    return service.get_status()

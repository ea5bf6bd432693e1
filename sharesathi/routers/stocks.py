"""
Multi-stock API routes
Batch quotes and the all-stocks market table
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, Query

from sharesathi.dependencies import get_market_service, get_stock_service
from sharesathi.exceptions import ValidationError
from sharesathi.schemas.stock import BatchRequest, BatchResponse, MarketStock
from sharesathi.schemas.watchlist import CamelModel
from sharesathi.services.market_service import MarketService
from sharesathi.services.stock_service import StockService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stocks", tags=["Stocks"])


class AllStocksResponse(CamelModel):
    stocks: List[MarketStock]
    total: int
    offset: int
    limit: int
    has_more: bool


@router.post("/batch", response_model=BatchResponse, summary="Batch quotes")
async def batch_quotes(
    data: BatchRequest,
    service: StockService = Depends(get_stock_service),
):
    """
    Quotes with 1D / 1W / 1M / 1Y / 5Y / 10Y change for up to 50 symbols

    Symbols that can't be fetched are left out of the result.
    """
    return await service.get_batch_quotes(data.symbols)


@router.get("/batch", response_model=BatchResponse, summary="Batch quotes (query string)")
async def batch_quotes_get(
    symbols: str = Query(..., description="Comma separated, e.g. 500325,532540"),
    service: StockService = Depends(get_stock_service),
):
    symbol_list = [s.strip() for s in symbols.split(",") if s.strip()]
    if not symbol_list:
        raise ValidationError("symbols query param required")
    return await service.get_batch_quotes(symbol_list)


@router.get("/all", response_model=AllStocksResponse, summary="All listed stocks")
def all_stocks(
    exchange: str = Query("all", description="all, bse or nse"),
    limit: int = Query(500, ge=1, le=5000),
    offset: int = Query(0, ge=0),
    sort: str = Query("volume", description="volume, change or name"),
    service: MarketService = Depends(get_market_service),
):
    """End-of-day prices for every BSE-listed stock, paginated"""
    return service.get_all_stocks(exchange=exchange.lower(), limit=limit, offset=offset, sort=sort)

"""
Stock API routes
Single stock quote, history, chart and profile, plus the time machine
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from sharesathi.dependencies import get_stock_service
from sharesathi.exceptions import ValidationError
from sharesathi.schemas.stock import ChartResponse, HistoryResponse, StockQuote, TimeMachineResponse
from sharesathi.services.calculator_service import YEARS_BACK_PRESETS
from sharesathi.services.stock_service import StockService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stock", tags=["Stock"])
timemachine_router = APIRouter(prefix="/api/timemachine", tags=["Time machine"])


@router.get("/{symbol}", response_model=StockQuote, summary="Stock quote")
async def get_stock(
    symbol: str,
    service: StockService = Depends(get_stock_service),
):
    """Latest BSE quote with five days of daily bars; 404 when Yahoo has nothing"""
    logger.info(f"API: quote {symbol}")
    return await service.get_quote(symbol)


@router.get("/{symbol}/history", response_model=HistoryResponse, summary="Monthly price history")
async def get_history(
    symbol: str,
    period: str = Query("5y", description="Yahoo range: 1y, 2y, 5y, 10y, max"),
    service: StockService = Depends(get_stock_service),
):
    """Monthly closes, BSE first then NSE; empty history when unavailable"""
    return await service.get_history(symbol, period)


@router.get("/{symbol}/chart", response_model=ChartResponse, summary="OHLCV chart data")
async def get_chart(
    symbol: str,
    interval: str = Query("1d"),
    range_: str = Query("5d", alias="range"),
    service: StockService = Depends(get_stock_service),
):
    return await service.get_chart(symbol, interval, range_)


@router.get("/{symbol}/info", summary="Company profile")
def get_info(
    symbol: str,
    service: StockService = Depends(get_stock_service),
) -> Dict[str, Any]:
    """Sector, industry and market cap (crores) via yfinance"""
    return {"success": True, "data": service.get_info(symbol)}


# ==================== Time machine ====================

@timemachine_router.get("/presets", summary="Lookback presets")
def get_presets():
    return {"years": list(YEARS_BACK_PRESETS)}


@timemachine_router.get("/{symbol}", response_model=TimeMachineResponse, summary="What if I had invested")
async def time_machine(
    symbol: str,
    amount: float = Query(10000, gt=0, description="Rupees invested"),
    years: int = Query(5, description="Years ago, one of the presets"),
    service: StockService = Depends(get_stock_service),
):
    """
    Value today of amount invested years ago

    result is null when the stock has no usable history.
    """
    if years not in YEARS_BACK_PRESETS:
        raise ValidationError(f"years must be one of {list(YEARS_BACK_PRESETS)}")
    logger.info(f"API: time machine {symbol} amount={amount} years={years}")
    return await service.get_time_machine(symbol, amount, years)

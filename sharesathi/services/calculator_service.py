"""
Time machine calculator
"What if I had invested X rupees N years ago?"

Pure function of its inputs:
- the historical reference is the point closest to now - N calendar years,
  so sparse (monthly) series still work
- CAGR uses the actual elapsed time since that point, not the nominal N
"""
import logging
import math
from datetime import date, datetime, time, timezone
from typing import Iterable, Optional, Sequence, Tuple, Union

from sharesathi.schemas.stock import InvestmentResult, PricePoint

logger = logging.getLogger(__name__)

# Preset lookback horizons offered to users
YEARS_BACK_PRESETS = (1, 3, 5, 10)

DAYS_PER_YEAR = 365.25
SECONDS_PER_YEAR = DAYS_PER_YEAR * 24 * 60 * 60

DateLike = Union[date, datetime]


def to_datetime(value: DateLike) -> datetime:
    """Naive datetime for a date or datetime (aware values converted to UTC)"""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    return datetime.combine(value, time.min)


def subtract_years(moment: datetime, years: int) -> datetime:
    """Calendar-year subtraction; 29 Feb falls back to 28 Feb"""
    try:
        return moment.replace(year=moment.year - years)
    except ValueError:
        return moment.replace(year=moment.year - years, day=28)


def find_closest_point(
    history: Iterable[Tuple[DateLike, float]],
    target: datetime,
) -> Optional[PricePoint]:
    """
    Point whose date is nearest to target

    Linear scan; on equal distance the earlier point in the sequence wins.
    """
    closest = None
    closest_diff = None

    for point_date, price in history:
        diff = abs((to_datetime(point_date) - target).total_seconds())
        if closest_diff is None or diff < closest_diff:
            closest = PricePoint(point_date, price)
            closest_diff = diff

    return closest


def calculate_cagr(start_value: float, end_value: float, years: float) -> float:
    """
    Compound annual growth rate as a fraction

    0 when the period is not positive or the result is not a finite number.
    """
    if years <= 0 or start_value <= 0 or end_value <= 0:
        return 0.0

    try:
        cagr = (end_value / start_value) ** (1 / years) - 1
    except OverflowError:
        logger.debug(f"CAGR overflow for {years:.6f} years")
        return 0.0

    if math.isnan(cagr) or math.isinf(cagr):
        return 0.0
    return cagr


def calculate_investment(
    history: Sequence[Tuple[DateLike, float]],
    investment_amount: float,
    current_price: float,
    years_back: int,
    now: Optional[DateLike] = None,
) -> Optional[InvestmentResult]:
    """
    Outcome of investing investment_amount years_back years ago

    Args:
        history: (date, price) points, oldest first
        investment_amount: rupees invested
        current_price: latest price
        years_back: nominal lookback horizon
        now: reference time (defaults to the current time)

    Returns:
        InvestmentResult, or None when the calculation is undefined
        (fewer than two points, non-positive price or amount)
    """
    if len(history) < 2:
        return None
    if investment_amount <= 0 or current_price <= 0:
        return None

    now = to_datetime(now) if now is not None else datetime.now()
    target = subtract_years(now, years_back)

    closest = find_closest_point(history, target)
    if closest is None or closest.price is None or closest.price <= 0:
        return None

    investment_price = float(closest.price)
    shares = investment_amount / investment_price
    current_value = shares * current_price
    profit = current_value - investment_amount
    profit_percent = profit / investment_amount * 100

    elapsed = (now - to_datetime(closest.date)).total_seconds()
    actual_years = elapsed / SECONDS_PER_YEAR

    investment_date = closest.date.date() if isinstance(closest.date, datetime) else closest.date

    return InvestmentResult(
        investment_date=investment_date,
        investment_price=investment_price,
        current_price=current_price,
        shares=shares,
        invested_amount=investment_amount,
        current_value=current_value,
        profit=profit,
        profit_percent=profit_percent,
        years_back=years_back,
        actual_years=actual_years,
        cagr=calculate_cagr(investment_amount, current_value, actual_years),
    )

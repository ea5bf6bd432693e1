"""
Indian market hours (NSE / BSE, IST)
"""
from datetime import datetime, time, timedelta, timezone
from typing import Optional

IST = timezone(timedelta(hours=5, minutes=30))

PRE_OPEN = time(9, 0)
MARKET_OPEN = time(9, 15)
MARKET_CLOSE = time(15, 30)

STATUS_TEXT = {
    "open": "Market Open",
    "pre-open": "Pre-Open Session",
    "post-close": "Market Closed",
    "closed": "Market Closed",
}


def now_ist(now: Optional[datetime] = None) -> datetime:
    """Current time in IST; naive values are taken as already IST"""
    if now is None:
        return datetime.now(IST)
    if now.tzinfo is None:
        return now.replace(tzinfo=IST)
    return now.astimezone(IST)


def get_market_status(now: Optional[datetime] = None) -> str:
    """open / pre-open / post-close / closed"""
    now = now_ist(now)

    # weekends
    if now.weekday() >= 5:
        return "closed"

    current = now.time()
    if current < PRE_OPEN:
        return "closed"
    if current < MARKET_OPEN:
        return "pre-open"
    if current <= MARKET_CLOSE:
        return "open"
    return "post-close"


def is_market_open(now: Optional[datetime] = None) -> bool:
    """Continuous trading session, Mon-Fri 09:15-15:30 IST"""
    return get_market_status(now) == "open"


def get_market_status_text(now: Optional[datetime] = None) -> str:
    return STATUS_TEXT[get_market_status(now)]

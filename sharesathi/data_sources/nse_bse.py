"""
NSE / BSE archive data source
- NSE index constituent lists (CSV)
- BSE equity bhavcopy (end-of-day prices for every listed stock, CSV)
"""
import io
import logging
from datetime import date, datetime, timedelta
from typing import Optional

import pandas as pd
import requests

from sharesathi.config import settings
from sharesathi.utils.market_hours import now_ist

logger = logging.getLogger(__name__)

NSE_ARCHIVE_URL = "https://archives.nseindia.com/content/indices/{file}"
BSE_BHAVCOPY_URL = (
    "https://www.bseindia.com/download/BhavCopy/Equity/"
    "BhavCopy_BSE_CM_0_0_0_{date}_F_0000.CSV"
)

# index id -> (display name, NSE archive file)
INDEX_LISTS = {
    "nifty50": ("NIFTY 50", "ind_nifty50list.csv"),
    "niftynext50": ("NIFTY NEXT 50", "ind_niftynext50list.csv"),
    "nifty100": ("NIFTY 100", "ind_nifty100list.csv"),
    "nifty200": ("NIFTY 200", "ind_nifty200list.csv"),
    "nifty500": ("NIFTY 500", "ind_nifty500list.csv"),
    "niftybank": ("NIFTY BANK", "ind_niftybanklist.csv"),
    "niftyit": ("NIFTY IT", "ind_niftyitlist.csv"),
    "niftypharma": ("NIFTY PHARMA", "ind_niftypharmalist.csv"),
    "niftyauto": ("NIFTY AUTO", "ind_niftyautolist.csv"),
    "niftyfmcg": ("NIFTY FMCG", "ind_niftyfmcglist.csv"),
    "niftymetal": ("NIFTY METAL", "ind_niftymetallist.csv"),
    "niftyrealty": ("NIFTY REALTY", "ind_niftyrealtylist.csv"),
    "niftyenergy": ("NIFTY ENERGY", "ind_niftyenergylist.csv"),
    "niftymidcap50": ("NIFTY MIDCAP 50", "ind_niftymidcap50list.csv"),
    "niftysmallcap50": ("NIFTY SMALLCAP 50", "ind_niftysmlcap50list.csv"),
}

# bhavcopy publishes around 16:45 IST
BHAVCOPY_READY_HOUR = 17

INDEX_COLUMNS = ["name", "industry", "symbol", "series", "isin"]
BHAVCOPY_COLUMNS = {
    "FinInstrmId": "bse_code",
    "TckrSymb": "symbol",
    "FinInstrmNm": "name",
    "ISIN": "isin",
    "SctySrs": "series",
    "ClsPric": "price",
    "PrvsClsgPric": "previous_close",
    "TtlTradgVol": "volume",
}


# ==================== Parsing ====================

def get_bhavcopy_date(now: Optional[datetime] = None) -> date:
    """
    Latest trading day whose bhavcopy should be published

    Before 17:00 IST the previous day is used; weekends roll back to Friday.
    """
    now = now_ist(now)
    day = now.date()
    if now.hour < BHAVCOPY_READY_HOUR:
        day -= timedelta(days=1)
    while day.weekday() >= 5:
        day -= timedelta(days=1)
    return day


def parse_index_csv(text: str) -> pd.DataFrame:
    """
    NSE index list: Company Name, Industry, Symbol, Series, ISIN Code

    Returns:
        DataFrame[name, industry, symbol, series, isin], rows without a symbol dropped
    """
    if not text or not text.strip():
        return pd.DataFrame(columns=INDEX_COLUMNS)

    df = pd.read_csv(io.StringIO(text.strip()), dtype=str, skipinitialspace=True)
    df = df.iloc[:, :5]
    df.columns = INDEX_COLUMNS[:len(df.columns)]
    for column in INDEX_COLUMNS:
        if column not in df:
            df[column] = ""

    df = df.fillna("")
    df = df.apply(lambda col: col.str.strip())
    return df[df["symbol"] != ""].reset_index(drop=True)


def parse_bhavcopy(text: str) -> pd.DataFrame:
    """
    BSE bhavcopy CSV to a price table

    Returns:
        DataFrame[bse_code, symbol, name, isin, series, price, previous_close,
                  volume, change, change_percent]; only rows with a symbol and a
                  positive close
    """
    columns = list(BHAVCOPY_COLUMNS.values()) + ["change", "change_percent"]
    if not text or not text.strip():
        return pd.DataFrame(columns=columns)

    raw = pd.read_csv(io.StringIO(text.strip()), dtype=str)
    raw.columns = [c.strip() for c in raw.columns]

    df = pd.DataFrame({
        target: raw[source] if source in raw else pd.Series("", index=raw.index)
        for source, target in BHAVCOPY_COLUMNS.items()
    })
    for column in ("bse_code", "symbol", "name", "isin", "series"):
        df[column] = df[column].fillna("").astype(str).str.strip()
    for column in ("price", "previous_close", "volume"):
        df[column] = pd.to_numeric(df[column], errors="coerce").fillna(0.0)

    df = df[(df["symbol"] != "") & (df["price"] > 0)].copy()

    df["change"] = df["price"] - df["previous_close"]
    df["change_percent"] = 0.0
    has_prev = df["previous_close"] > 0
    df.loc[has_prev, "change_percent"] = df.loc[has_prev, "change"] / df.loc[has_prev, "previous_close"] * 100

    return df.reset_index(drop=True)[columns]


# ==================== Client ====================

class NseBseClient:
    """NSE / BSE archive client"""

    def __init__(self):
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": settings.HTTP_USER_AGENT,
        })

    def _get_text(self, url: str, timeout: float) -> Optional[str]:
        try:
            response = self.session.get(url, timeout=timeout)
            response.raise_for_status()
            return response.text
        except requests.exceptions.RequestException as e:
            logger.error(f"Archive request failed {url}: {e}")
            return None

    def get_index_constituents(self, index_id: str) -> Optional[pd.DataFrame]:
        """
        Constituents of an NSE index

        Args:
            index_id: key of INDEX_LISTS (e.g. nifty50)

        Returns:
            DataFrame from parse_index_csv, None when the list can't be fetched
        """
        entry = INDEX_LISTS.get(index_id)
        if entry is None:
            return None

        text = self._get_text(NSE_ARCHIVE_URL.format(file=entry[1]), timeout=10)
        if text is None:
            return None

        df = parse_index_csv(text)
        logger.info(f"{entry[0]}: {len(df)} constituents")
        return df

    def get_bhavcopy(self, now: Optional[datetime] = None) -> pd.DataFrame:
        """Latest BSE bhavcopy; empty DataFrame when unavailable"""
        trade_date = get_bhavcopy_date(now)
        url = BSE_BHAVCOPY_URL.format(date=trade_date.strftime("%Y%m%d"))

        text = self._get_text(url, timeout=15)
        if text is None:
            return parse_bhavcopy("")

        df = parse_bhavcopy(text)
        logger.info(f"BSE bhavcopy {trade_date}: {len(df)} stocks")
        return df


# Global client
nse_bse = NseBseClient()

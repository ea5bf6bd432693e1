"""
Watchlist API routes
The store stays silent on refused mutations, so every route pre-checks
and answers with a typed error the client can show
"""
import logging

from fastapi import APIRouter, Depends

from sharesathi.dependencies import get_stock_service, get_watchlist_store
from sharesathi.exceptions import (
    ReadOnlyWatchlistError,
    ValidationError,
    WatchlistLimitError,
    WatchlistNotFoundError,
)
from sharesathi.schemas.watchlist import (
    StockAdd,
    StockReorder,
    Watchlist,
    WatchlistCreate,
    WatchlistListResponse,
    WatchlistOverviewResponse,
    WatchlistRename,
    WatchlistResponse,
)
from sharesathi.services.overview_service import get_watchlist_overview
from sharesathi.services.stock_service import StockService
from sharesathi.services.watchlist_service import WatchlistStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/watchlists", tags=["Watchlists"])


def _get_or_404(store: WatchlistStore, watchlist_id: str) -> Watchlist:
    watchlist = store.get_watchlist(watchlist_id)
    if watchlist is None:
        raise WatchlistNotFoundError(watchlist_id)
    return watchlist


def _get_editable(store: WatchlistStore, watchlist_id: str) -> Watchlist:
    watchlist = _get_or_404(store, watchlist_id)
    if watchlist.is_default:
        raise ReadOnlyWatchlistError(watchlist_id)
    return watchlist


def _list_response(store: WatchlistStore, message: str = None) -> WatchlistListResponse:
    watchlists = store.watchlists
    return WatchlistListResponse(
        message=message,
        data=watchlists,
        active_watchlist_id=store.active_watchlist_id,
        total=len(watchlists),
        can_create=store.can_create_watchlist(),
    )


# ==================== Watchlists ====================

@router.get("", response_model=WatchlistListResponse, summary="List watchlists")
def list_watchlists(store: WatchlistStore = Depends(get_watchlist_store)):
    """All watchlists in display order with the active id"""
    return _list_response(store)


@router.post("", response_model=WatchlistResponse, status_code=201, summary="Create watchlist")
def create_watchlist(
    data: WatchlistCreate,
    store: WatchlistStore = Depends(get_watchlist_store),
):
    """
    Create a user watchlist

    - blank names become "New Watchlist"
    - names are trimmed to 30 characters
    """
    if not store.can_create_watchlist():
        raise WatchlistLimitError(f"You can have at most {store.max_watchlists} watchlists")

    watchlist_id = store.create_watchlist(data.name)
    if watchlist_id is None:
        raise WatchlistLimitError(f"You can have at most {store.max_watchlists} watchlists")

    logger.info(f"API: created watchlist {watchlist_id}")
    return WatchlistResponse(message="Watchlist created", data=store.get_watchlist(watchlist_id))


@router.get("/containing/{symbol}", response_model=WatchlistListResponse, summary="Watchlists containing a stock")
def list_watchlists_containing(
    symbol: str,
    store: WatchlistStore = Depends(get_watchlist_store),
):
    containing = store.get_watchlists_containing(symbol)
    return WatchlistListResponse(
        data=containing,
        active_watchlist_id=store.active_watchlist_id,
        total=len(containing),
        can_create=store.can_create_watchlist(),
    )


@router.get("/{watchlist_id}", response_model=WatchlistResponse, summary="Get watchlist")
def get_watchlist(
    watchlist_id: str,
    store: WatchlistStore = Depends(get_watchlist_store),
):
    return WatchlistResponse(data=_get_or_404(store, watchlist_id))


@router.patch("/{watchlist_id}", response_model=WatchlistResponse, summary="Rename watchlist")
def rename_watchlist(
    watchlist_id: str,
    data: WatchlistRename,
    store: WatchlistStore = Depends(get_watchlist_store),
):
    _get_editable(store, watchlist_id)
    if not data.name.strip():
        raise ValidationError("Watchlist name cannot be empty")

    store.rename_watchlist(watchlist_id, data.name)
    return WatchlistResponse(message="Watchlist renamed", data=store.get_watchlist(watchlist_id))


@router.delete("/{watchlist_id}", response_model=WatchlistListResponse, summary="Delete watchlist")
def delete_watchlist(
    watchlist_id: str,
    store: WatchlistStore = Depends(get_watchlist_store),
):
    """Delete a user watchlist; the last one is kept"""
    _get_editable(store, watchlist_id)
    user_lists = [w for w in store.watchlists if not w.is_default]
    if len(user_lists) <= 1:
        raise WatchlistLimitError("You need at least one watchlist of your own")

    store.delete_watchlist(watchlist_id)
    logger.info(f"API: deleted watchlist {watchlist_id}")
    return _list_response(store, message="Watchlist deleted")


@router.post("/{watchlist_id}/activate", response_model=WatchlistListResponse, summary="Switch active watchlist")
def activate_watchlist(
    watchlist_id: str,
    store: WatchlistStore = Depends(get_watchlist_store),
):
    if not store.set_active_watchlist(watchlist_id):
        raise WatchlistNotFoundError(watchlist_id)
    return _list_response(store)


# ==================== Stocks ====================

@router.post("/{watchlist_id}/stocks", response_model=WatchlistResponse, summary="Add stock")
def add_stock(
    watchlist_id: str,
    data: StockAdd,
    store: WatchlistStore = Depends(get_watchlist_store),
):
    """Add a stock; adding one that is already there changes nothing"""
    watchlist = _get_editable(store, watchlist_id)
    symbol = data.symbol.strip().upper()
    if not symbol:
        raise ValidationError("Symbol cannot be empty")

    if store.is_in_watchlist(symbol, watchlist_id):
        return WatchlistResponse(message=f"{symbol} is already in {watchlist.name}", data=watchlist)

    if not store.can_add_to_watchlist(watchlist_id):
        raise WatchlistLimitError(f"A watchlist can hold at most {store.max_stocks} stocks")

    store.add_stock(symbol, watchlist_id)
    return WatchlistResponse(message=f"{symbol} added", data=store.get_watchlist(watchlist_id))


@router.delete("/{watchlist_id}/stocks/{symbol}", response_model=WatchlistResponse, summary="Remove stock")
def remove_stock(
    watchlist_id: str,
    symbol: str,
    store: WatchlistStore = Depends(get_watchlist_store),
):
    _get_editable(store, watchlist_id)
    store.remove_stock(symbol, watchlist_id)
    return WatchlistResponse(message=f"{symbol.upper()} removed", data=store.get_watchlist(watchlist_id))


@router.put("/{watchlist_id}/stocks", response_model=WatchlistResponse, summary="Reorder stocks")
def reorder_stocks(
    watchlist_id: str,
    data: StockReorder,
    store: WatchlistStore = Depends(get_watchlist_store),
):
    """New order must contain exactly the watchlist's current symbols"""
    watchlist = _get_editable(store, watchlist_id)
    ordered = [s.strip().upper() for s in data.symbols]
    if len(ordered) != len(watchlist.symbols) or set(ordered) != set(watchlist.symbols):
        raise ValidationError("New order must list every stock of the watchlist exactly once")

    store.reorder_stocks(ordered, watchlist_id)
    return WatchlistResponse(data=store.get_watchlist(watchlist_id))


@router.get("/{watchlist_id}/overview", response_model=WatchlistOverviewResponse, summary="Watchlist with live prices")
async def watchlist_overview(
    watchlist_id: str,
    store: WatchlistStore = Depends(get_watchlist_store),
    stocks: StockService = Depends(get_stock_service),
):
    """Live quotes (cached 5 minutes) plus gainers / losers metrics"""
    watchlist = _get_or_404(store, watchlist_id)
    overview = await get_watchlist_overview(watchlist, stocks)
    return WatchlistOverviewResponse(data=watchlist, **overview)


@router.post("/reset", response_model=WatchlistListResponse, summary="Reset watchlists")
def reset_watchlists(store: WatchlistStore = Depends(get_watchlist_store)):
    """Forget every change and go back to the initial watchlists"""
    store.reset()
    return _list_response(store, message="Watchlists reset")



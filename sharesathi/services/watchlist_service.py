"""
Watchlist store

Single source of truth for the user's watchlists and the active pointer.
The whole collection is persisted as one JSON snapshot after every mutation.
Constraint violations (capacity, read-only default, last list) are silent
no-ops: callers pre-check with can_create_watchlist / can_add_to_watchlist.
"""
import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from sharesathi.config import settings, DATA_DIR
from sharesathi.schemas.watchlist import Watchlist, WatchlistSnapshot, SNAPSHOT_VERSION
from sharesathi.services.storage_service import KeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_WATCHLIST_ID = "top-picks"
DEFAULT_WATCHLIST_NAME = "Top Picks"
USER_WATCHLIST_ID = "my-watchlist"
USER_WATCHLIST_NAME = "My Watchlist"
NEW_WATCHLIST_NAME = "New Watchlist"
MAX_NAME_LENGTH = 30

DEFAULT_SYMBOLS_FILE = DATA_DIR / "default_watchlist.json"


def load_default_symbols(path: Path = DEFAULT_SYMBOLS_FILE) -> List[str]:
    """Read the static seed list for the read-only default watchlist"""
    try:
        with open(path, encoding="utf-8") as f:
            symbols = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read default watchlist {path}: {e}")
        return []

    if not isinstance(symbols, list):
        logger.warning(f"Default watchlist {path} is not a list")
        return []
    return [str(s).strip().upper() for s in symbols if str(s).strip()]


def _clean_name(name: Optional[str]) -> str:
    return (name or "").strip()[:MAX_NAME_LENGTH].strip()


def _clean_symbol(symbol: Optional[str]) -> str:
    return (symbol or "").strip().upper()


class WatchlistStore:
    """Watchlist collection with capacity-enforced CRUD and explicit load/save"""

    def __init__(
        self,
        storage: KeyValueStorage,
        storage_key: Optional[str] = None,
        default_symbols: Optional[List[str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
        max_watchlists: Optional[int] = None,
        max_stocks: Optional[int] = None,
    ):
        self.storage = storage
        self.storage_key = storage_key or settings.WATCHLIST_STORAGE_KEY
        self.clock = clock or datetime.now
        self.max_watchlists = max_watchlists or settings.MAX_WATCHLISTS
        self.max_stocks = max_stocks or settings.MAX_STOCKS_PER_WATCHLIST

        if default_symbols is None:
            default_symbols = load_default_symbols()
        self.default_symbols = list(dict.fromkeys(default_symbols))[:self.max_stocks]

        self._lock = threading.RLock()
        self._watchlists: List[Watchlist] = []
        self._active_id = USER_WATCHLIST_ID
        self._reset_state()

    # ==================== Persistence ====================

    def load(self) -> bool:
        """
        Replace in-memory state with the persisted snapshot

        Returns:
            True if a snapshot was restored, False if defaults are in use
        """
        with self._lock:
            try:
                raw = self.storage.get_item(self.storage_key)
            except SQLAlchemyError as e:
                logger.error(f"Reading watchlists failed, using defaults: {e}")
                self._reset_state()
                return False

            if raw is None:
                logger.info("No saved watchlists, starting from defaults")
                self._reset_state()
                return False

            try:
                snapshot = WatchlistSnapshot.model_validate_json(raw)
            except PydanticValidationError as e:
                logger.warning(f"Saved watchlists unreadable, resetting to defaults: {e.error_count()} errors")
                self._reset_state()
                return False

            if snapshot.version != SNAPSHOT_VERSION:
                logger.warning(
                    f"Saved watchlists have version {snapshot.version}, "
                    f"expected {SNAPSHOT_VERSION}; resetting to defaults"
                )
                self._reset_state()
                return False

            self._watchlists = list(snapshot.watchlists)
            self._active_id = snapshot.active_watchlist_id
            self._repair()

            logger.info(f"Loaded {len(self._watchlists)} watchlists, active={self._active_id}")
            return True

    def save(self) -> None:
        """Overwrite the persisted snapshot with the full collection"""
        with self._lock:
            snapshot = WatchlistSnapshot(
                watchlists=self._watchlists,
                active_watchlist_id=self._active_id,
            )
            try:
                self.storage.set_item(self.storage_key, snapshot.model_dump_json(by_alias=True))
            except SQLAlchemyError as e:
                # state stays in memory, next mutation retries the write
                logger.error(f"Persisting watchlists failed: {e}")

    def reset(self) -> None:
        """Forget the saved snapshot and go back to the initial watchlists"""
        with self._lock:
            self.storage.remove_item(self.storage_key)
            self._reset_state()
            logger.info("Watchlists reset to defaults")

    def _reset_state(self):
        now = self.clock()
        self._watchlists = [
            self._default_watchlist(now),
            Watchlist(
                id=USER_WATCHLIST_ID,
                name=USER_WATCHLIST_NAME,
                symbols=[],
                is_default=False,
                order=1,
                created_at=now,
                updated_at=now,
            ),
        ]
        self._active_id = USER_WATCHLIST_ID

    def _default_watchlist(self, now: datetime) -> Watchlist:
        return Watchlist(
            id=DEFAULT_WATCHLIST_ID,
            name=DEFAULT_WATCHLIST_NAME,
            symbols=list(self.default_symbols),
            is_default=True,
            order=0,
            created_at=now,
            updated_at=now,
        )

    def _repair(self):
        """Fix snapshots missing the default list or every user list"""
        seen = set()
        unique = []
        for w in self._watchlists:
            if w.id in seen:
                logger.warning(f"Dropping duplicate watchlist id {w.id}")
                continue
            seen.add(w.id)
            unique.append(w)
        self._watchlists = unique

        if not any(w.is_default for w in self._watchlists):
            logger.warning("Default watchlist missing from snapshot, re-seeding")
            self._watchlists.insert(0, self._default_watchlist(self.clock()))

        if not self._user_watchlists():
            logger.warning("No user watchlist in snapshot, recreating")
            now = self.clock()
            self._watchlists.append(Watchlist(
                id=USER_WATCHLIST_ID,
                name=USER_WATCHLIST_NAME,
                is_default=False,
                order=len(self._watchlists),
                created_at=now,
                updated_at=now,
            ))

        if self._find(self._active_id) is None:
            fallback = self._user_watchlists()[0].id
            logger.warning(f"Active watchlist {self._active_id} missing, switching to {fallback}")
            self._active_id = fallback

    # ==================== Queries ====================

    @property
    def watchlists(self) -> List[Watchlist]:
        """All watchlists in display order (copies)"""
        with self._lock:
            return [w.model_copy(deep=True) for w in sorted(self._watchlists, key=lambda w: w.order)]

    @property
    def active_watchlist_id(self) -> str:
        return self._active_id

    def get_watchlist(self, watchlist_id: str) -> Optional[Watchlist]:
        with self._lock:
            found = self._find(watchlist_id)
            return found.model_copy(deep=True) if found else None

    def get_active_watchlist(self) -> Optional[Watchlist]:
        return self.get_watchlist(self._active_id)

    def is_in_watchlist(self, symbol: str, watchlist_id: Optional[str] = None) -> bool:
        with self._lock:
            target = self._find(watchlist_id or self._active_id)
            return target is not None and _clean_symbol(symbol) in target.symbols

    def is_in_any_watchlist(self, symbol: str) -> bool:
        with self._lock:
            symbol = _clean_symbol(symbol)
            return any(symbol in w.symbols for w in self._watchlists)

    def get_watchlists_containing(self, symbol: str) -> List[Watchlist]:
        symbol = _clean_symbol(symbol)
        return [w for w in self.watchlists if symbol in w.symbols]

    def can_create_watchlist(self) -> bool:
        return len(self._watchlists) < self.max_watchlists

    def can_add_to_watchlist(self, watchlist_id: str) -> bool:
        target = self._find(watchlist_id)
        return (
            target is not None
            and not target.is_default
            and len(target.symbols) < self.max_stocks
        )

    # ==================== Watchlist CRUD ====================

    def create_watchlist(self, name: str) -> Optional[str]:
        """
        Create a new user watchlist

        Returns:
            the new id, or None when the watchlist limit is reached
        """
        with self._lock:
            if not self.can_create_watchlist():
                logger.warning(f"Create refused: already {len(self._watchlists)} watchlists")
                return None

            now = self.clock()
            watchlist = Watchlist(
                id=self._new_id(now),
                name=_clean_name(name) or NEW_WATCHLIST_NAME,
                symbols=[],
                is_default=False,
                order=len(self._watchlists),
                created_at=now,
                updated_at=now,
            )
            self._watchlists = self._watchlists + [watchlist]
            self.save()

            logger.info(f"Created watchlist id={watchlist.id}, name={watchlist.name}")
            return watchlist.id

    def rename_watchlist(self, watchlist_id: str, name: str) -> None:
        with self._lock:
            target = self._find(watchlist_id)
            if target is None or target.is_default:
                return

            new_name = _clean_name(name)
            if not new_name:
                return

            self._replace(target.model_copy(update={"name": new_name, "updated_at": self.clock()}))
            self.save()
            logger.info(f"Renamed watchlist {watchlist_id} to {new_name}")

    def delete_watchlist(self, watchlist_id: str) -> None:
        with self._lock:
            target = self._find(watchlist_id)
            if target is None or target.is_default:
                return
            if len(self._user_watchlists()) <= 1:
                logger.info(f"Delete refused: {watchlist_id} is the last user watchlist")
                return

            self._watchlists = [w for w in self._watchlists if w.id != watchlist_id]

            if self._active_id == watchlist_id:
                remaining = self._user_watchlists()
                self._active_id = remaining[0].id if remaining else USER_WATCHLIST_ID

            self.save()
            logger.info(f"Deleted watchlist {watchlist_id}, active={self._active_id}")

    def set_active_watchlist(self, watchlist_id: str) -> bool:
        """
        Point the active pointer at an existing watchlist

        Unknown ids are rejected so the active watchlist always resolves.
        """
        with self._lock:
            if self._find(watchlist_id) is None:
                logger.warning(f"Ignoring unknown active watchlist id {watchlist_id}")
                return False

            self._active_id = watchlist_id
            self.save()
            return True

    # ==================== Stock membership ====================

    def add_stock(self, symbol: str, watchlist_id: Optional[str] = None) -> None:
        with self._lock:
            symbol = _clean_symbol(symbol)
            target = self._find(watchlist_id or self._active_id)
            if not symbol or target is None or target.is_default:
                return
            if symbol in target.symbols or len(target.symbols) >= self.max_stocks:
                return

            self._replace(target.model_copy(update={
                "symbols": target.symbols + [symbol],
                "updated_at": self.clock(),
            }))
            self.save()
            logger.info(f"Added {symbol} to {target.id}")

    def remove_stock(self, symbol: str, watchlist_id: Optional[str] = None) -> None:
        with self._lock:
            symbol = _clean_symbol(symbol)
            target = self._find(watchlist_id or self._active_id)
            if target is None or target.is_default:
                return
            if symbol not in target.symbols:
                return

            self._replace(target.model_copy(update={
                "symbols": [s for s in target.symbols if s != symbol],
                "updated_at": self.clock(),
            }))
            self.save()
            logger.info(f"Removed {symbol} from {target.id}")

    def reorder_stocks(self, symbols: List[str], watchlist_id: Optional[str] = None) -> None:
        """Apply a new symbol order; anything but a permutation is ignored"""
        with self._lock:
            target = self._find(watchlist_id or self._active_id)
            if target is None or target.is_default:
                return

            ordered = [_clean_symbol(s) for s in symbols]
            if len(ordered) != len(target.symbols) or set(ordered) != set(target.symbols):
                return

            self._replace(target.model_copy(update={"symbols": ordered, "updated_at": self.clock()}))
            self.save()

    # ==================== Helpers ====================

    def _find(self, watchlist_id: Optional[str]) -> Optional[Watchlist]:
        for w in self._watchlists:
            if w.id == watchlist_id:
                return w
        return None

    def _replace(self, updated: Watchlist):
        self._watchlists = [updated if w.id == updated.id else w for w in self._watchlists]

    def _user_watchlists(self) -> List[Watchlist]:
        return sorted((w for w in self._watchlists if not w.is_default), key=lambda w: w.order)

    def _new_id(self, now: datetime) -> str:
        millis = int(now.timestamp() * 1000)
        taken = {w.id for w in self._watchlists}
        while f"wl-{millis}" in taken:
            millis += 1
        return f"wl-{millis}"

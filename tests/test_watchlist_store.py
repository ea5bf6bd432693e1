"""
tests/test_watchlist_store.py
-----------------------------
Unit tests for WatchlistStore.

Coverage:
  - initial state: read-only Top Picks + empty My Watchlist, active = my-watchlist
  - create / rename / delete with capacity and last-list rules
  - add / remove / reorder, de-duplication and per-list capacity
  - active pointer moves on delete, unknown ids rejected
  - snapshot persisted after every mutation and restored by load()
  - corrupt, wrong-version and broken snapshots fall back or get repaired
"""

import json
import unittest
from datetime import datetime, timedelta

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sharesathi.database import init_db
from sharesathi.services.storage_service import KeyValueStorage
from sharesathi.services.watchlist_service import (
    DEFAULT_WATCHLIST_ID,
    USER_WATCHLIST_ID,
    NEW_WATCHLIST_NAME,
    WatchlistStore,
)

SEED = ["500325", "532540", "500180"]
KEY = "test-watchlists"


# ---------------------------------------------------------------------------
# Shared fixture helpers
# ---------------------------------------------------------------------------

def _make_storage() -> KeyValueStorage:
    """KeyValueStorage over a private in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    return KeyValueStorage(sessionmaker(bind=engine))


class _Clock:
    """Deterministic clock, one second per call."""

    def __init__(self):
        self.now = datetime(2024, 1, 15, 10, 0, 0)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


def _make_store(storage=None, **kwargs) -> WatchlistStore:
    return WatchlistStore(
        storage or _make_storage(),
        storage_key=KEY,
        default_symbols=SEED,
        clock=_Clock(),
        **kwargs,
    )


# ---------------------------------------------------------------------------
# TestInitialState
# ---------------------------------------------------------------------------

class TestInitialState(unittest.TestCase):

    def setUp(self):
        self.store = _make_store()

    def test_two_initial_watchlists(self):
        ids = [w.id for w in self.store.watchlists]
        self.assertEqual(ids, [DEFAULT_WATCHLIST_ID, USER_WATCHLIST_ID])

    def test_default_is_read_only_seed(self):
        default = self.store.get_watchlist(DEFAULT_WATCHLIST_ID)
        self.assertTrue(default.is_default)
        self.assertEqual(default.symbols, SEED)

    def test_user_list_is_active_and_empty(self):
        self.assertEqual(self.store.active_watchlist_id, USER_WATCHLIST_ID)
        self.assertEqual(self.store.get_active_watchlist().symbols, [])

    def test_load_without_snapshot_keeps_defaults(self):
        self.assertFalse(self.store.load())
        self.assertEqual(len(self.store.watchlists), 2)

    def test_returned_watchlists_are_copies(self):
        self.store.watchlists[1].symbols.append("999999")
        self.assertEqual(self.store.get_watchlist(USER_WATCHLIST_ID).symbols, [])


# ---------------------------------------------------------------------------
# TestWatchlistCrud
# ---------------------------------------------------------------------------

class TestWatchlistCrud(unittest.TestCase):

    def setUp(self):
        self.store = _make_store()

    def test_create_returns_unique_ids(self):
        first = self.store.create_watchlist("Banks")
        second = self.store.create_watchlist("IT")
        self.assertNotEqual(first, second)
        self.assertEqual(self.store.get_watchlist(first).name, "Banks")
        self.assertEqual(len(self.store.watchlists), 4)

    def test_create_blank_name_uses_placeholder(self):
        new_id = self.store.create_watchlist("   ")
        self.assertEqual(self.store.get_watchlist(new_id).name, NEW_WATCHLIST_NAME)

    def test_create_truncates_long_names(self):
        new_id = self.store.create_watchlist("x" * 80)
        self.assertEqual(len(self.store.get_watchlist(new_id).name), 30)

    def test_create_refused_at_capacity(self):
        store = _make_store(max_watchlists=3)
        self.assertIsNotNone(store.create_watchlist("Third"))
        self.assertFalse(store.can_create_watchlist())
        self.assertIsNone(store.create_watchlist("Fourth"))
        self.assertEqual(len(store.watchlists), 3)

    def test_capacity_counts_the_default(self):
        store = _make_store()
        for i in range(8):
            self.assertIsNotNone(store.create_watchlist(f"List {i}"))
        self.assertEqual(len(store.watchlists), 10)
        self.assertIsNone(store.create_watchlist("Eleventh"))

    def test_new_watchlist_goes_last(self):
        new_id = self.store.create_watchlist("Last")
        self.assertEqual(self.store.watchlists[-1].id, new_id)

    def test_rename(self):
        self.store.rename_watchlist(USER_WATCHLIST_ID, "  Long term  ")
        self.assertEqual(self.store.get_watchlist(USER_WATCHLIST_ID).name, "Long term")

    def test_rename_blank_is_ignored(self):
        self.store.rename_watchlist(USER_WATCHLIST_ID, "   ")
        self.assertEqual(self.store.get_watchlist(USER_WATCHLIST_ID).name, "My Watchlist")

    def test_rename_default_is_ignored(self):
        self.store.rename_watchlist(DEFAULT_WATCHLIST_ID, "Mine now")
        self.assertEqual(self.store.get_watchlist(DEFAULT_WATCHLIST_ID).name, "Top Picks")

    def test_delete(self):
        new_id = self.store.create_watchlist("Temp")
        self.store.delete_watchlist(new_id)
        self.assertIsNone(self.store.get_watchlist(new_id))

    def test_delete_default_is_ignored(self):
        self.store.delete_watchlist(DEFAULT_WATCHLIST_ID)
        self.assertIsNotNone(self.store.get_watchlist(DEFAULT_WATCHLIST_ID))

    def test_delete_last_user_list_is_ignored(self):
        self.store.delete_watchlist(USER_WATCHLIST_ID)
        self.assertIsNotNone(self.store.get_watchlist(USER_WATCHLIST_ID))

    def test_delete_active_moves_pointer_to_first_user_list(self):
        new_id = self.store.create_watchlist("Temp")
        self.assertTrue(self.store.set_active_watchlist(new_id))
        self.store.delete_watchlist(new_id)
        self.assertEqual(self.store.active_watchlist_id, USER_WATCHLIST_ID)

    def test_set_active_unknown_id_rejected(self):
        self.assertFalse(self.store.set_active_watchlist("nope"))
        self.assertEqual(self.store.active_watchlist_id, USER_WATCHLIST_ID)

    def test_default_can_be_active(self):
        self.assertTrue(self.store.set_active_watchlist(DEFAULT_WATCHLIST_ID))
        self.assertEqual(self.store.get_active_watchlist().id, DEFAULT_WATCHLIST_ID)


# ---------------------------------------------------------------------------
# TestStockMembership
# ---------------------------------------------------------------------------

class TestStockMembership(unittest.TestCase):

    def setUp(self):
        self.store = _make_store()

    def test_add_to_active_by_default(self):
        self.store.add_stock("500325")
        self.assertTrue(self.store.is_in_watchlist("500325"))
        self.assertTrue(self.store.is_in_watchlist("500325", USER_WATCHLIST_ID))

    def test_add_normalises_symbol(self):
        self.store.add_stock("  reliance ")
        self.assertEqual(self.store.get_active_watchlist().symbols, ["RELIANCE"])

    def test_add_is_idempotent(self):
        self.store.add_stock("500325")
        before = self.store.get_active_watchlist().updated_at
        self.store.add_stock("500325")
        after = self.store.get_active_watchlist()
        self.assertEqual(after.symbols, ["500325"])
        self.assertEqual(after.updated_at, before)

    def test_add_keeps_insertion_order(self):
        for symbol in ("B", "A", "C"):
            self.store.add_stock(symbol)
        self.assertEqual(self.store.get_active_watchlist().symbols, ["B", "A", "C"])

    def test_add_to_default_is_ignored(self):
        self.store.add_stock("999999", DEFAULT_WATCHLIST_ID)
        self.assertEqual(self.store.get_watchlist(DEFAULT_WATCHLIST_ID).symbols, SEED)
        self.assertFalse(self.store.can_add_to_watchlist(DEFAULT_WATCHLIST_ID))

    def test_add_refused_when_full(self):
        store = _make_store(max_stocks=2)
        store.add_stock("A")
        store.add_stock("B")
        self.assertFalse(store.can_add_to_watchlist(USER_WATCHLIST_ID))
        store.add_stock("C")
        self.assertEqual(store.get_active_watchlist().symbols, ["A", "B"])

    def test_add_updates_timestamp(self):
        before = self.store.get_active_watchlist().updated_at
        self.store.add_stock("500325")
        self.assertGreater(self.store.get_active_watchlist().updated_at, before)

    def test_remove(self):
        self.store.add_stock("A")
        self.store.add_stock("B")
        self.store.remove_stock("a")
        self.assertEqual(self.store.get_active_watchlist().symbols, ["B"])

    def test_remove_missing_is_noop(self):
        self.store.add_stock("A")
        self.store.remove_stock("Z")
        self.assertEqual(self.store.get_active_watchlist().symbols, ["A"])

    def test_remove_from_default_is_ignored(self):
        self.store.remove_stock(SEED[0], DEFAULT_WATCHLIST_ID)
        self.assertIn(SEED[0], self.store.get_watchlist(DEFAULT_WATCHLIST_ID).symbols)

    def test_reorder(self):
        for symbol in ("A", "B", "C"):
            self.store.add_stock(symbol)
        self.store.reorder_stocks(["C", "A", "B"])
        self.assertEqual(self.store.get_active_watchlist().symbols, ["C", "A", "B"])

    def test_reorder_rejects_non_permutation(self):
        for symbol in ("A", "B"):
            self.store.add_stock(symbol)
        self.store.reorder_stocks(["A", "C"])
        self.store.reorder_stocks(["A"])
        self.assertEqual(self.store.get_active_watchlist().symbols, ["A", "B"])

    def test_any_watchlist_and_containing(self):
        other = self.store.create_watchlist("Other")
        self.store.add_stock(SEED[0], other)
        self.assertTrue(self.store.is_in_any_watchlist(SEED[0]))
        self.assertFalse(self.store.is_in_any_watchlist("NOPE"))
        containing = [w.id for w in self.store.get_watchlists_containing(SEED[0])]
        self.assertEqual(containing, [DEFAULT_WATCHLIST_ID, other])


# ---------------------------------------------------------------------------
# TestPersistence
# ---------------------------------------------------------------------------

class TestPersistence(unittest.TestCase):

    def setUp(self):
        self.storage = _make_storage()
        self.store = _make_store(self.storage)

    def test_mutations_survive_reload(self):
        new_id = self.store.create_watchlist("Banks")
        self.store.add_stock("500180", new_id)
        self.store.add_stock("532174", new_id)
        self.store.set_active_watchlist(new_id)

        reloaded = _make_store(self.storage)
        self.assertTrue(reloaded.load())
        self.assertEqual(reloaded.active_watchlist_id, new_id)
        self.assertEqual(reloaded.get_watchlist(new_id).symbols, ["500180", "532174"])
        self.assertEqual(
            [w.id for w in reloaded.watchlists],
            [w.id for w in self.store.watchlists],
        )

    def test_snapshot_uses_camel_case_keys(self):
        self.store.add_stock("500325")
        payload = json.loads(self.storage.get_item(KEY))
        self.assertEqual(payload["version"], 1)
        self.assertEqual(payload["activeWatchlistId"], USER_WATCHLIST_ID)
        self.assertIn("isDefault", payload["watchlists"][0])

    def test_corrupt_snapshot_falls_back_to_defaults(self):
        self.storage.set_item(KEY, "{not json")
        reloaded = _make_store(self.storage)
        self.assertFalse(reloaded.load())
        self.assertEqual(len(reloaded.watchlists), 2)

    def test_other_version_falls_back_to_defaults(self):
        self.store.create_watchlist("Gone")
        payload = json.loads(self.storage.get_item(KEY))
        payload["version"] = 99
        self.storage.set_item(KEY, json.dumps(payload))

        reloaded = _make_store(self.storage)
        self.assertFalse(reloaded.load())
        self.assertEqual(len(reloaded.watchlists), 2)

    def test_dangling_active_id_is_repaired(self):
        self.store.add_stock("A")
        payload = json.loads(self.storage.get_item(KEY))
        payload["activeWatchlistId"] = "deleted-elsewhere"
        self.storage.set_item(KEY, json.dumps(payload))

        reloaded = _make_store(self.storage)
        self.assertTrue(reloaded.load())
        self.assertEqual(reloaded.active_watchlist_id, USER_WATCHLIST_ID)

    def test_missing_default_is_reseeded(self):
        self.store.add_stock("A")
        payload = json.loads(self.storage.get_item(KEY))
        payload["watchlists"] = [w for w in payload["watchlists"] if not w["isDefault"]]
        self.storage.set_item(KEY, json.dumps(payload))

        reloaded = _make_store(self.storage)
        self.assertTrue(reloaded.load())
        self.assertEqual(reloaded.watchlists[0].id, DEFAULT_WATCHLIST_ID)
        self.assertEqual(reloaded.get_watchlist(USER_WATCHLIST_ID).symbols, ["A"])

    def test_reset_forgets_snapshot(self):
        self.store.create_watchlist("Temp")
        self.store.reset()
        self.assertIsNone(self.storage.get_item(KEY))
        self.assertEqual(len(self.store.watchlists), 2)


if __name__ == "__main__":
    unittest.main()

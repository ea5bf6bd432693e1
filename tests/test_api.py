"""
tests/test_api.py
-----------------
HTTP layer through FastAPI's TestClient.

Stores run on a private in-memory database and the stock service is a stub,
so no request leaves the process.
"""

import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sharesathi.database import init_db
from sharesathi.dependencies import get_settings_store, get_stock_service, get_watchlist_store
from sharesathi.main import app
from sharesathi.schemas.stock import BatchQuote, BatchResponse, TimeMachineResponse
from sharesathi.services.settings_service import SettingsStore
from sharesathi.services.storage_service import KeyValueStorage
from sharesathi.services.watchlist_service import WatchlistStore


def _make_storage() -> KeyValueStorage:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    return KeyValueStorage(sessionmaker(bind=engine))


class _StubStockService:
    """Knows one live stock, 500325."""

    def __init__(self):
        self.time_machine_calls = []

    async def get_batch_quotes(self, symbols):
        stocks = {}
        if "500325" in symbols:
            stocks["500325"] = BatchQuote(
                symbol="500325",
                name="Reliance Industries Ltd",
                short_name="RELIANCE",
                price=2500.0,
                change=50.0,
                change_percent=2.0,
                fifty_two_week_high=3000.0,
                fifty_two_week_low=2000.0,
            )
        return BatchResponse(stocks=stocks, fetched=len(stocks), requested=len(symbols))

    async def get_time_machine(self, symbol, amount, years):
        self.time_machine_calls.append((symbol, amount, years))
        return TimeMachineResponse(symbol=symbol, amount=amount, years=years, current_price=0.0, history_points=0)


class ApiTestCase(unittest.TestCase):

    def setUp(self):
        storage = _make_storage()
        self.store = WatchlistStore(storage, default_symbols=["500325", "532540"])
        self.settings_store = SettingsStore(storage)
        self.stocks = _StubStockService()

        app.dependency_overrides[get_watchlist_store] = lambda: self.store
        app.dependency_overrides[get_settings_store] = lambda: self.settings_store
        app.dependency_overrides[get_stock_service] = lambda: self.stocks
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def assertError(self, response, status, code):
        self.assertEqual(response.status_code, status, response.text)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["error"]["code"], code)


class TestWatchlistApi(ApiTestCase):

    def test_list(self):
        body = self.client.get("/api/watchlists").json()
        self.assertEqual([w["id"] for w in body["data"]], ["top-picks", "my-watchlist"])
        self.assertEqual(body["activeWatchlistId"], "my-watchlist")
        self.assertTrue(body["canCreate"])
        self.assertTrue(body["data"][0]["isDefault"])

    def test_create(self):
        response = self.client.post("/api/watchlists", json={"name": "Banks"})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["data"]["name"], "Banks")
        self.assertEqual(len(self.store.watchlists), 3)

    def test_create_at_capacity(self):
        for i in range(8):
            self.store.create_watchlist(f"List {i}")
        response = self.client.post("/api/watchlists", json={"name": "One too many"})
        self.assertError(response, 409, "WATCHLIST_LIMIT")

    def test_get_unknown(self):
        self.assertError(self.client.get("/api/watchlists/nope"), 404, "WATCHLIST_NOT_FOUND")

    def test_rename_default_is_forbidden(self):
        response = self.client.patch("/api/watchlists/top-picks", json={"name": "Mine"})
        self.assertError(response, 403, "WATCHLIST_READ_ONLY")

    def test_rename_blank(self):
        response = self.client.patch("/api/watchlists/my-watchlist", json={"name": "  "})
        self.assertError(response, 422, "VALIDATION_ERROR")

    def test_rename(self):
        response = self.client.patch("/api/watchlists/my-watchlist", json={"name": "Core"})
        self.assertEqual(response.json()["data"]["name"], "Core")

    def test_delete_last_user_list(self):
        self.assertError(self.client.delete("/api/watchlists/my-watchlist"), 409, "WATCHLIST_LIMIT")

    def test_delete(self):
        new_id = self.store.create_watchlist("Temp")
        body = self.client.delete(f"/api/watchlists/{new_id}").json()
        self.assertEqual(body["total"], 2)

    def test_activate(self):
        body = self.client.post("/api/watchlists/top-picks/activate").json()
        self.assertEqual(body["activeWatchlistId"], "top-picks")
        self.assertError(self.client.post("/api/watchlists/nope/activate"), 404, "WATCHLIST_NOT_FOUND")

    def test_add_remove_stock(self):
        response = self.client.post("/api/watchlists/my-watchlist/stocks", json={"symbol": "tcs"})
        self.assertEqual(response.json()["data"]["symbols"], ["TCS"])

        again = self.client.post("/api/watchlists/my-watchlist/stocks", json={"symbol": "TCS"})
        self.assertEqual(again.status_code, 200)
        self.assertIn("already", again.json()["message"])

        removed = self.client.delete("/api/watchlists/my-watchlist/stocks/tcs")
        self.assertEqual(removed.json()["data"]["symbols"], [])

    def test_add_to_full_list(self):
        store = WatchlistStore(_make_storage(), default_symbols=[], max_stocks=1)
        app.dependency_overrides[get_watchlist_store] = lambda: store
        self.client.post("/api/watchlists/my-watchlist/stocks", json={"symbol": "A"})
        response = self.client.post("/api/watchlists/my-watchlist/stocks", json={"symbol": "B"})
        self.assertError(response, 409, "WATCHLIST_LIMIT")

    def test_add_to_default(self):
        response = self.client.post("/api/watchlists/top-picks/stocks", json={"symbol": "INFY"})
        self.assertError(response, 403, "WATCHLIST_READ_ONLY")

    def test_reorder(self):
        for symbol in ("A", "B"):
            self.store.add_stock(symbol)
        ok = self.client.put("/api/watchlists/my-watchlist/stocks", json={"symbols": ["B", "A"]})
        self.assertEqual(ok.json()["data"]["symbols"], ["B", "A"])

        bad = self.client.put("/api/watchlists/my-watchlist/stocks", json={"symbols": ["B", "C"]})
        self.assertError(bad, 422, "VALIDATION_ERROR")

    def test_containing(self):
        body = self.client.get("/api/watchlists/containing/500325").json()
        self.assertEqual([w["id"] for w in body["data"]], ["top-picks"])

    def test_overview(self):
        self.store.add_stock("500325")
        self.store.add_stock("999999")

        body = self.client.get("/api/watchlists/my-watchlist/overview").json()
        live, offline = body["stocks"]
        self.assertEqual(live["symbol"], "500325")
        self.assertTrue(live["isLive"])
        self.assertEqual(live["fiftyTwoWeekPosition"], 50.0)
        self.assertGreater(live["marketCap"], 0)
        self.assertEqual(offline["name"], "999999")
        self.assertFalse(offline["isLive"])
        self.assertEqual(body["metrics"]["gainers"], 1)
        self.assertEqual(body["metrics"]["topGainer"], "500325")

    def test_overview_empty(self):
        body = self.client.get("/api/watchlists/my-watchlist/overview").json()
        self.assertEqual(body["stocks"], [])
        self.assertEqual(body["metrics"]["gainers"], 0)

    def test_reset(self):
        self.store.create_watchlist("Temp")
        body = self.client.post("/api/watchlists/reset").json()
        self.assertEqual(body["total"], 2)


class TestSettingsApi(ApiTestCase):

    def test_defaults(self):
        self.assertEqual(self.client.get("/api/settings").json(), {"theme": "light", "fontSize": "large"})

    def test_partial_update(self):
        body = self.client.put("/api/settings", json={"theme": "dark"}).json()
        self.assertEqual(body, {"theme": "dark", "fontSize": "large"})

        body = self.client.put("/api/settings", json={"fontSize": "extra-large"}).json()
        self.assertEqual(body, {"theme": "dark", "fontSize": "extra-large"})

    def test_settings_persist(self):
        self.client.put("/api/settings", json={"theme": "dark"})
        reloaded = SettingsStore(self.settings_store.storage)
        self.assertTrue(reloaded.load())
        self.assertEqual(reloaded.current.theme, "dark")

    def test_unknown_value_rejected(self):
        self.assertEqual(self.client.put("/api/settings", json={"fontSize": "huge"}).status_code, 422)


class TestMiscApi(ApiTestCase):

    def test_health(self):
        self.assertEqual(self.client.get("/health").json()["status"], "healthy")

    def test_presets(self):
        self.assertEqual(self.client.get("/api/timemachine/presets").json(), {"years": [1, 3, 5, 10]})

    def test_time_machine_rejects_bad_amount(self):
        self.assertEqual(self.client.get("/api/timemachine/500325?amount=0").status_code, 422)

    def test_time_machine_rejects_non_preset_years(self):
        for years in (2, 7, 30):
            response = self.client.get(f"/api/timemachine/500325?amount=1000&years={years}")
            self.assertError(response, 422, "VALIDATION_ERROR")
        self.assertEqual(self.stocks.time_machine_calls, [])

    def test_time_machine_preset_years(self):
        response = self.client.get("/api/timemachine/500325?amount=1000&years=10")
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["years"], 10)
        self.assertEqual(self.stocks.time_machine_calls, [("500325", 1000.0, 10)])

    def test_chat_without_messages(self):
        response = self.client.post("/api/chat", json={"messages": []})
        self.assertError(response, 400, "NO_MESSAGES")


if __name__ == "__main__":
    unittest.main()

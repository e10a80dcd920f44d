# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Provides a fake remote store backend (served through httpx.MockTransport),
# a controllable clock, and an application wired to both.
# =============================================================================

import itertools
import json
from collections.abc import Callable

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from storegate.config import Settings
from storegate.main import create_app
from storegate.services.health_gate import BackendHealthGate
from storegate.services.store_api import StoreApiClient

BACKEND_URL = "http://backend.test"


# =============================================================================
# Fakes
# =============================================================================


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Replacement for asyncio.sleep that records delays and returns at once."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class FakeStoreBackend:
    """In-memory stand-in for the remote store API."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.health_statuses: list[int] = []
        self.default_health_status = 200
        self.items: dict[str, dict] = {
            "1": {
                "id": "1",
                "name": "Coffee beans",
                "description": "Dark roast, 1kg",
                "quantity": 3,
                "unitPrice": 12.5,
                "category": "Grocery",
                "date": "2024-03-01",
                "createdAt": "2024-03-01T09:00:00Z",
                "updatedAt": "2024-03-01T09:00:00Z",
            },
            "2": {
                "id": "2",
                "name": "Mug",
                "description": "Ceramic",
                "quantity": 2,
                "unitPrice": 8.0,
                "category": "Kitchen",
                "date": "2024-03-02",
                "createdAt": "2024-03-02T10:00:00Z",
                "updatedAt": "2024-03-02T10:00:00Z",
            },
        }
        self._ids = itertools.count(100)
        self.fail_paths: set[str] = set()
        self.overrides: dict[tuple[str, str], httpx.Response] = {}

    def calls(self, path: str | None = None, method: str | None = None) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if (path is None or r.url.path == path) and (method is None or r.method == method)
        ]

    def item_calls(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.startswith("/items")]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path in self.fail_paths:
            raise httpx.ConnectError("Connection refused", request=request)

        if (request.method, path) in self.overrides:
            return self.overrides[(request.method, path)]

        if path == "/health":
            status = self.health_statuses.pop(0) if self.health_statuses else self.default_health_status
            return httpx.Response(status, json={"status": "ok" if status < 400 else "down"})

        if path == "/items":
            if request.method == "GET":
                return httpx.Response(200, json=list(self.items.values()))
            if request.method == "POST":
                item_id = str(next(self._ids))
                item = {"id": item_id, **json.loads(request.content)}
                self.items[item_id] = item
                return httpx.Response(201, json=item)

        if path.startswith("/items/"):
            item_id = path.removeprefix("/items/")
            if item_id not in self.items:
                return httpx.Response(404, json={"message": f"Sale item {item_id} not found"})
            if request.method == "GET":
                return httpx.Response(200, json=self.items[item_id])
            if request.method == "PUT":
                changes = json.loads(request.content)
                self.items[item_id].update(changes)
                return httpx.Response(200, json=self.items[item_id])
            if request.method == "DELETE":
                self.items.pop(item_id)
                return httpx.Response(200, json={"message": "Item deleted"})

        return httpx.Response(405, json={"message": "Method not allowed"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, api_url=BACKEND_URL, env="testing", log_level="WARNING")


@pytest.fixture
def unconfigured_settings() -> Settings:
    return Settings(_env_file=None, api_url=None, env="testing", log_level="WARNING")


@pytest.fixture
def backend() -> FakeStoreBackend:
    return FakeStoreBackend()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_app(backend: FakeStoreBackend, clock: FakeClock) -> Callable[[Settings], FastAPI]:
    """Build an app whose outbound calls go to the fake backend."""

    def _make(app_settings: Settings) -> FastAPI:
        app = create_app(app_settings)
        http_client = httpx.AsyncClient(transport=backend.transport())
        app.state.health_gate = BackendHealthGate(app_settings, http_client=http_client, clock=clock)
        app.state.store_api = StoreApiClient(app_settings, http_client=http_client)
        return app

    return _make


@pytest.fixture
def app(make_app, settings: Settings) -> FastAPI:
    return make_app(settings)


@pytest.fixture
def client(app: FastAPI):
    with TestClient(app) as test_client:
        yield test_client


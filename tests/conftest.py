from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from functools import partial
from typing import Any

import httpx
import pytest

from portal.clients.session_manager import SessionManager
from portal.clients.store import MemoryStore
from portal.config import Settings
from portal.core.events import InteractionEvents
from portal.schemas.enums import NotificationKind
from portal.services.navigator import HistoryNavigator

BASE_URL = "https://api.test"
T0 = 1_700_000_000_000


class ManualClock:
    def __init__(self, now_ms: int = T0) -> None:
        self.now = now_ms

    def now_ms(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Collects timers; tests fire them explicitly."""

    def __init__(self) -> None:
        self.delayed: list[tuple[float, Callable[[], None], FakeHandle]] = []
        self.periodic: list[tuple[float, Callable[[], Awaitable[None]], FakeHandle]] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeHandle:
        handle = FakeHandle()
        self.delayed.append((delay, callback, handle))
        return handle

    def call_every(self, interval: float, callback: Callable[[], Awaitable[None]]) -> FakeHandle:
        handle = FakeHandle()
        self.periodic.append((interval, callback, handle))
        return handle

    @property
    def active_periodic(self) -> list[tuple[float, Callable[[], Awaitable[None]], FakeHandle]]:
        return [entry for entry in self.periodic if not entry[2].cancelled]

    def run_delayed(self) -> None:
        pending, self.delayed = self.delayed, []
        for _, callback, handle in pending:
            if not handle.cancelled:
                callback()

    async def tick(self) -> None:
        for _, callback, _ in self.active_periodic:
            await callback()


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[tuple[NotificationKind, str, str | None]] = []

    def notify(self, kind: NotificationKind, title: str, message: str | None = None) -> None:
        self.messages.append((kind, title, message))

    @property
    def kinds(self) -> list[NotificationKind]:
        return [kind for kind, _, _ in self.messages]


Responder = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


class MockApi:
    """Canned API behind httpx.MockTransport. Records every request it receives."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], list[Responder]] = {}

    def add(
        self, method: str, path: str, status: int = 200, json: Any = None, text: str | None = None
    ) -> None:
        if text is not None:
            response = partial(httpx.Response, status, text=text)
        else:
            body = {"success": True} if json is None else json
            response = partial(httpx.Response, status, json=body)
        self._routes.setdefault((method, path), []).append(lambda request: response())

    def hold(self, method: str, path: str, status: int = 200, json: Any = None) -> asyncio.Event:
        """Answer only once the returned event is set."""
        gate = asyncio.Event()
        body = {"success": True} if json is None else json

        async def held(request: httpx.Request) -> httpx.Response:
            await gate.wait()
            return httpx.Response(status, json=body)

        self._routes.setdefault((method, path), []).append(held)
        return gate

    async def wait_for(self, method: str, path: str) -> None:
        while not self.calls(method, path):
            await asyncio.sleep(0)

    def fail(self, method: str, path: str, exc: type[httpx.RequestError] = httpx.ConnectError) -> None:
        def raise_error(request: httpx.Request) -> httpx.Response:
            raise exc("connection refused", request=request)

        self._routes.setdefault((method, path), []).append(raise_error)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def __call__(self, request: httpx.Request) -> httpx.Response | Awaitable[httpx.Response]:
        self.requests.append(request)
        responders = self._routes.get((request.method, request.url.path))
        if not responders:
            return httpx.Response(404, json={"success": False, "message": "Route inconnue"})
        # Responders are consumed in order; the last one keeps answering
        responder = responders.pop(0) if len(responders) > 1 else responders[0]
        return responder(request)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        API_BASE_URL=BASE_URL,
        STORE_PATH="/tmp/eagle_test_session.json",
        MAX_RETRIES=1,
        BACKOFF_FACTOR=0.01,
    )


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def navigator() -> HistoryNavigator:
    return HistoryNavigator()


@pytest.fixture
def events() -> InteractionEvents:
    return InteractionEvents()


@pytest.fixture
def api() -> MockApi:
    return MockApi()


@pytest.fixture
def http_client(api) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(api))


@pytest.fixture
def manager(
    store, http_client, notifier, navigator, scheduler, events, settings, clock
) -> SessionManager:
    return SessionManager(
        store=store,
        http_client=http_client,
        notifier=notifier,
        navigator=navigator,
        scheduler=scheduler,
        events=events,
        settings=settings,
        clock=clock,
    )


@pytest.fixture
def authed(manager) -> SessionManager:
    manager.set_auth("tok123", {"id": 7, "name": "Jane"})
    return manager

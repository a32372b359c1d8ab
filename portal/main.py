from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

import httpx

from portal.clients.http_client import close_http_client, create_http_client
from portal.clients.session_manager import SessionManager
from portal.clients.store import JsonFileStore, KeyValueStore
from portal.config import Settings
from portal.core.clock import Clock, SystemClock
from portal.core.events import InteractionEvents
from portal.core.logging import setup_logging
from portal.core.scheduler import AsyncioScheduler, Scheduler
from portal.services.auth_client import AuthClient
from portal.services.contact_client import ContactClient
from portal.services.employees_client import EmployeesClient
from portal.services.navigator import HistoryNavigator, Navigator
from portal.services.notifier import LogNotifier, Notifier
from portal.services.submissions_client import SubmissionsClient


@dataclass
class Portal:
    """One running page: a single session manager and the clients that share it."""

    settings: Settings
    http_client: httpx.AsyncClient
    events: InteractionEvents
    session: SessionManager
    auth: AuthClient
    employees: EmployeesClient
    submissions: SubmissionsClient
    contact: ContactClient


def build_portal(
    settings: Settings,
    http_client: httpx.AsyncClient,
    store: KeyValueStore,
    notifier: Notifier,
    navigator: Navigator,
    scheduler: Scheduler,
    clock: Clock | None = None,
) -> Portal:
    events = InteractionEvents()
    session = SessionManager(
        store=store,
        http_client=http_client,
        notifier=notifier,
        navigator=navigator,
        scheduler=scheduler,
        events=events,
        settings=settings,
        clock=clock or SystemClock(),
    )
    return Portal(
        settings=settings,
        http_client=http_client,
        events=events,
        session=session,
        auth=AuthClient(
            client=http_client,
            settings=settings,
            session_manager=session,
            notifier=notifier,
            navigator=navigator,
            scheduler=scheduler,
        ),
        employees=EmployeesClient(session=session, settings=settings),
        submissions=SubmissionsClient(session=session, settings=settings),
        contact=ContactClient(client=http_client, settings=settings, notifier=notifier),
    )


@asynccontextmanager
async def create_portal(settings: Settings | None = None) -> AsyncIterator[Portal]:
    settings = settings or Settings()
    setup_logging(log_level=settings.LOG_LEVEL, debug=settings.DEBUG)
    http_client = create_http_client(settings)
    scheduler = AsyncioScheduler()
    portal = build_portal(
        settings=settings,
        http_client=http_client,
        store=JsonFileStore(settings.STORE_PATH),
        notifier=LogNotifier(),
        navigator=HistoryNavigator(),
        scheduler=scheduler,
    )
    portal.session.resume()
    try:
        yield portal
    finally:
        portal.session.stop_activity_tracking()
        portal.session.stop_token_check()
        await scheduler.aclose()
        await close_http_client(http_client)

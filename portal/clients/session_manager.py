from __future__ import annotations

from collections.abc import Mapping
from functools import partial
from typing import Any

import httpx
from pydantic import ValidationError

from portal.clients.store import KeyValueStore
from portal.config import Settings
from portal.core.clock import Clock, SystemClock
from portal.core.events import Handler, InteractionEvents
from portal.core.exceptions import SessionExpiredError, UnauthenticatedError
from portal.core.logging import get_logger
from portal.core.scheduler import Scheduler, TimerHandle
from portal.schemas.enums import NotificationKind, SessionState
from portal.schemas.responses import RefreshResponse, UserRecord
from portal.services.navigator import Navigator
from portal.services.notifier import Notifier

logger = get_logger(__name__)

INACTIVITY_TIMEOUT_MS = 60 * 60 * 1000
CHECK_INTERVAL_MS = 30 * 1000
REFRESH_BEFORE_EXPIRE_MS = 10 * 60 * 1000

TOKEN_KEY = "eagle_token"
USER_KEY = "eagle_user"
LAST_ACTIVITY_KEY = "eagle_last_activity"

ACTIVITY_EVENTS = ("mousedown", "keydown", "scroll", "touchstart", "click")


class SessionManager:
    """Owns the bearer token, the cached user and the inactivity/refresh timers.

    Credentials live in the key/value store so they survive a reload; the two
    timers (interaction listeners and the periodic token check) live in memory
    and exist only while a session is active. All authenticated API traffic
    goes through :meth:`fetch`.
    """

    def __init__(
        self,
        store: KeyValueStore,
        http_client: httpx.AsyncClient,
        notifier: Notifier,
        navigator: Navigator,
        scheduler: Scheduler,
        events: InteractionEvents,
        settings: Settings,
        clock: Clock | None = None,
    ) -> None:
        self._store = store
        self._client = http_client
        self._notifier = notifier
        self._navigator = navigator
        self._scheduler = scheduler
        self._events = events
        self._settings = settings
        self._clock = clock or SystemClock()

        self._activity_listeners: list[tuple[str, Handler]] | None = None
        self._check_timer: TimerHandle | None = None

    # -- credentials --------------------------------------------------------

    def is_authenticated(self) -> bool:
        return bool(self._store.get(TOKEN_KEY) and self._store.get(USER_KEY))

    def get_token(self) -> str | None:
        return self._store.get(TOKEN_KEY)

    def get_user(self) -> UserRecord | None:
        raw = self._store.get(USER_KEY)
        if not raw:
            return None
        try:
            return UserRecord.model_validate_json(raw)
        except ValidationError:
            logger.warning("stored_user_unreadable", exc_info=True)
            return None

    def set_auth(self, token: str, user: UserRecord | Mapping[str, Any]) -> None:
        record = user if isinstance(user, UserRecord) else UserRecord.model_validate(user)
        self._store.set(TOKEN_KEY, token)
        self._store.set(USER_KEY, record.model_dump_json())
        self.update_last_activity()

        self.stop_activity_tracking()
        self.stop_token_check()
        self.start_activity_tracking()
        self.start_token_check()
        logger.info("session_started", user_id=record.id)

    def update_user(self, user: UserRecord) -> None:
        """Rewrite the cached user record of the current session."""
        if not self.is_authenticated():
            return
        self._store.set(USER_KEY, user.model_dump_json())

    def resume(self) -> None:
        """Restart the timers for credentials persisted by a previous page."""
        if not self.is_authenticated():
            return
        self.start_activity_tracking()
        self.start_token_check()
        logger.info("session_resumed", inactivity_ms=self.get_inactivity_time())

    @property
    def state(self) -> SessionState:
        if not self.is_authenticated():
            return SessionState.ANONYMOUS
        if self.is_token_expired():
            return SessionState.EXPIRED
        return SessionState.ACTIVE

    # -- inactivity ---------------------------------------------------------

    def update_last_activity(self) -> None:
        self._store.set(LAST_ACTIVITY_KEY, str(self._clock.now_ms()))

    def get_inactivity_time(self) -> int:
        raw = self._store.get(LAST_ACTIVITY_KEY)
        if not raw:
            return INACTIVITY_TIMEOUT_MS + 1
        try:
            last_activity = int(raw)
        except ValueError:
            logger.warning("last_activity_unreadable", value=raw)
            return INACTIVITY_TIMEOUT_MS + 1
        return self._clock.now_ms() - last_activity

    def is_token_expired(self) -> bool:
        return self.get_inactivity_time() > INACTIVITY_TIMEOUT_MS

    # -- timers -------------------------------------------------------------

    def start_activity_tracking(self) -> None:
        if self._activity_listeners is not None:
            return
        handler = self.update_last_activity
        for event in ACTIVITY_EVENTS:
            self._events.add_listener(event, handler)
        self._activity_listeners = [(event, handler) for event in ACTIVITY_EVENTS]

    def stop_activity_tracking(self) -> None:
        if self._activity_listeners is None:
            return
        for event, handler in self._activity_listeners:
            self._events.remove_listener(event, handler)
        self._activity_listeners = None

    def start_token_check(self) -> None:
        if self._check_timer is not None:
            return
        self._check_timer = self._scheduler.call_every(
            CHECK_INTERVAL_MS / 1000, self.check_and_refresh_token
        )

    def stop_token_check(self) -> None:
        if self._check_timer is None:
            return
        self._check_timer.cancel()
        self._check_timer = None

    @property
    def timers_running(self) -> bool:
        return self._activity_listeners is not None or self._check_timer is not None

    # -- refresh ------------------------------------------------------------

    async def check_and_refresh_token(self) -> None:
        if not self.is_authenticated():
            return

        inactivity = self.get_inactivity_time()
        if inactivity > INACTIVITY_TIMEOUT_MS:
            logger.info("session_expired", reason="inactivity", inactivity_ms=inactivity)
            self.logout(notify=True)
            return

        time_until_expire = INACTIVITY_TIMEOUT_MS - inactivity
        if time_until_expire < REFRESH_BEFORE_EXPIRE_MS:
            logger.info("token_refresh_due", time_until_expire_ms=time_until_expire)
            await self.refresh_token()

    async def refresh_token(self) -> None:
        """Exchange the current token for a new one.

        A 401 ends the session. Any other failure leaves the session untouched
        so the next periodic check can try again.
        """
        token = self.get_token()
        if not token:
            return

        try:
            resp = await self._client.post(
                self._settings.REFRESH_PATH,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {token}",
                },
            )
            # Session ended or was replaced while the request was in flight
            if self.get_token() != token:
                logger.info("token_refresh_discarded", status=resp.status_code)
                return
            if resp.status_code == 401:
                logger.info("session_expired", reason="refresh_rejected")
                self.logout(notify=True)
                return
            if not resp.is_success:
                logger.warning("token_refresh_failed", status=resp.status_code)
                return

            body = RefreshResponse.model_validate(resp.json())
        except (httpx.HTTPError, ValueError):
            logger.warning("token_refresh_failed", exc_info=True)
            return

        if body.success and body.token:
            self._store.set(TOKEN_KEY, body.token)
            self.update_last_activity()
            logger.info("token_refreshed")
        else:
            logger.warning("token_refresh_unexpected_body", success=body.success)

    # -- authenticated requests ---------------------------------------------

    async def fetch(
        self,
        url: str,
        method: str = "GET",
        *,
        headers: Mapping[str, str] | None = None,
        **options: Any,
    ) -> httpx.Response:
        """Send a request carrying the session's bearer token.

        ``options`` are passed through to ``httpx.AsyncClient.request``.
        The ``Authorization`` and ``Content-Type`` headers always win over
        caller-supplied ones.
        """
        token = self.get_token()
        if not token or not self.is_authenticated():
            raise UnauthenticatedError(message="Non authentifié")

        if self.is_token_expired():
            self.logout(notify=True)
            raise SessionExpiredError(message="Session expirée", detail="inactivity")

        merged = httpx.Headers(headers or {})
        merged["Authorization"] = f"Bearer {token}"
        merged["Content-Type"] = "application/json"

        try:
            resp = await self._client.request(method, url, headers=merged, **options)
        except httpx.RequestError as exc:
            logger.error(
                "authenticated_request_failed", method=method, url=url, error=str(exc)
            )
            raise

        still_current = self.get_token() == token

        if resp.status_code == 401:
            logger.info("session_expired", reason="request_rejected", url=url)
            if still_current:
                self.logout(notify=True)
            raise SessionExpiredError(message="Session expirée", detail="401")

        if resp.is_success and still_current:
            self.update_last_activity()

        return resp

    # -- teardown and guards ------------------------------------------------

    def logout(self, notify: bool = True) -> None:
        had_session = (
            self.timers_running
            or self._store.get(TOKEN_KEY) is not None
            or self._store.get(USER_KEY) is not None
        )

        self._store.remove(TOKEN_KEY)
        self._store.remove(USER_KEY)
        self._store.remove(LAST_ACTIVITY_KEY)
        self.stop_activity_tracking()
        self.stop_token_check()

        if not had_session:
            return

        logger.info("session_ended", notified=notify)
        if notify:
            self._notifier.notify(
                NotificationKind.INFO, "Session expirée", "Veuillez vous reconnecter."
            )
        self._navigator.go_to(self._settings.LOGIN_ROUTE)

    def require_auth(self) -> bool:
        """Guard for protected pages."""
        if not self.is_authenticated():
            self._notifier.notify(
                NotificationKind.WARNING, "Accès refusé", "Veuillez vous connecter."
            )
            self._scheduler.call_later(
                self._settings.ACCESS_DENIED_REDIRECT_DELAY,
                partial(self._navigator.go_to, self._settings.LOGIN_ROUTE),
            )
            return False

        if self.is_token_expired():
            self.logout(notify=True)
            return False

        return True

    def redirect_if_authenticated(self) -> bool:
        """Guard for the login page."""
        if self.is_authenticated() and not self.is_token_expired():
            self._notifier.notify(NotificationKind.INFO, "Déjà connecté", "Redirection...")
            self._scheduler.call_later(
                self._settings.ALREADY_CONNECTED_REDIRECT_DELAY,
                partial(self._navigator.go_to, self._settings.DASHBOARD_ROUTE),
            )
            return True
        return False

from __future__ import annotations

import re
from functools import partial

import httpx
from pydantic import ValidationError

from portal.clients.session_manager import SessionManager
from portal.config import Settings
from portal.core.exceptions import InvalidInputError, LoginError
from portal.core.logging import get_logger
from portal.core.scheduler import Scheduler
from portal.schemas.enums import NotificationKind
from portal.schemas.requests import EMAIL_PATTERN, LoginRequest
from portal.schemas.responses import LoginResponse, UserRecord
from portal.services.navigator import Navigator
from portal.services.notifier import Notifier

logger = get_logger(__name__)

_EMAIL_RE = re.compile(EMAIL_PATTERN)


class AuthClient:
    """Handles portal login: input checks, credential POST, session hand-off."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: Settings,
        session_manager: SessionManager,
        notifier: Notifier,
        navigator: Navigator,
        scheduler: Scheduler,
    ) -> None:
        self._client = client
        self._settings = settings
        self._session = session_manager
        self._notifier = notifier
        self._navigator = navigator
        self._scheduler = scheduler

    def on_login_page(self) -> bool:
        """Send an already connected user straight to the dashboard."""
        return self._session.redirect_if_authenticated()

    async def login(self, email: str, password: str) -> UserRecord:
        """Log in and start the session. Raises LoginError on any failure."""
        request = self._validate(email.strip(), password)

        try:
            resp = await self._client.post(
                self._settings.LOGIN_PATH,
                json=request.model_dump(),
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as exc:
            logger.error("login_request_failed", email=request.email, error=str(exc))
            self._notifier.notify(
                NotificationKind.ERROR,
                "Erreur de connexion",
                "Impossible de contacter le serveur. Vérifiez votre connexion.",
            )
            raise LoginError(
                message="Impossible de contacter le serveur", detail=str(exc)
            ) from exc

        try:
            body = LoginResponse.model_validate(resp.json())
        except ValueError:
            # Gateway error pages and other non-JSON replies
            logger.warning("login_response_unreadable", status=resp.status_code)
            body = LoginResponse()

        if not (resp.is_success and body.success and body.token and body.user):
            message = body.message or "Email ou mot de passe incorrect."
            logger.warning("login_rejected", email=request.email, status=resp.status_code)
            self._notifier.notify(NotificationKind.ERROR, "Échec de connexion", message)
            raise LoginError(message=message, detail=f"status={resp.status_code}")

        self._notifier.notify(
            NotificationKind.SUCCESS, "Connexion réussie", f"Bienvenue {body.user.name} !"
        )
        self._session.set_auth(body.token, body.user)
        logger.info("login_success", user_id=body.user.id)

        self._scheduler.call_later(
            self._settings.LOGIN_REDIRECT_DELAY,
            partial(self._navigator.go_to, body.redirect or self._settings.DASHBOARD_ROUTE),
        )
        return body.user

    def _validate(self, email: str, password: str) -> LoginRequest:
        if not email or not password:
            self._notifier.notify(
                NotificationKind.WARNING,
                "Champs incomplets",
                "Veuillez remplir tous les champs.",
            )
            raise InvalidInputError(message="Champs incomplets")

        if not _EMAIL_RE.match(email):
            self._notifier.notify(
                NotificationKind.ERROR,
                "Email invalide",
                "Veuillez entrer une adresse email valide.",
            )
            raise InvalidInputError(message="Email invalide", detail=email)

        try:
            return LoginRequest(email=email, password=password)
        except ValidationError as exc:
            raise InvalidInputError(message="Identifiants invalides", detail=str(exc)) from exc

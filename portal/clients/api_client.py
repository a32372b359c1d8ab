from __future__ import annotations

from typing import Any

import httpx

from portal.clients.session_manager import SessionManager
from portal.config import Settings
from portal.core.exceptions import ApiError
from portal.core.logging import get_logger
from portal.utils.retry import with_retry

logger = get_logger(__name__)


class PortalApiClient:
    """Base for clients of the authenticated ``/api`` endpoints.

    Every endpoint answers with an envelope ``{"success": bool, "message"?: str, ...}``.
    """

    def __init__(self, session: SessionManager, settings: Settings) -> None:
        self._session = session
        self._settings = settings

    async def _call(
        self,
        method: str,
        path: str,
        fallback_message: str,
        json: Any = None,
    ) -> dict[str, Any]:
        options: dict[str, Any] = {}
        if json is not None:
            options["json"] = json
        resp = await self._session.fetch(f"/api{path}", method, **options)
        return self._unwrap(resp, fallback_message)

    @staticmethod
    def _unwrap(resp: httpx.Response, fallback_message: str) -> dict[str, Any]:
        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not resp.is_success or not data.get("success"):
            message = data.get("message") or fallback_message
            logger.warning(
                "api_call_failed",
                url=str(resp.request.url),
                status=resp.status_code,
                message=message,
            )
            raise ApiError(message=message, detail=resp.text[:200], status_code=resp.status_code)
        return data

    async def _read(self, path: str, fallback_message: str) -> dict[str, Any]:
        """GET, retrying transport errors."""
        retrying = with_retry(self._settings.MAX_RETRIES, self._settings.BACKOFF_FACTOR)
        return await retrying(self._call)("GET", path, fallback_message)

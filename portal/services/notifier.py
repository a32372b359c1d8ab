from __future__ import annotations

from typing import Protocol

from portal.core.logging import get_logger
from portal.schemas.enums import NotificationKind

logger = get_logger(__name__)

# Display time per kind in ms, as the portal's toast container uses them
DISPLAY_DURATIONS_MS: dict[NotificationKind, int] = {
    NotificationKind.SUCCESS: 5000,
    NotificationKind.ERROR: 7000,
    NotificationKind.WARNING: 6000,
    NotificationKind.INFO: 5000,
    NotificationKind.NEUTRAL: 5000,
}


class Notifier(Protocol):
    def notify(self, kind: NotificationKind, title: str, message: str | None = None) -> None: ...


class LogNotifier:
    """Fire-and-forget notifier that emits each toast as a structured log record."""

    def notify(self, kind: NotificationKind, title: str, message: str | None = None) -> None:
        kind = NotificationKind(kind)
        log = logger.warning if kind in (NotificationKind.ERROR, NotificationKind.WARNING) else logger.info
        log(
            "notification",
            kind=kind.value,
            title=title,
            message=message,
            duration_ms=DISPLAY_DURATIONS_MS[kind],
        )

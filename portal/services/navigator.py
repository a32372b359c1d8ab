from __future__ import annotations

from typing import Protocol

from portal.core.logging import get_logger

logger = get_logger(__name__)


class Navigator(Protocol):
    def go_to(self, route: str) -> None: ...


class HistoryNavigator:
    """Keeps the current route and every route visited, in order."""

    def __init__(self, start: str | None = None) -> None:
        self.current: str | None = start
        self.history: list[str] = []

    def go_to(self, route: str) -> None:
        logger.info("navigate", route=route, previous=self.current)
        self.current = route
        self.history.append(route)

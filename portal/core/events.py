from __future__ import annotations

from collections.abc import Callable

from portal.core.logging import get_logger

logger = get_logger(__name__)

Handler = Callable[[], None]


class InteractionEvents:
    """Listener registry for user interaction events (the page's document)."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Handler]] = {}

    def add_listener(self, event: str, handler: Handler) -> None:
        self._listeners.setdefault(event, []).append(handler)

    def remove_listener(self, event: str, handler: Handler) -> None:
        handlers = self._listeners.get(event)
        if not handlers:
            return
        try:
            handlers.remove(handler)
        except ValueError:
            return
        if not handlers:
            del self._listeners[event]

    def listener_count(self, event: str | None = None) -> int:
        if event is not None:
            return len(self._listeners.get(event, []))
        return sum(len(handlers) for handlers in self._listeners.values())

    def dispatch(self, event: str) -> None:
        # Copy so a handler may deregister itself mid-dispatch
        for handler in list(self._listeners.get(event, [])):
            handler()

from __future__ import annotations

from portal.core.events import InteractionEvents


class TestInteractionEvents:
    def test_dispatch_calls_handlers_for_event_only(self):
        events = InteractionEvents()
        seen = []
        events.add_listener("click", lambda: seen.append("click"))
        events.add_listener("keydown", lambda: seen.append("keydown"))
        events.dispatch("click")
        assert seen == ["click"]

    def test_remove_listener(self):
        events = InteractionEvents()
        seen = []

        def handler():
            seen.append(1)

        events.add_listener("scroll", handler)
        events.remove_listener("scroll", handler)
        events.dispatch("scroll")
        assert seen == []
        assert events.listener_count() == 0

    def test_remove_unknown_listener_is_noop(self):
        events = InteractionEvents()
        events.add_listener("click", lambda: None)
        events.remove_listener("click", lambda: None)
        events.remove_listener("touchstart", lambda: None)
        assert events.listener_count("click") == 1

    def test_handler_may_remove_itself(self):
        events = InteractionEvents()
        calls = []

        def once():
            calls.append(1)
            events.remove_listener("click", once)

        events.add_listener("click", once)
        events.dispatch("click")
        events.dispatch("click")
        assert calls == [1]

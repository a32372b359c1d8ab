from __future__ import annotations

from portal.core.logging import redact_secrets
from portal.schemas.enums import NotificationKind
from portal.services.navigator import HistoryNavigator
from portal.services.notifier import DISPLAY_DURATIONS_MS, LogNotifier


class TestRedactSecrets:
    def test_masks_secret_keys(self):
        event = {"event": "login", "token": "abc", "password": "pw", "email": "a@b.c"}
        result = redact_secrets(None, "info", event)
        assert result == {"event": "login", "token": "***", "password": "***", "email": "a@b.c"}

    def test_keeps_none(self):
        assert redact_secrets(None, "info", {"token": None}) == {"token": None}


class TestNotifierAndNavigator:
    def test_durations_cover_every_kind(self):
        assert set(DISPLAY_DURATIONS_MS) == set(NotificationKind)
        assert DISPLAY_DURATIONS_MS[NotificationKind.ERROR] == 7000

    def test_log_notifier_accepts_raw_kind(self):
        LogNotifier().notify("warning", "Accès refusé", "Veuillez vous connecter.")

    def test_history_navigator(self):
        nav = HistoryNavigator(start="index.html")
        nav.go_to("login.html")
        nav.go_to("dashboard.html")
        assert nav.current == "dashboard.html"
        assert nav.history == ["login.html", "dashboard.html"]

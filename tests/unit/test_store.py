from __future__ import annotations

import json

from portal.clients.store import JsonFileStore, MemoryStore


class TestMemoryStore:
    def test_set_get_remove(self):
        store = MemoryStore()
        store.set("k", "v")
        assert store.get("k") == "v"
        store.remove("k")
        assert store.get("k") is None

    def test_remove_missing_key(self):
        store = MemoryStore({"a": "1"})
        store.remove("missing")
        assert store.keys() == ["a"]


class TestJsonFileStore:
    def test_survives_reload(self, tmp_path):
        path = tmp_path / "session.json"
        JsonFileStore(path).set("eagle_token", "abc")
        assert JsonFileStore(path).get("eagle_token") == "abc"

    def test_remove_persists(self, tmp_path):
        path = tmp_path / "session.json"
        store = JsonFileStore(path)
        store.set("a", "1")
        store.set("b", "2")
        store.remove("a")
        assert json.loads(path.read_text(encoding="utf-8")) == {"b": "2"}

    def test_missing_file_is_empty(self, tmp_path):
        store = JsonFileStore(tmp_path / "nested" / "session.json")
        assert store.keys() == []
        store.set("a", "1")
        assert (tmp_path / "nested" / "session.json").exists()

    def test_corrupt_file_is_empty(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{oops", encoding="utf-8")
        assert JsonFileStore(path).keys() == []

    def test_non_object_file_is_empty(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert JsonFileStore(path).get("0") is None

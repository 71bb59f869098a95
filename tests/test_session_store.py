"""
Tests for the session stores.
"""

from __future__ import annotations

import json

from launchpad.shared.infrastructure.storage.session_store import (
    AUTH_KEYS,
    InMemorySessionStore,
    JsonFileSessionStore,
    SessionKey,
)


class TestInMemorySessionStore:
    def test_get_set_and_defaults(self) -> None:
        store = InMemorySessionStore()

        assert store.get(SessionKey.LANGUAGE) is None
        assert store.get(SessionKey.LANGUAGE, "en") == "en"
        assert store.get_bool(SessionKey.IS_LOGGED_IN) is False

        store.set(SessionKey.IS_LOGGED_IN, True)
        assert store.get_bool(SessionKey.IS_LOGGED_IN) is True

    def test_get_str_ignores_empty_and_non_string_values(self) -> None:
        store = InMemorySessionStore({SessionKey.ACCESS_TOKEN: "", SessionKey.REFRESH_TOKEN: 12})

        assert store.get_str(SessionKey.ACCESS_TOKEN) is None
        assert store.get_str(SessionKey.REFRESH_TOKEN) is None

    def test_remove_auth_keys_keeps_other_flags(self) -> None:
        store = InMemorySessionStore({
            SessionKey.ACCESS_TOKEN: "a",
            SessionKey.REFRESH_TOKEN: "r",
            SessionKey.IS_LOGGED_IN: True,
            SessionKey.IS_ONBOARDING_COMPLETED: True,
            SessionKey.LANGUAGE: "de",
        })

        store.remove(AUTH_KEYS)

        assert store.snapshot() == {"isOnboardingCompleted": True, "language": "de"}

    def test_plain_string_keys_are_accepted(self) -> None:
        store = InMemorySessionStore()

        store.set("language", "fr")

        assert store.get(SessionKey.LANGUAGE) == "fr"


class TestJsonFileSessionStore:
    def test_values_survive_reopen(self, tmp_path) -> None:
        path = tmp_path / "state" / "session.json"
        store = JsonFileSessionStore(path)
        store.open()
        store.set(SessionKey.ACCESS_TOKEN, "token")
        store.set(SessionKey.IS_ONBOARDING_COMPLETED, True)

        reopened = JsonFileSessionStore(path)
        reopened.open()

        assert reopened.get(SessionKey.ACCESS_TOKEN) == "token"
        assert reopened.get_bool(SessionKey.IS_ONBOARDING_COMPLETED) is True

    def test_nothing_is_loaded_before_open(self, tmp_path) -> None:
        path = tmp_path / "session.json"
        path.write_text(json.dumps({"language": "de"}), encoding="utf-8")

        store = JsonFileSessionStore(path)

        assert store.get(SessionKey.LANGUAGE) is None
        store.open()
        assert store.get(SessionKey.LANGUAGE) == "de"

    def test_remove_is_persisted_in_one_write(self, tmp_path) -> None:
        path = tmp_path / "session.json"
        store = JsonFileSessionStore(path)
        store.open()
        store.set(SessionKey.ACCESS_TOKEN, "a")
        store.set(SessionKey.IS_LOGGED_IN, True)

        store.remove(AUTH_KEYS)

        assert json.loads(path.read_text(encoding="utf-8")) == {}

    def test_corrupt_file_starts_empty(self, tmp_path) -> None:
        path = tmp_path / "session.json"
        path.write_text("{not json", encoding="utf-8")
        store = JsonFileSessionStore(path)

        store.open()

        assert store.snapshot() == {}

    def test_non_object_document_starts_empty(self, tmp_path) -> None:
        path = tmp_path / "session.json"
        path.write_text("[1, 2]", encoding="utf-8")
        store = JsonFileSessionStore(path)

        store.open()

        assert store.snapshot() == {}

    def test_unknown_keys_are_dropped(self, tmp_path) -> None:
        path = tmp_path / "session.json"
        path.write_text(json.dumps({"language": "en", "legacyFlag": 1}), encoding="utf-8")
        store = JsonFileSessionStore(path)

        store.open()

        assert store.snapshot() == {"language": "en"}

    def test_no_temp_files_left_behind(self, tmp_path) -> None:
        store = JsonFileSessionStore(tmp_path / "session.json")
        store.open()

        store.set(SessionKey.LANGUAGE, "en")
        store.clear()

        assert [p.name for p in tmp_path.iterdir()] == ["session.json"]

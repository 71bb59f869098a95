"""Locale preference stored in the session store."""

from __future__ import annotations

from launchpad.shared.infrastructure.storage.session_store import SessionKey, SessionStore

DEFAULT_LANGUAGE = "en"


class LocaleRepository:
    def __init__(self, store: SessionStore):
        self._store = store

    def get_current_locale(self) -> str:
        return self._store.get_str(SessionKey.LANGUAGE) or DEFAULT_LANGUAGE

    def set_current_locale(self, language: str) -> None:
        language = language.strip()
        if not language:
            raise ValueError("Language code must not be empty")
        self._store.set(SessionKey.LANGUAGE, language)

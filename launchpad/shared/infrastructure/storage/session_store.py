"""Persisted key-value store for session flags and tokens."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)


class SessionKey(str, Enum):
    """The fixed set of values the session store holds."""
    ACCESS_TOKEN = "accessToken"
    REFRESH_TOKEN = "refreshToken"
    IS_ONBOARDING_COMPLETED = "isOnboardingCompleted"
    IS_LOGGED_IN = "isLoggedIn"
    REMEMBER_ME = "rememberMe"
    LANGUAGE = "language"


# Keys cleared together on logout or when a refresh fails
AUTH_KEYS = frozenset({
    SessionKey.ACCESS_TOKEN,
    SessionKey.REFRESH_TOKEN,
    SessionKey.IS_LOGGED_IN,
})


class SessionStore(ABC):
    """Key-value capability shared by the request pipeline and navigation."""

    @abstractmethod
    def get(self, key: SessionKey, default: Any = None) -> Any:
        ...

    @abstractmethod
    def set(self, key: SessionKey, value: Any) -> None:
        ...

    @abstractmethod
    def remove(self, keys: Iterable[SessionKey]) -> None:
        """Delete all ``keys`` in one step."""
        ...

    @abstractmethod
    def clear(self) -> None:
        ...

    def open(self) -> None:
        """Load persisted values; called once by the startup sequence."""

    def get_bool(self, key: SessionKey) -> bool:
        return bool(self.get(key, False))

    def get_str(self, key: SessionKey) -> Optional[str]:
        value = self.get(key)
        return value if isinstance(value, str) and value else None


class InMemorySessionStore(SessionStore):
    """Non-persistent store, used for tests and web sessions."""

    def __init__(self, initial: Optional[Dict[SessionKey, Any]] = None) -> None:
        self._values: Dict[SessionKey, Any] = dict(initial or {})

    def get(self, key: SessionKey, default: Any = None) -> Any:
        return self._values.get(SessionKey(key), default)

    def set(self, key: SessionKey, value: Any) -> None:
        self._values[SessionKey(key)] = value

    def remove(self, keys: Iterable[SessionKey]) -> None:
        for key in keys:
            self._values.pop(SessionKey(key), None)

    def clear(self) -> None:
        self._values.clear()

    def snapshot(self) -> Dict[str, Any]:
        return {key.value: value for key, value in self._values.items()}


class JsonFileSessionStore(InMemorySessionStore):
    """Session store persisted as a JSON document.

    Every mutation rewrites the file through a temp file and ``os.replace``,
    so a crash leaves either the old or the new document on disk.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__()

    def open(self) -> None:
        self._values = self._load()
        logger.debug(f"Session store opened from {self.path} ({len(self._values)} keys)")

    def _load(self) -> Dict[SessionKey, Any]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Session file {self.path} unreadable, starting empty: {e}")
            return {}
        if not isinstance(raw, dict):
            logger.warning(f"Session file {self.path} is not an object, starting empty")
            return {}

        values: Dict[SessionKey, Any] = {}
        for name, value in raw.items():
            try:
                values[SessionKey(name)] = value
            except ValueError:
                logger.debug(f"Ignoring unknown session key '{name}'")
        return values

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".session-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self.snapshot(), f, indent=2)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def set(self, key: SessionKey, value: Any) -> None:
        super().set(key, value)
        self._flush()

    def remove(self, keys: Iterable[SessionKey]) -> None:
        super().remove(keys)
        self._flush()

    def clear(self) -> None:
        super().clear()
        self._flush()

from .session_store import AUTH_KEYS, InMemorySessionStore, JsonFileSessionStore, SessionKey, SessionStore

__all__ = ["AUTH_KEYS", "InMemorySessionStore", "JsonFileSessionStore", "SessionKey", "SessionStore"]

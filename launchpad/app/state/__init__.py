"""FletXr Reactive State Management for the app shell.

- AppState: reactive mirrors of navigation, startup and session state
- Store: service locator for accessing state from any view
"""

from .app_state import AppState
from .store import Store

__all__ = ["AppState", "Store"]

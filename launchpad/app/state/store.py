"""Global State Store - Service Locator Pattern.

Gives Flet views one place to reach the reactive shell state and the wired
services. Core components never read from here; they get their collaborators
injected through ``build_services``.
"""

from __future__ import annotations

from typing import Optional

from .app_state import AppState
from launchpad.app.container import Services


class Store:
    """Global state store for the Flet application.

    Usage:
        # During app initialization
        Store.initialize(services)

        # In any view
        store = Store.get()
        store.app.status_text.listen(...)
    """

    _instance: Optional['Store'] = None

    def __init__(self, services: Services) -> None:
        """Initialize store.

        Note: Do not call directly. Use Store.initialize() instead.
        """
        self.services = services
        self.app = AppState(services.event_bus, services.navigation)

    @classmethod
    def initialize(cls, services: Services) -> 'Store':
        """Initialize the global store instance.

        Raises:
            RuntimeError: If store is already initialized
        """
        if cls._instance is not None:
            raise RuntimeError("Store already initialized!")

        cls._instance = cls(services)
        return cls._instance

    @classmethod
    def get(cls) -> 'Store':
        """Get the global store instance.

        Raises:
            RuntimeError: If store has not been initialized
        """
        if cls._instance is None:
            raise RuntimeError("Store not initialized! Call Store.initialize() first.")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the store instance (page disconnect, tests)."""
        if cls._instance is not None:
            cls._instance.app.dispose()
        cls._instance = None

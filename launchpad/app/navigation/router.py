"""Route table and the redirect hook binding navigation state to a Flet page."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional
from urllib.parse import urlparse

from launchpad.shared.core import events
from launchpad.shared.core.event_bus import EventBus, EventPayload
from launchpad.app.navigation.state import NavigationState, NavigationTarget

logger = logging.getLogger(__name__)


class Routes:
    INITIAL = "/"
    SPLASH = "/splash"
    ONBOARDING = "/onboarding"

    LOGIN = "/login"
    REGISTRATION = "/login/registration"
    RESET_PASSWORD = "/login/reset-password"

    HOME = "/home"
    PROFILE = "/profile"

    PRODUCT_HOME = "/products"
    ADD_PRODUCT = "/products/add"
    UPDATE_PRODUCT = "/products/update"


# Only the initial-flow routes follow the navigation target automatically
REDIRECT_PATHS = frozenset({Routes.INITIAL, Routes.ONBOARDING, Routes.SPLASH})


def redirect(path: str, navigation: NavigationState) -> Optional[str]:
    """Redirect hook evaluated on every navigation attempt.

    Returns the current target's route for initial-flow paths, None otherwise.
    """
    if urlparse(path).path in REDIRECT_PATHS:
        return navigation.target.value
    return None


class AppRouter:
    """Keeps a Flet page's route in line with ``NavigationState``.

    The page is only used through ``route``, ``go()``, ``views``,
    ``update()`` and ``on_route_change``.
    """

    def __init__(
        self,
        page: Any,
        navigation: NavigationState,
        view_builder: Callable[[str], Any],
        event_bus: Optional[EventBus] = None,
    ):
        self.page = page
        self.navigation = navigation
        self.view_builder = view_builder
        self.event_bus = event_bus
        self._unsubscribe: Optional[Callable[[], None]] = None

    async def start(self) -> None:
        self.page.on_route_change = self._on_route_change
        self._unsubscribe = self.navigation.subscribe(self._on_target_changed)
        if self.event_bus is not None:
            await self.event_bus.subscribe(events.TOPIC_SESSION_EXPIRED, self._on_signed_out)
            await self.event_bus.subscribe(events.TOPIC_SESSION_LOGGED_OUT, self._on_signed_out)
            await self.event_bus.subscribe(events.TOPIC_SESSION_LOGGED_IN, self._on_signed_in)
        self.handle_route(self.page.route or Routes.INITIAL)

    async def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self.event_bus is not None:
            await self.event_bus.unsubscribe(events.TOPIC_SESSION_EXPIRED, self._on_signed_out)
            await self.event_bus.unsubscribe(events.TOPIC_SESSION_LOGGED_OUT, self._on_signed_out)
            await self.event_bus.unsubscribe(events.TOPIC_SESSION_LOGGED_IN, self._on_signed_in)

    def go(self, route: str) -> None:
        self.page.go(route)

    def handle_route(self, route: str) -> None:
        target = redirect(route, self.navigation)
        if target is not None and target != route:
            logger.info(f"Redirecting {route} -> {target}")
            self.go(target)
            return

        self.page.views.clear()
        self.page.views.append(self.view_builder(route))
        self.page.update()

    def _on_route_change(self, e: Any) -> None:
        self.handle_route(e.route)

    def _on_target_changed(self, target: NavigationTarget) -> None:
        # Re-run the redirect for the current page
        if urlparse(self.page.route or Routes.INITIAL).path in REDIRECT_PATHS:
            self.handle_route(self.page.route or Routes.INITIAL)

    async def _on_signed_out(self, payload: EventPayload) -> None:
        logger.info("Session ended, routing to login")
        self.go(Routes.LOGIN)

    async def _on_signed_in(self, payload: EventPayload) -> None:
        self.go(Routes.HOME)

"""Application Shell State Management.

Reactive mirrors of navigation, startup and session state for the Flet views,
built on FletXr primitives. Views ``listen()`` to these instead of reaching
into services.
"""

from __future__ import annotations

from typing import Callable, Optional

from fletx.core import RxBool, RxStr

from launchpad.shared.core import events
from launchpad.shared.core.event_bus import EventBus, EventPayload
from launchpad.app.navigation.state import NavigationState, NavigationTarget


class AppState:
    """Reactive state for the application shell.

    Subscribes to EventBus topics and the navigation state machine and keeps
    reactive properties current, which re-renders bound controls.
    """

    def __init__(self, event_bus: EventBus, navigation: NavigationState) -> None:
        """Initialize application state.

        Args:
            event_bus: The shared event bus
            navigation: Navigation state machine to mirror
        """
        self.bus = event_bus
        self.navigation = navigation

        # Navigation
        self.nav_target: RxStr = RxStr(navigation.target.value)

        # Startup
        self.is_ready: RxBool = RxBool(False)
        self.startup_failed: RxBool = RxBool(False)
        self.status_text: RxStr = RxStr("Starting...")

        # Session
        self.session_message: RxStr = RxStr("")

        self._started = False
        self._unsubscribe_navigation: Optional[Callable[[], None]] = None

    async def initialize(self) -> None:
        """Bind to EventBus topics and navigation changes. Idempotent."""
        if self._started:
            return

        await self.bus.subscribe(events.TOPIC_STATUS_TEXT, self._handle_status_text)
        await self.bus.subscribe(events.TOPIC_STARTUP_STARTED, self._handle_startup_started)
        await self.bus.subscribe(events.TOPIC_STARTUP_FAILED, self._handle_startup_failed)
        await self.bus.subscribe(events.TOPIC_STARTUP_SETTLED, self._handle_startup_settled)
        await self.bus.subscribe(events.TOPIC_SESSION_EXPIRED, self._handle_session_expired)
        self._unsubscribe_navigation = self.navigation.subscribe(self._handle_target)

        self._started = True

    def dispose(self) -> None:
        if self._unsubscribe_navigation is not None:
            self._unsubscribe_navigation()
            self._unsubscribe_navigation = None

    # --- Public Actions ---

    async def push_status(self, text: str) -> None:
        await self.bus.publish(events.TOPIC_STATUS_TEXT, events.create_status_text_event(text))

    # --- Handlers ---

    def _handle_target(self, target: NavigationTarget) -> None:
        self.nav_target.value = target.value

    async def _handle_status_text(self, payload: EventPayload) -> None:
        text = payload.get("text")
        if text:
            self.status_text.value = str(text)

    async def _handle_startup_started(self, payload: EventPayload) -> None:
        self.startup_failed.value = False
        attempt = payload.get("attempt", 1)
        if attempt > 1:
            self.status_text.value = f"Retrying (attempt {attempt})..."

    async def _handle_startup_failed(self, payload: EventPayload) -> None:
        self.startup_failed.value = True
        self.status_text.value = f"Startup failed: {payload.get('error', 'unknown error')}"

    async def _handle_startup_settled(self, payload: EventPayload) -> None:
        self.startup_failed.value = False
        self.is_ready.value = True
        self.status_text.value = "Ready"

    async def _handle_session_expired(self, payload: EventPayload) -> None:
        self.session_message.value = "Your session has expired. Please log in again."

"""Navigation State Machine.

Holds the single current Navigation Target the router redirects to while the
app is on one of the initial-flow routes. The target only moves after the
startup sequence has settled:

    initial --decide()--> splash --(splash delay)--> onboarding | login | home

Onboarding is shown once per fresh install: choosing it persists the
onboarding-completed flag. ``login`` and ``home`` are terminal for automatic
redirection.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, List

from launchpad.shared.infrastructure.storage.session_store import SessionKey, SessionStore

logger = logging.getLogger(__name__)

DEFAULT_SPLASH_DELAY = 0.5


class NavigationTarget(str, Enum):
    """Desired route, valued by its path."""
    INITIAL = "/"
    SPLASH = "/splash"
    ONBOARDING = "/onboarding"
    LOGIN = "/login"
    HOME = "/home"


Listener = Callable[[NavigationTarget], None]
Scheduler = Callable[[float, Callable[[], None]], Any]


def call_later(delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
    """Default one-shot timer on the running event loop."""
    return asyncio.get_running_loop().call_later(delay, callback)


class NavigationState:
    """Reactive holder of the current ``NavigationTarget``."""

    def __init__(
        self,
        store: SessionStore,
        *,
        splash_delay: float = DEFAULT_SPLASH_DELAY,
        scheduler: Scheduler = call_later,
    ) -> None:
        """Initialize navigation state.

        Args:
            store: Session store holding the onboarding and logged-in flags
            splash_delay: Seconds the splash target is held before deciding
            scheduler: One-shot timer factory ``(delay, callback)``
        """
        self._store = store
        self._splash_delay = splash_delay
        self._scheduler = scheduler
        self._target = NavigationTarget.INITIAL
        self._listeners: List[Listener] = []
        self._startup_settled = False

    @property
    def target(self) -> NavigationTarget:
        return self._target

    @property
    def startup_settled(self) -> bool:
        return self._startup_settled

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for target changes; returns the unsubscribe handle."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def on_startup_settled(self) -> None:
        """Signal from the startup sequence; only the first call has an effect."""
        if self._startup_settled:
            logger.debug("Startup already settled, ignoring repeated signal")
            return
        self._startup_settled = True
        self.decide()

    def decide(self) -> None:
        """Advance the target one step.

        Raises:
            RuntimeError: If called before startup has settled
        """
        if not self._startup_settled:
            raise RuntimeError("decide() called before startup settled")

        if self._target is NavigationTarget.INITIAL:
            self._set_target(NavigationTarget.SPLASH)
            self._scheduler(self._splash_delay, self.decide)
            return

        if not self._store.get_bool(SessionKey.IS_ONBOARDING_COMPLETED):
            self._set_target(NavigationTarget.ONBOARDING)
            self._store.set(SessionKey.IS_ONBOARDING_COMPLETED, True)
            return

        if self._store.get_bool(SessionKey.IS_LOGGED_IN):
            self._set_target(NavigationTarget.HOME)
        else:
            self._set_target(NavigationTarget.LOGIN)

    def _set_target(self, target: NavigationTarget) -> None:
        logger.info(f"Navigation target: {self._target.name.lower()} -> {target.name.lower()}")
        self._target = target
        for listener in list(self._listeners):
            try:
                listener(target)
            except Exception:
                logger.exception(f"Navigation listener {getattr(listener, '__name__', listener)} failed")

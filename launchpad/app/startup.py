"""Startup sequence gating the navigation state machine."""

from __future__ import annotations

import inspect
import logging
from typing import Awaitable, Callable, Optional, Sequence, Union

from launchpad.shared.core import events
from launchpad.shared.core.event_bus import EventBus, EventPayload
from launchpad.app.navigation.state import NavigationState

logger = logging.getLogger(__name__)

StartupStep = Callable[[], Union[None, Awaitable[None]]]


class AppStartup:
    """Runs the startup steps and settles navigation once they all succeed.

    A failed run leaves navigation at ``initial`` and records the error so the
    splash screen can offer a retry, which simply calls :meth:`run` again.
    """

    def __init__(
        self,
        steps: Sequence[StartupStep],
        navigation: NavigationState,
        event_bus: Optional[EventBus] = None,
    ):
        self.steps = list(steps)
        self.navigation = navigation
        self.event_bus = event_bus
        self.attempts = 0
        self.error: Optional[BaseException] = None

    @property
    def settled(self) -> bool:
        return self.navigation.startup_settled

    async def run(self) -> bool:
        """Run every step in order.

        Returns:
            True once startup has settled, False if a step raised
        """
        if self.settled:
            return True

        self.attempts += 1
        await self._publish(events.TOPIC_STARTUP_STARTED, events.create_startup_event("started", attempt=self.attempts))

        try:
            for step in self.steps:
                outcome = step()
                if inspect.isawaitable(outcome):
                    await outcome
        except Exception as exc:
            self.error = exc
            logger.exception(f"Startup attempt {self.attempts} failed")
            await self._publish(
                events.TOPIC_STARTUP_FAILED,
                events.create_startup_event("failed", error=str(exc) or exc.__class__.__name__, attempt=self.attempts),
            )
            return False

        self.error = None
        logger.info(f"Startup settled after {self.attempts} attempt(s)")
        self.navigation.on_startup_settled()
        await self._publish(events.TOPIC_STARTUP_SETTLED, events.create_startup_event("settled", attempt=self.attempts))
        return True

    async def retry(self) -> bool:
        return await self.run()

    async def _publish(self, topic: str, payload: EventPayload) -> None:
        if self.event_bus is not None:
            await self.event_bus.publish(topic, payload)

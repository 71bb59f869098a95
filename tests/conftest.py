from __future__ import annotations

import pytest

from launchpad.shared.core.event_bus import EventBus
from launchpad.shared.infrastructure.storage.session_store import InMemorySessionStore, SessionKey

from tests.fakes import FakeScheduler


@pytest.fixture
def store() -> InMemorySessionStore:
    """Returning user with an expired access token."""
    return InMemorySessionStore({
        SessionKey.ACCESS_TOKEN: "stale",
        SessionKey.REFRESH_TOKEN: "refresh-1",
        SessionKey.IS_LOGGED_IN: True,
        SessionKey.IS_ONBOARDING_COMPLETED: True,
    })


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()

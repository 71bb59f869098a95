"""Canonical event topics and payload builders for Launchpad."""

from __future__ import annotations

import time
from typing import Literal

from .event_bus import EventPayload

# Session lifecycle
TOPIC_SESSION_EXPIRED = "session.expired"
TOPIC_SESSION_LOGGED_IN = "session.logged_in"
TOPIC_SESSION_LOGGED_OUT = "session.logged_out"

# Startup lifecycle
TOPIC_STARTUP_STARTED = "startup.started"
TOPIC_STARTUP_SETTLED = "startup.settled"
TOPIC_STARTUP_FAILED = "startup.failed"

# Shell
TOPIC_NAVIGATION_CHANGED = "navigation.changed"
TOPIC_STATUS_TEXT = "status.text"


def create_session_expired_event(reason: str, path: str | None = None) -> EventPayload:
    """Create a session expired event.

    Args:
        reason: Why the session could not be refreshed
        path: Path of the request that triggered the refresh, if any
    """
    return {
        "reason": reason,
        "path": path,
        "ts": time.time(),
    }


def create_session_logged_in_event(remember_me: bool) -> EventPayload:
    return {"remember_me": remember_me, "ts": time.time()}


def create_session_logged_out_event() -> EventPayload:
    return {"ts": time.time()}


def create_startup_event(
    stage: Literal["started", "settled", "failed"],
    error: str | None = None,
    attempt: int = 1,
) -> EventPayload:
    """Create a startup lifecycle event."""
    event: EventPayload = {"stage": stage, "attempt": attempt}
    if error is not None:
        event["error"] = error
    return event


def create_navigation_changed_event(target: str) -> EventPayload:
    return {"target": target}


def create_status_text_event(text: str) -> EventPayload:
    """Create a status text update event."""
    return {"text": text}

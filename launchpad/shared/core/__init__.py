"""
Shared Core Module
==================

Event system, configuration, failures and results.
"""

# Event System
from .event_bus import EventBus, EventPayload
from . import events

# Errors
from .failures import FailureType, RequestFailure, TransportError
from .result import Error, Result, Success, async_guard, unwrap

__all__ = [
    "EventBus",
    "EventPayload",
    "events",
    "FailureType",
    "RequestFailure",
    "TransportError",
    "Error",
    "Result",
    "Success",
    "async_guard",
    "unwrap",
]

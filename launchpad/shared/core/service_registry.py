"""Service registry for cross-module access to initialized services."""

from __future__ import annotations

import atexit
import logging
from typing import Optional, TYPE_CHECKING, List, Callable

if TYPE_CHECKING:
    from launchpad.app.container import Services

logger = logging.getLogger(__name__)

# Global reference to the wired service container
_services: Optional["Services"] = None

# Global cleanup management
_cleanup_registered = False
_cleanup_handlers: List[Callable[[], None]] = []


def set_services(services: Optional["Services"]) -> None:
    """Set (or clear, with None) the global service container."""
    global _services
    _services = services


def get_services() -> Optional["Services"]:
    """Get the global service container, if the app has wired one."""
    return _services


def register_cleanup_handler(handler: Callable[[], None]) -> None:
    """Register a cleanup handler to be called on application exit."""
    global _cleanup_registered
    _cleanup_handlers.append(handler)
    if not _cleanup_registered:
        atexit.register(run_cleanup_handlers)
        _cleanup_registered = True
        logger.debug("Registered atexit cleanup handler")


def run_cleanup_handlers() -> None:
    """Run and forget all registered handlers; one failure does not stop the rest."""
    logger.info("Running application cleanup...")
    while _cleanup_handlers:
        handler = _cleanup_handlers.pop(0)
        try:
            handler()
        except Exception as e:
            logger.warning(f"Error in cleanup handler: {e}")
    logger.info("Application cleanup completed")

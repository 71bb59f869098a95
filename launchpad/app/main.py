"""Launchpad - Main application entry point."""

from __future__ import annotations

import asyncio
import logging
import logging.handlers

from dotenv import load_dotenv

import flet as ft
from launchpad.app.container import Services, build_services
from launchpad.app.navigation.router import AppRouter
from launchpad.app.navigation.state import NavigationTarget
from launchpad.app.state import Store
from launchpad.app.ui.theme import apply_theme
from launchpad.app.ui.views import build_view_factory
from launchpad.shared.core import events
from launchpad.shared.core.configuration import (
    PROJECT_ROOT,
    LoggingConfig,
    ValidationLevel,
    get_config,
    resolve_path,
)
from launchpad.shared.core.service_registry import register_cleanup_handler, set_services

# Load environment variables from .env file in project root
load_dotenv(dotenv_path=PROJECT_ROOT / ".env")

logger = logging.getLogger(__name__)


def configure_logging(settings: LoggingConfig) -> None:
    """Configure root logging.

    File handler: everything at the configured level to <log_dir>/launchpad.log.
    Console handler: only WARNING and ERROR.
    """
    logs_dir = resolve_path(settings.log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file_path = logs_dir / "launchpad.log"

    file_log_level = getattr(logging, settings.level.upper(), logging.DEBUG)

    root_logger = logging.getLogger()
    root_logger.setLevel(file_log_level)
    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(file_log_level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    ))
    root_logger.addHandler(console_handler)

    # Suppress verbose third-party library logs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("flet_controls").setLevel(logging.WARNING)
    logging.getLogger("flet_transport").setLevel(logging.WARNING)
    logging.getLogger("fletx.core.state").setLevel(logging.CRITICAL)  # Observer errors during shutdown

    logger.info(f"Logging configured: file={log_file_path}, console=WARNING+")


config = get_config(ValidationLevel.LENIENT)
configure_logging(config.logging)


def _close_services(services: Services) -> None:
    """Close the httpx clients from the atexit hook, outside the Flet loop."""
    asyncio.run(services.aclose())


async def start(page: ft.Page, store: Store) -> None:
    """Bind state and router, then run startup."""
    services = store.services

    await store.app.initialize()
    logger.info("AppState initialized")

    def publish_target(target: NavigationTarget) -> None:
        page.run_task(
            services.event_bus.publish,
            events.TOPIC_NAVIGATION_CHANGED,
            events.create_navigation_changed_event(target.value),
        )

    services.navigation.subscribe(publish_target)

    router = AppRouter(page, services.navigation, build_view_factory(page, store, page.go), services.event_bus)
    await router.start()
    logger.info("Router started")

    await store.app.push_status("Loading session...")
    if not await services.startup.run():
        logger.warning("Startup failed; waiting for retry from the splash screen")


def main(page: ft.Page) -> None:
    """Main Flet application entry point."""
    logger.info("Initializing Launchpad...")

    page.title = "Launchpad"
    apply_theme(page, config.ui.theme_mode)

    services = build_services(config)
    set_services(services)
    register_cleanup_handler(lambda: _close_services(services))

    Store.reset()
    store = Store.initialize(services)

    # Startup runs on the page's loop so httpx clients and futures share it
    page.run_task(start, page, store)

    logger.info("Application initialized successfully")


def run() -> None:
    if config.ui.flet_web_mode:
        logger.info(f"Starting Flet app in WEB mode on port {config.ui.flet_port}")
        ft.run(main, view=ft.AppView.WEB_BROWSER, port=config.ui.flet_port, host="127.0.0.1")
    else:
        logger.info("Starting Flet app in DESKTOP mode")
        ft.run(main, view=ft.AppView.FLET_APP)


if __name__ == "__main__":
    run()

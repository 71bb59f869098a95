"""Wiring of stores, transports, repositories and use cases."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

import httpx

from launchpad.shared.core.configuration import SystemConfig, resolve_path
from launchpad.shared.core.event_bus import EventBus
from launchpad.shared.domain.authentication.repository import AuthenticationRepository
from launchpad.shared.domain.locale.repository import LocaleRepository
from launchpad.shared.domain.products.repository import ProductRepository
from launchpad.shared.domain.use_cases import (
    CheckRememberMeUseCase,
    CreateProductUseCase,
    DeleteProductUseCase,
    GetCurrentLocaleUseCase,
    GetProductUseCase,
    LoginUseCase,
    LogoutUseCase,
    SaveRememberMeUseCase,
    SetCurrentLocaleUseCase,
    UpdateProductUseCase,
)
from launchpad.shared.infrastructure.network.auth_pipeline import AuthenticatedRequestPipeline, RefreshCycle
from launchpad.shared.infrastructure.network.rest_client import RestClient
from launchpad.shared.infrastructure.network.transport import HttpTransport
from launchpad.shared.infrastructure.storage.session_store import JsonFileSessionStore, SessionStore
from launchpad.app.navigation.state import NavigationState, Scheduler, call_later
from launchpad.app.startup import AppStartup, StartupStep

logger = logging.getLogger(__name__)


@dataclass
class UseCases:
    login: LoginUseCase
    logout: LogoutUseCase
    check_remember_me: CheckRememberMeUseCase
    save_remember_me: SaveRememberMeUseCase
    get_current_locale: GetCurrentLocaleUseCase
    set_current_locale: SetCurrentLocaleUseCase
    get_products: GetProductUseCase
    create_product: CreateProductUseCase
    update_product: UpdateProductUseCase
    delete_product: DeleteProductUseCase


@dataclass
class Services:
    config: SystemConfig
    event_bus: EventBus
    store: SessionStore
    transport: HttpTransport
    refresh_transport: HttpTransport
    pipeline: AuthenticatedRequestPipeline
    navigation: NavigationState
    startup: AppStartup
    auth_repository: AuthenticationRepository
    product_repository: ProductRepository
    locale_repository: LocaleRepository
    use_cases: UseCases

    async def aclose(self) -> None:
        await self.transport.aclose()
        await self.refresh_transport.aclose()
        logger.info("HTTP transports closed")


def build_services(
    config: SystemConfig,
    *,
    event_bus: Optional[EventBus] = None,
    store: Optional[SessionStore] = None,
    main_client: Optional[httpx.AsyncClient] = None,
    refresh_client: Optional[httpx.AsyncClient] = None,
    scheduler: Scheduler = call_later,
    extra_startup_steps: Optional[List[StartupStep]] = None,
) -> Services:
    """Build the full service graph from configuration.

    Args:
        config: Loaded system configuration
        event_bus: Shared bus; a new one is created when omitted
        store: Session store; defaults to the configured JSON file
        main_client: httpx client for API calls (tests pass mock transports)
        refresh_client: httpx client for the refresh call only
        scheduler: Timer factory for the splash delay
        extra_startup_steps: Steps appended after the built-in ones

    Returns:
        The wired services; nothing is opened or started yet
    """
    event_bus = event_bus or EventBus()
    store = store or JsonFileSessionStore(resolve_path(config.storage.session_file))

    def make_transport(name: str, client: Optional[httpx.AsyncClient]) -> HttpTransport:
        return HttpTransport(
            config.api.base_url,
            connect_timeout=config.api.connect_timeout,
            receive_timeout=config.api.receive_timeout,
            verify=config.api.verify_tls,
            client=client,
            name=name,
        )

    transport = make_transport("main", main_client)
    # Isolated instance: the refresh call must never pass through the pipeline
    refresh_transport = make_transport("refresh", refresh_client)

    pipeline = AuthenticatedRequestPipeline(
        transport,
        refresh_transport,
        store,
        cycle=RefreshCycle(),
        event_bus=event_bus,
        refresh_path=config.api.refresh_path,
    )
    rest_client = RestClient(pipeline)

    auth_repository = AuthenticationRepository(rest_client, store, event_bus)
    product_repository = ProductRepository(rest_client)
    locale_repository = LocaleRepository(store)

    use_cases = UseCases(
        login=LoginUseCase(auth_repository),
        logout=LogoutUseCase(auth_repository),
        check_remember_me=CheckRememberMeUseCase(auth_repository),
        save_remember_me=SaveRememberMeUseCase(auth_repository),
        get_current_locale=GetCurrentLocaleUseCase(locale_repository),
        set_current_locale=SetCurrentLocaleUseCase(locale_repository),
        get_products=GetProductUseCase(product_repository),
        create_product=CreateProductUseCase(product_repository),
        update_product=UpdateProductUseCase(product_repository),
        delete_product=DeleteProductUseCase(product_repository),
    )

    navigation = NavigationState(store, splash_delay=config.navigation.splash_delay, scheduler=scheduler)
    steps: List[StartupStep] = [store.open, _locale_loader(use_cases.get_current_locale)]
    steps.extend(extra_startup_steps or [])
    startup = AppStartup(steps, navigation, event_bus)

    return Services(
        config=config,
        event_bus=event_bus,
        store=store,
        transport=transport,
        refresh_transport=refresh_transport,
        pipeline=pipeline,
        navigation=navigation,
        startup=startup,
        auth_repository=auth_repository,
        product_repository=product_repository,
        locale_repository=locale_repository,
        use_cases=use_cases,
    )


def _locale_loader(get_locale: GetCurrentLocaleUseCase) -> Callable[[], None]:
    def load_locale() -> None:
        logger.info(f"Locale loaded: {get_locale()}")

    return load_locale

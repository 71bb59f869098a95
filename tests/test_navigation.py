"""
Tests for the navigation state machine, redirect hook and startup gating.

Coverage:
- Fresh install: initial -> splash -> onboarding, onboarding flag persisted
- Returning user: splash -> home when logged in, login otherwise
- Startup failure leaves the target at initial until a retry succeeds
- Router redirects initial-flow routes and follows target changes
"""

from __future__ import annotations

import pytest

from launchpad.app.navigation.router import AppRouter, Routes, redirect
from launchpad.app.navigation.state import DEFAULT_SPLASH_DELAY, NavigationState, NavigationTarget
from launchpad.app.startup import AppStartup
from launchpad.shared.core import events
from launchpad.shared.infrastructure.storage.session_store import InMemorySessionStore, SessionKey

from tests.fakes import FakePage, FakeScheduler, Recorder


def recorded(navigation: NavigationState) -> list:
    seen: list = []
    navigation.subscribe(seen.append)
    return seen


# ---------------------------------------------------------------------------
# NavigationState
# ---------------------------------------------------------------------------


class TestNavigationState:
    def test_starts_at_initial(self, scheduler) -> None:
        navigation = NavigationState(InMemorySessionStore(), scheduler=scheduler)

        assert navigation.target is NavigationTarget.INITIAL
        assert not navigation.startup_settled

    def test_fresh_install_goes_through_splash_to_onboarding(self, scheduler) -> None:
        store = InMemorySessionStore()
        navigation = NavigationState(store, scheduler=scheduler)
        seen = recorded(navigation)

        navigation.on_startup_settled()

        assert seen == [NavigationTarget.SPLASH]
        assert [delay for delay, _ in scheduler.pending] == [DEFAULT_SPLASH_DELAY]

        scheduler.fire()

        assert seen == [NavigationTarget.SPLASH, NavigationTarget.ONBOARDING]
        assert store.get(SessionKey.IS_ONBOARDING_COMPLETED) is True
        assert scheduler.pending == []

    def test_returning_logged_in_user_goes_home(self, scheduler) -> None:
        store = InMemorySessionStore({SessionKey.IS_ONBOARDING_COMPLETED: True, SessionKey.IS_LOGGED_IN: True})
        navigation = NavigationState(store, scheduler=scheduler)

        navigation.on_startup_settled()
        scheduler.fire()

        assert navigation.target is NavigationTarget.HOME

    def test_returning_logged_out_user_goes_to_login(self, scheduler) -> None:
        store = InMemorySessionStore({SessionKey.IS_ONBOARDING_COMPLETED: True})
        navigation = NavigationState(store, scheduler=scheduler)

        navigation.on_startup_settled()
        scheduler.fire()

        assert navigation.target is NavigationTarget.LOGIN

    def test_decide_after_onboarding_moves_on_to_login(self, scheduler) -> None:
        navigation = NavigationState(InMemorySessionStore(), scheduler=scheduler)
        navigation.on_startup_settled()
        scheduler.fire()

        navigation.decide()

        assert navigation.target is NavigationTarget.LOGIN

    def test_decide_before_startup_settled_raises(self, scheduler) -> None:
        navigation = NavigationState(InMemorySessionStore(), scheduler=scheduler)

        with pytest.raises(RuntimeError):
            navigation.decide()
        assert navigation.target is NavigationTarget.INITIAL

    def test_repeated_settle_signal_is_ignored(self, scheduler) -> None:
        navigation = NavigationState(InMemorySessionStore(), scheduler=scheduler)

        navigation.on_startup_settled()
        navigation.on_startup_settled()

        assert len(scheduler.pending) == 1
        assert navigation.target is NavigationTarget.SPLASH

    def test_configured_splash_delay_is_scheduled(self, scheduler) -> None:
        navigation = NavigationState(InMemorySessionStore(), splash_delay=1.25, scheduler=scheduler)

        navigation.on_startup_settled()

        assert scheduler.pending[0][0] == 1.25

    def test_failing_listener_does_not_block_others(self, scheduler) -> None:
        navigation = NavigationState(InMemorySessionStore(), scheduler=scheduler)

        def broken(target: NavigationTarget) -> None:
            raise RuntimeError("listener bug")

        navigation.subscribe(broken)
        seen = recorded(navigation)

        navigation.on_startup_settled()

        assert seen == [NavigationTarget.SPLASH]

    def test_unsubscribe_stops_notifications(self, scheduler) -> None:
        navigation = NavigationState(InMemorySessionStore(), scheduler=scheduler)
        seen: list = []
        unsubscribe = navigation.subscribe(seen.append)

        unsubscribe()
        navigation.on_startup_settled()

        assert seen == []


# ---------------------------------------------------------------------------
# Startup gating
# ---------------------------------------------------------------------------


class TestAppStartup:
    @pytest.mark.asyncio
    async def test_failed_startup_stays_at_initial(self, scheduler, event_bus) -> None:
        navigation = NavigationState(InMemorySessionStore(), scheduler=scheduler)

        def broken_step() -> None:
            raise OSError("disk unavailable")

        startup = AppStartup([broken_step], navigation, event_bus)
        failed = Recorder()
        await event_bus.subscribe(events.TOPIC_STARTUP_FAILED, failed)

        settled = await startup.run()
        await event_bus.wait_until_idle()

        assert settled is False
        assert navigation.target is NavigationTarget.INITIAL
        assert scheduler.pending == []
        assert isinstance(startup.error, OSError)
        assert failed.payloads[0]["error"] == "disk unavailable"

    @pytest.mark.asyncio
    async def test_retry_after_failure_settles(self, scheduler, event_bus) -> None:
        navigation = NavigationState(InMemorySessionStore(), scheduler=scheduler)
        attempts = []

        async def flaky_step() -> None:
            attempts.append(1)
            if len(attempts) == 1:
                raise ConnectionError("offline")

        startup = AppStartup([flaky_step], navigation, event_bus)
        settled_events = Recorder()
        await event_bus.subscribe(events.TOPIC_STARTUP_SETTLED, settled_events)

        assert await startup.run() is False
        assert await startup.retry() is True
        await event_bus.wait_until_idle()

        assert startup.attempts == 2
        assert startup.error is None
        assert navigation.target is NavigationTarget.SPLASH
        assert settled_events.payloads[0]["attempt"] == 2

    @pytest.mark.asyncio
    async def test_steps_run_in_order_and_sync_steps_are_supported(self, scheduler) -> None:
        navigation = NavigationState(InMemorySessionStore(), scheduler=scheduler)
        order = []

        async def first() -> None:
            order.append("first")

        startup = AppStartup([first, lambda: order.append("second")], navigation)

        assert await startup.run() is True
        assert order == ["first", "second"]
        assert startup.settled

    @pytest.mark.asyncio
    async def test_run_after_settle_does_nothing(self, scheduler) -> None:
        navigation = NavigationState(InMemorySessionStore(), scheduler=scheduler)
        calls = []
        startup = AppStartup([lambda: calls.append(1)], navigation)

        await startup.run()
        await startup.run()

        assert calls == [1]
        assert len(scheduler.pending) == 1


# ---------------------------------------------------------------------------
# Redirect hook and router
# ---------------------------------------------------------------------------


class TestRedirect:
    def test_initial_flow_paths_follow_the_target(self, scheduler) -> None:
        navigation = NavigationState(InMemorySessionStore(), scheduler=scheduler)
        navigation.on_startup_settled()

        for path in (Routes.INITIAL, Routes.SPLASH, Routes.ONBOARDING, "/splash?from=deeplink"):
            assert redirect(path, navigation) == Routes.SPLASH

    def test_other_paths_are_left_alone(self, scheduler) -> None:
        navigation = NavigationState(InMemorySessionStore(), scheduler=scheduler)

        assert redirect(Routes.LOGIN, navigation) is None
        assert redirect(Routes.HOME, navigation) is None
        assert redirect(Routes.ADD_PRODUCT, navigation) is None


class TestAppRouter:
    @pytest.mark.asyncio
    async def test_router_follows_the_initial_flow(self, scheduler) -> None:
        navigation = NavigationState(InMemorySessionStore(), scheduler=scheduler)
        page = FakePage()
        router = AppRouter(page, navigation, view_builder=lambda route: f"view:{route}")

        await router.start()
        assert page.views == ["view:/"]

        navigation.on_startup_settled()
        scheduler.fire()

        assert page.visited == [Routes.SPLASH, Routes.ONBOARDING]
        assert page.views == [f"view:{Routes.ONBOARDING}"]

    @pytest.mark.asyncio
    async def test_router_does_not_pull_user_off_authenticated_pages(self, scheduler) -> None:
        store = InMemorySessionStore({SessionKey.IS_ONBOARDING_COMPLETED: True})
        navigation = NavigationState(store, scheduler=scheduler)
        page = FakePage(route=Routes.PRODUCT_HOME)
        router = AppRouter(page, navigation, view_builder=lambda route: route)

        await router.start()
        navigation.on_startup_settled()
        scheduler.fire()

        assert page.visited == []
        assert page.views == [Routes.PRODUCT_HOME]

    @pytest.mark.asyncio
    async def test_session_expired_routes_to_login(self, scheduler, event_bus) -> None:
        navigation = NavigationState(InMemorySessionStore(), scheduler=scheduler)
        page = FakePage(route=Routes.HOME)
        router = AppRouter(page, navigation, view_builder=lambda route: route, event_bus=event_bus)
        await router.start()

        await event_bus.publish(events.TOPIC_SESSION_EXPIRED, events.create_session_expired_event("revoked"))
        await event_bus.wait_until_idle()

        assert page.route == Routes.LOGIN
        assert page.views == [Routes.LOGIN]

    @pytest.mark.asyncio
    async def test_login_routes_home(self, scheduler, event_bus) -> None:
        navigation = NavigationState(InMemorySessionStore(), scheduler=scheduler)
        page = FakePage(route=Routes.LOGIN)
        router = AppRouter(page, navigation, view_builder=lambda route: route, event_bus=event_bus)
        await router.start()

        await event_bus.publish(events.TOPIC_SESSION_LOGGED_IN, events.create_session_logged_in_event(False))
        await event_bus.wait_until_idle()

        assert page.route == Routes.HOME

    @pytest.mark.asyncio
    async def test_stop_detaches_from_navigation_and_bus(self, scheduler, event_bus) -> None:
        navigation = NavigationState(InMemorySessionStore(), scheduler=scheduler)
        page = FakePage()
        router = AppRouter(page, navigation, view_builder=lambda route: route, event_bus=event_bus)
        await router.start()

        await router.stop()
        navigation.on_startup_settled()

        assert page.visited == []
        assert event_bus.subscriber_count(events.TOPIC_SESSION_EXPIRED) == 0

"""Flet views for the app shell routes."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List
from urllib.parse import urlparse

import flet as ft

from launchpad.app.navigation.router import Routes
from launchpad.app.state import Store
from launchpad.app.ui.theme import (
    BG_CARD, BORDER_LIGHT, CYAN_PRIMARY, RED_PRIMARY, TEAL_PRIMARY,
    TEXT_BODY, TEXT_MUTED, TEXT_TITLE,
)
from launchpad.shared.core.failures import RequestFailure
from launchpad.shared.domain.entities import ProductEntity

logger = logging.getLogger(__name__)

Navigate = Callable[[str], None]

ONBOARDING_ITEMS = [
    ("Welcome", "Your products, in one place.", ft.Icons.ROCKET_LAUNCH),
    ("Stay in sync", "Sessions renew themselves while you work.", ft.Icons.SYNC),
    ("Get started", "Log in to manage your catalogue.", ft.Icons.LOGIN),
]


def build_view_factory(page: ft.Page, store: Store, go: Navigate) -> Callable[[str], ft.View]:
    """Return the ``route -> View`` builder used by the router."""

    def build(route: str) -> ft.View:
        path = urlparse(route).path
        if path in (Routes.INITIAL, Routes.SPLASH):
            return build_splash_view(page, store, route)
        if path == Routes.ONBOARDING:
            return build_onboarding_view(go)
        if path == Routes.LOGIN:
            return build_login_view(page, store)
        if path == Routes.HOME:
            return build_home_view(page, store)
        logger.warning(f"No view for route {route}")
        return _page(route, [
            ft.Text(f"Page not found: {route}", color=TEXT_MUTED),
            ft.TextButton("Back", on_click=lambda e: go(Routes.INITIAL)),
        ])

    return build


def _page(route: str, controls: List[ft.Control], **kwargs) -> ft.View:
    return ft.View(
        route=route,
        controls=controls,
        horizontal_alignment=ft.CrossAxisAlignment.CENTER,
        vertical_alignment=ft.MainAxisAlignment.CENTER,
        padding=24,
        **kwargs,
    )


def _error_text(failure: RequestFailure) -> str:
    return failure.message or failure.type.value.replace("_", " ")


def build_splash_view(page: ft.Page, store: Store, route: str) -> ft.View:
    app = store.app
    status_text = ft.Text(app.status_text.value, color=TEXT_MUTED, size=13)
    retry_btn = ft.OutlinedButton(
        "Retry",
        icon=ft.Icons.REFRESH,
        visible=app.startup_failed.value,
        on_click=lambda e: asyncio.create_task(store.services.startup.retry()),
    )
    progress = ft.ProgressRing(width=32, height=32, stroke_width=3, color=CYAN_PRIMARY)

    def _sync() -> None:
        status_text.value = app.status_text.value
        retry_btn.visible = app.startup_failed.value
        progress.visible = not app.startup_failed.value
        try:
            page.update()
        except RuntimeError:
            # Session destroyed
            pass

    app.status_text.listen(_sync)
    app.startup_failed.listen(_sync)

    return _page(route, [
        ft.Icon(ft.Icons.ROCKET_LAUNCH, size=64, color=CYAN_PRIMARY),
        ft.Text("Launchpad", size=28, weight=ft.FontWeight.W_700, color=TEXT_TITLE),
        progress,
        status_text,
        retry_btn,
    ])


def build_onboarding_view(go: Navigate) -> ft.View:
    cards = [
        ft.Container(
            bgcolor=BG_CARD,
            border=ft.border.all(1, BORDER_LIGHT),
            border_radius=12,
            padding=16,
            width=360,
            content=ft.Row([
                ft.Icon(icon, color=CYAN_PRIMARY, size=32),
                ft.Column([
                    ft.Text(title, size=16, weight=ft.FontWeight.W_600, color=TEXT_TITLE),
                    ft.Text(body, size=13, color=TEXT_BODY),
                ], spacing=4, expand=True),
            ], spacing=16),
        )
        for title, body, icon in ONBOARDING_ITEMS
    ]

    return _page(Routes.ONBOARDING, [
        *cards,
        ft.ElevatedButton(
            "Continue",
            icon=ft.Icons.ARROW_FORWARD,
            on_click=lambda e: go(Routes.LOGIN),
            bgcolor=CYAN_PRIMARY,
            color=ft.Colors.WHITE,
            width=200,
        ),
    ], scroll=ft.ScrollMode.AUTO)


def build_login_view(page: ft.Page, store: Store) -> ft.View:
    use_cases = store.services.use_cases

    email = ft.TextField(label="Email", width=320, autofocus=True)
    password = ft.TextField(label="Password", width=320, password=True, can_reveal_password=True)
    remember_me = ft.Checkbox(label="Remember me", value=use_cases.check_remember_me())
    message = ft.Text(store.app.session_message.value, color=RED_PRIMARY, size=13)
    progress = ft.ProgressRing(width=16, height=16, stroke_width=2, color=CYAN_PRIMARY, visible=False)

    async def on_login(e=None) -> None:
        progress.visible = True
        message.value = ""
        page.update()

        result = await use_cases.login(email.value or "", password.value or "", bool(remember_me.value))

        progress.visible = False
        if not result.is_success:
            message.value = _error_text(result.failure)
            logger.info(f"Login failed: {result.failure.type.value}")
        else:
            store.app.session_message.value = ""
        # Success routes to home through the session.logged_in event
        page.update()

    password.on_submit = lambda e: asyncio.create_task(on_login(e))

    return _page(Routes.LOGIN, [
        ft.Text("Log in", size=24, weight=ft.FontWeight.W_700, color=TEXT_TITLE),
        email,
        password,
        remember_me,
        ft.Row([
            ft.ElevatedButton(
                "Log in",
                icon=ft.Icons.LOGIN,
                on_click=lambda e: asyncio.create_task(on_login(e)),
                bgcolor=CYAN_PRIMARY,
                color=ft.Colors.WHITE,
                width=200,
            ),
            progress,
        ], alignment=ft.MainAxisAlignment.CENTER),
        message,
    ])


def build_home_view(page: ft.Page, store: Store) -> ft.View:
    use_cases = store.services.use_cases

    product_list = ft.Column(spacing=8, scroll=ft.ScrollMode.AUTO, expand=True)
    status = ft.Text("", color=TEXT_MUTED, size=12)

    def _render(products: List[ProductEntity]) -> None:
        if not products:
            product_list.controls = [ft.Text("No products yet", color=TEXT_MUTED, italic=True)]
            return
        product_list.controls = [_product_tile(product) for product in products]

    def _product_tile(product: ProductEntity) -> ft.Control:
        return ft.Container(
            bgcolor=BG_CARD,
            border=ft.border.all(1, BORDER_LIGHT),
            border_radius=8,
            padding=12,
            content=ft.Row([
                ft.Column([
                    ft.Text(product.product_name or "Unnamed", size=15, weight=ft.FontWeight.W_600, color=TEXT_TITLE),
                    ft.Text(
                        f"Code {product.product_code or '-'}  Qty {product.qty or '-'}  Price {product.unit_price or '-'}",
                        size=12,
                        color=TEXT_BODY,
                    ),
                ], spacing=2, expand=True),
                ft.IconButton(
                    ft.Icons.DELETE_OUTLINE,
                    icon_color=RED_PRIMARY,
                    tooltip="Delete",
                    disabled=not product.id,
                    on_click=lambda e, pid=product.id: asyncio.create_task(on_delete(pid)),
                ),
            ]),
        )

    async def on_refresh(e=None) -> None:
        status.value = "Loading..."
        page.update()
        result = await use_cases.get_products()
        result.when(
            success=lambda products: _render(products),
            error=lambda failure: _render(store.services.product_repository.all_products),
        )
        status.value = "" if result.is_success else f"Could not load products: {_error_text(result.failure)}"
        page.update()

    async def on_delete(product_id: str) -> None:
        result = await use_cases.delete_product(product_id)
        if result.is_success:
            status.value = "Product deleted"
            status.color = TEAL_PRIMARY
        else:
            status.value = f"Delete failed: {_error_text(result.failure)}"
            status.color = RED_PRIMARY
        _render(store.services.product_repository.all_products)
        page.update()

    async def on_logout(e=None) -> None:
        # Routing to login happens on the session.logged_out event
        await use_cases.logout()

    _render(store.services.product_repository.all_products)
    page.run_task(on_refresh)

    return ft.View(
        route=Routes.HOME,
        padding=24,
        controls=[
            ft.Row([
                ft.Text("Products", size=24, weight=ft.FontWeight.W_700, color=TEXT_TITLE, expand=True),
                ft.IconButton(ft.Icons.REFRESH, icon_color=CYAN_PRIMARY, tooltip="Refresh",
                              on_click=lambda e: asyncio.create_task(on_refresh(e))),
                ft.IconButton(ft.Icons.LOGOUT, icon_color=TEXT_MUTED, tooltip="Log out",
                              on_click=lambda e: asyncio.create_task(on_logout(e))),
            ]),
            status,
            product_list,
        ],
    )

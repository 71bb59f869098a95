"""
Launchpad Theme - Centralized color palette for the app shell.

Color Philosophy:
- Cyan (#48b0f7) is the single accent for actions and progress
- Teal marks success, red marks errors
- Text uses tinted grays for hierarchy on a dark background
"""

import flet as ft

# =============================================================================
# PRIMARY ACCENT COLORS
# =============================================================================
CYAN_PRIMARY = "#48b0f7"       # Main accent, buttons, progress
TEAL_PRIMARY = "#4ECDC4"       # Success
RED_PRIMARY = "#FF6B6B"        # Errors, destructive actions

# =============================================================================
# TEXT COLORS
# =============================================================================
TEXT_TITLE = "#5FBEDE"
TEXT_BODY = "#AFC5D6"
TEXT_MUTED = "#8A9BA8"

# =============================================================================
# BACKGROUND / BORDER
# =============================================================================
BG_PAGE = "#060a12"
BG_CARD = "rgba(255,255,255,0.04)"
BORDER_LIGHT = "rgba(255,255,255,0.08)"


THEME_MODES = {
    "light": ft.ThemeMode.LIGHT,
    "dark": ft.ThemeMode.DARK,
    "system": ft.ThemeMode.SYSTEM,
}


def apply_theme(page: ft.Page, mode: str = "dark") -> None:
    """Apply the baseline theme; unknown modes fall back to dark."""
    page.theme = ft.Theme(
        color_scheme_seed=CYAN_PRIMARY,
        visual_density=ft.VisualDensity.COMFORTABLE,
        use_material3=True,
    )
    page.theme_mode = THEME_MODES.get(mode.lower(), ft.ThemeMode.DARK)
    page.bgcolor = BG_PAGE
    page.padding = 0

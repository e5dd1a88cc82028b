"""
Theme preference.

The preference is persisted under ``portal_theme``; the dark theme is the
``dark-mode`` class on the surface root.
"""
from typing import Optional
from loguru import logger

from portal.core.events import Signal

THEME_KEY = "portal_theme"
DARK_CLASS = "dark-mode"


class ThemeService:
    def __init__(self, store, default: str = "light"):
        self.store = store
        self.default = default
        self.current_theme = default
        self.on_changed = Signal("ThemeChanged")

    def init_theme(self, surface=None) -> str:
        """Load the saved preference and apply it to the surface."""
        self.current_theme = self.store.get(THEME_KEY, self.default) or self.default
        self._apply(surface)
        logger.debug(f"Theme initialized: {self.current_theme}")
        return self.current_theme

    def toggle_theme(self, surface=None) -> str:
        self.current_theme = "light" if self.current_theme == "dark" else "dark"
        self.store.set(THEME_KEY, self.current_theme)
        self._apply(surface)
        self.on_changed.emit(self.current_theme)
        return self.current_theme

    def get_theme(self) -> str:
        return self.current_theme

    def _apply(self, surface: Optional[object]) -> None:
        if surface is None:
            return
        root = surface.root()
        if self.current_theme == "dark":
            surface.add_class(root, DARK_CLASS)
        else:
            surface.remove_class(root, DARK_CLASS)

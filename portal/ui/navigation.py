"""
Page navigation.

Pages are elements ``#<name>-page`` with class ``page``; their nav links are
``#nav-<name>`` with class ``nav-link``. Showing a page marks both active
and runs the page's on_show callback, which is where a deferred component
gets its mount point and attaches.
"""
import asyncio
import inspect
from typing import Callable, Dict, Optional, Set

from loguru import logger

from portal.core.events import EventBus, Events, Signal


class Navigator:
    """
    Switches between pages of the UI surface.

    Usage:
        nav = Navigator(surface, bus)
        nav.register_page("court", on_show=attach_court)
        await nav.show_page("court")
    """

    def __init__(self, surface, bus: Optional[EventBus] = None):
        self.surface = surface
        self.bus = bus
        self.current: Optional[str] = None
        self.page_shown = Signal("PageShown")
        self._pages: Dict[str, Optional[Callable]] = {}
        self._pending: Set[asyncio.Future] = set()

    def register_page(self, name: str, on_show: Optional[Callable] = None) -> None:
        self._pages[name] = on_show

    async def show_page(self, name: str) -> bool:
        """
        Activate ``#<name>-page``.

        Returns:
            False when the page element does not exist.
        """
        page = self.surface.resolve(f"{name}-page")
        if page is None:
            logger.warning(f"Page '{name}' not found")
            return False

        root = self.surface.root()
        for element in self.surface.query_all(root, ".page"):
            self.surface.remove_class(element, "active")
        for element in self.surface.query_all(root, ".nav-link"):
            self.surface.remove_class(element, "active")

        self.surface.add_class(page, "active")
        link = self.surface.resolve(f"nav-{name}")
        if link is not None:
            self.surface.add_class(link, "active")
        self.current = name

        on_show = self._pages.get(name)
        if on_show is not None:
            result = on_show()
            if inspect.isawaitable(result):
                await result

        self.page_shown.emit(name)
        if self.bus is not None:
            await self.bus.publish(Events.PAGE_SHOWN, {"page": name})
        logger.debug(f"Page shown: {name}")
        return True

    def bind_nav_links(self) -> int:
        """Bind click handlers on the nav links of registered pages."""
        bound = 0
        for name in self._pages:
            link = self.surface.resolve(f"nav-{name}")
            if link is None:
                continue
            self.surface.add_listener(link, "click", self._make_handler(name))
            bound += 1
        return bound

    def _make_handler(self, name: str) -> Callable:
        def handler(event):
            task = asyncio.ensure_future(self.show_page(name))
            self._pending.add(task)
            task.add_done_callback(self._on_navigation_done)
            return task
        return handler

    def _on_navigation_done(self, task: asyncio.Future) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.opt(exception=error).error(f"Navigation failed: {error}")

    @property
    def pending(self) -> int:
        """Number of navigations still running."""
        return len(self._pending)

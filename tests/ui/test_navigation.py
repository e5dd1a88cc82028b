"""
Test Navigator page switching.
"""
import asyncio

import pytest
from loguru import logger
from unittest.mock import AsyncMock, MagicMock

from portal.core.events import EventBus, Events
from portal.ui.memory_surface import MemorySurface
from portal.ui.navigation import Navigator

DOCUMENT = """
<body>
  <a id="nav-home" class="nav-link active">Home</a>
  <a id="nav-court" class="nav-link">Court</a>
  <div id="home-page" class="page active"></div>
  <div id="court-page" class="page"></div>
</body>
"""


@pytest.fixture
def surface():
    return MemorySurface(DOCUMENT)


@pytest.mark.asyncio
async def test_show_page_switches_active_classes(surface):
    """Only the shown page and its nav link are active."""
    nav = Navigator(surface)

    assert await nav.show_page("court") is True

    assert surface.has_class(surface.resolve("court-page"), "active")
    assert surface.has_class(surface.resolve("nav-court"), "active")
    assert not surface.has_class(surface.resolve("home-page"), "active")
    assert not surface.has_class(surface.resolve("nav-home"), "active")
    assert nav.current == "court"


@pytest.mark.asyncio
async def test_unknown_page(surface):
    """An unknown page name changes nothing."""
    nav = Navigator(surface)

    assert await nav.show_page("missing") is False
    assert nav.current is None


@pytest.mark.asyncio
async def test_on_show_callbacks(surface):
    """on_show callbacks run each time the page is shown."""
    sync_show = MagicMock()
    async_show = AsyncMock()
    nav = Navigator(surface)
    nav.register_page("home", sync_show)
    nav.register_page("court", async_show)

    await nav.show_page("home")
    await nav.show_page("court")

    sync_show.assert_called_once_with()
    async_show.assert_awaited_once_with()


@pytest.mark.asyncio
async def test_page_shown_notifications(surface):
    """page_shown is emitted and page.shown is published."""
    bus = EventBus()
    published = []
    bus.subscribe(Events.PAGE_SHOWN, published.append)
    nav = Navigator(surface, bus)
    shown = []
    nav.page_shown.connect(shown.append)

    await nav.show_page("court")

    assert shown == ["court"]
    assert published == [{"page": "court"}]


@pytest.mark.asyncio
async def test_nav_link_click(surface):
    """Clicking a bound nav link shows its page."""
    nav = Navigator(surface)
    nav.register_page("home")
    nav.register_page("court")
    nav.register_page("space")

    assert nav.bind_nav_links() == 2

    await surface.dispatch_async("#nav-court", "click")
    assert nav.current == "court"


@pytest.mark.asyncio
async def test_nav_link_failure_is_logged(surface):
    """An on_show error from a nav click is logged and the task released."""
    messages = []
    sink_id = logger.add(messages.append, level="ERROR")
    nav = Navigator(surface)
    nav.register_page("court", MagicMock(side_effect=RuntimeError("attach failed")))
    nav.bind_nav_links()

    try:
        [task] = surface.dispatch("#nav-court", "click")
        assert nav.pending == 1
        await asyncio.wait([task])
        await asyncio.sleep(0)
    finally:
        logger.remove(sink_id)

    assert nav.pending == 0
    assert any("attach failed" in message for message in messages)

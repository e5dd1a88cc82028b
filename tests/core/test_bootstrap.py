"""
Bootstrap sequencer tests.

Covers the fatal stages, the best-effort external stage, deferred
attachment through navigation, and the application access surface.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from portal.core.bootstrap import Application, ApplicationBuilder, default_service_factories
from portal.core.errors import BootstrapError, ConfigurationError, LifecycleError
from portal.core.events import EventBus, Events
from portal.core.keys import ServiceKey
from portal.core.lifecycle import BootstrapState, ComponentPhase
from portal.services import LocalStore, NotificationService
from portal.ui.component import BaseComponent


def make_space_stub(side_effect=None):
    space = MagicMock()
    space.load_space_images = AsyncMock(return_value=[], side_effect=side_effect)
    return space


def build_portal(config, surface, bus=None, **services):
    """Default services and screens, with network-bound services stubbed."""
    builder = (ApplicationBuilder(config)
               .with_surface(surface)
               .with_default_services()
               .with_default_components()
               .add_service(ServiceKey.SPACE, make_space_stub))
    for name, factory in services.items():
        builder.add_service(name, factory)
    if bus is not None:
        builder.with_event_bus(bus)
    return builder.build()


class Panel(BaseComponent):
    def __init__(self, dependencies, mount_id):
        super().__init__(mount_id, dependencies)
        self.received = dependencies

    def on_init(self):
        self.set_state({"ready": True})

    def build_markup(self):
        return f"<p>{self.mount_id}</p>"


class BrokenPanel(Panel):
    def on_init(self):
        raise RuntimeError("data source down")


# --- Fatal stages ---
@pytest.mark.asyncio
async def test_missing_required_service_fails_bootstrap(config, surface):
    """A missing required service aborts before any component is created."""
    config.bootstrap.required_services = ["X"]
    failures = []
    initialized = []
    bus = EventBus()
    bus.subscribe(Events.APP_FAILED, failures.append)

    class Recording(Panel):
        def on_init(self):
            initialized.append(self.mount_id)

    app = Application(
        config,
        surface,
        service_factories={"A": object, "B": object},
        component_factories={"blog": lambda deps: Recording(deps, "blog-section")},
        bus=bus,
    )

    assert await app.bootstrap() is False

    assert app.state is BootstrapState.FAILED
    assert isinstance(app.error, ConfigurationError)
    assert app.error.missing == ["X"]
    assert app.get_service("A") is not None
    assert "'X'" in str(app.error)
    assert initialized == []
    assert app.directory.names() == []
    assert app.components == []
    assert app.bundle is None
    assert failures and failures[0]["error"] is app.error


@pytest.mark.asyncio
async def test_failure_reported_on_surface_and_notifier(config, surface):
    """A fatal failure is shown on the loading screen and sent to the notifier."""
    config.bootstrap.required_services = ["blog", "court"]
    notifier = NotificationService()
    received = []
    notifier.on_notify.connect(lambda kind, message: received.append((kind, message)))
    app = Application(
        config,
        surface,
        service_factories={"blog": object, "notification": lambda: notifier},
    )

    assert await app.bootstrap() is False

    assert len(received) == 1
    assert received[0][0] == "error"
    assert "court" in received[0][1]
    assert surface.select(".loading-text").get_text() == config.bootstrap.failure_message
    assert not surface.has_class(surface.resolve("loading-screen"), "hidden")


@pytest.mark.asyncio
async def test_on_init_error_aborts_component_stage(config, surface):
    """An on_init error fails the component stage."""
    config.bootstrap.required_services = []
    app = Application(
        config,
        surface,
        component_factories={"blog": lambda deps: BrokenPanel(deps, "blog-section")},
    )

    assert await app.bootstrap() is False

    assert isinstance(app.error, BootstrapError)
    assert app.error.stage == "initialize_components"
    assert isinstance(app.error.cause, RuntimeError)
    assert app.directory.instance("blog").phase is ComponentPhase.FAILED


@pytest.mark.asyncio
async def test_bootstrap_runs_only_once(config, surface):
    """A second bootstrap raises."""
    app = build_portal(config, surface)
    assert await app.bootstrap() is True

    with pytest.raises(LifecycleError):
        await app.bootstrap()


# --- Successful sequence ---
@pytest.mark.asyncio
async def test_components_share_one_bundle(config, surface):
    """All components receive the same dependency bundle."""
    config.bootstrap.required_services = ["A", "B"]
    app = Application(
        config,
        surface,
        service_factories={"A": object, "B": object},
        component_factories={
            "blog": lambda deps: Panel(deps, "blog-section"),
            "crypto": lambda deps: Panel(deps, "crypto-section"),
        },
    )

    assert await app.bootstrap() is True

    first, second = app.components
    assert first.received is second.received is app.bundle
    assert set(app.bundle) == {"A", "B"}
    assert all(c.phase is ComponentPhase.ACTIVE for c in app.components)


@pytest.mark.asyncio
async def test_end_to_end_mounted_and_unmounted_components(config, surface):
    """Services {A, B} required, X mounted and Y unmounted: components [X], READY."""
    config.bootstrap.required_services = ["A", "B"]
    app = Application(
        config,
        surface,
        service_factories={"A": object, "B": object},
        component_factories={
            "X": lambda deps: Panel(deps, "blog-section"),
            "Y": lambda deps: Panel(deps, "no-such-mount"),
        },
    )

    assert await app.bootstrap() is True

    assert app.state is BootstrapState.READY
    assert app.components == [app.directory.instance("X")]
    assert app.directory.instance("Y").phase is ComponentPhase.FAILED
    assert app.active_components == app.components
    assert app.components[0].received is app.bundle


@pytest.mark.asyncio
async def test_component_dependencies_restrict_bundle(config, surface):
    """The bundle only holds the configured component dependencies."""
    config.bootstrap.required_services = []
    app = Application(
        config,
        surface,
        service_factories={"A": object, "B": object},
        component_factories={"blog": lambda deps: Panel(deps, "blog-section")},
        component_dependencies=["A"],
    )

    await app.bootstrap()

    assert list(app.get_component("blog").received) == ["A"]


@pytest.mark.asyncio
async def test_missing_mount_is_isolated(config, surface):
    """A missing mount excludes only that component."""
    config.bootstrap.required_services = []
    surface.resolve("crypto-section").decompose()
    app = Application(
        config,
        surface,
        component_factories={
            "blog": lambda deps: Panel(deps, "blog-section"),
            "crypto": lambda deps: Panel(deps, "crypto-section"),
            "admin": lambda deps: Panel(deps, "admin-section"),
        },
    )

    assert await app.bootstrap() is True

    assert [c.mount_id for c in app.components] == ["blog-section", "admin-section"]
    assert app.directory.instance("crypto").phase is ComponentPhase.FAILED


@pytest.mark.asyncio
async def test_portal_reaches_ready(config, surface):
    """The default portal bootstraps to READY with every screen."""
    ready = []
    bus = EventBus()
    bus.subscribe(Events.APP_READY, ready.append)
    app = build_portal(config, surface, bus=bus)

    assert await app.bootstrap() is True

    assert app.is_ready
    assert surface.has_class(surface.resolve("loading-screen"), "hidden")
    assert ready[0]["is_initialized"] is True
    assert ready[0]["components"] == app.components
    assert [type(c).__name__ for c in app.components] == [
        "BlogComponent", "CryptoComponent", "CourtComponent", "AdminComponent",
    ]
    assert app.get_service("space").load_space_images.await_count == 1
    assert len(app.get_service("crypto").get_crypto_data()) == 6


@pytest.mark.asyncio
async def test_deferred_component_is_data_only(config, surface):
    """The court screen loads its data without attaching."""
    app = build_portal(config, surface)
    await app.bootstrap()

    court = app.get_component("court")
    assert court.phase is ComponentPhase.INITIALIZED_DATA_ONLY
    assert court in app.components
    assert court not in app.active_components
    assert len(court.state["cases"]) == 3


@pytest.mark.asyncio
async def test_showing_page_attaches_deferred_component(config, surface):
    """Showing the court page attaches the deferred component."""
    app = build_portal(config, surface)
    await app.bootstrap()

    assert await app.show_page("court") is True

    court = app.get_component("court")
    assert court.is_active
    assert surface.resolve("court-section").find_parent(id="court-page") is not None
    assert "Court Document Search" in surface.resolve("court-section").get_text()


@pytest.mark.asyncio
async def test_nav_link_click_shows_page(config, surface):
    """Clicking a nav link switches the page."""
    app = build_portal(config, surface)
    await app.bootstrap()

    await surface.dispatch_async("#nav-court", "click")

    assert app.navigator.current == "court"
    assert surface.has_class(surface.resolve("court-page"), "active")
    assert surface.has_class(surface.resolve("nav-court"), "active")
    assert app.get_component("court").is_active


@pytest.mark.asyncio
async def test_admin_refreshes_when_shown(config, surface):
    """The admin page recounts each time it is shown."""
    app = build_portal(config, surface)
    await app.bootstrap()
    assert surface.resolve("stat-posts").get_text() == "0"

    app.get_service("blog").create_post("Hello", "First post")
    await app.show_page("admin")

    assert surface.resolve("stat-posts").get_text() == "1"


# --- Best-effort stage ---
@pytest.mark.asyncio
async def test_external_failures_do_not_block_ready(config, surface):
    """Scene and space failures do not prevent READY."""
    scene = AsyncMock(side_effect=RuntimeError("no WebGL"))
    app = build_portal(config, surface, space=lambda: make_space_stub(side_effect=OSError("offline")))
    app.scene_loader = scene

    assert await app.bootstrap() is True

    scene.assert_awaited_once()
    assert app.is_ready


@pytest.mark.asyncio
async def test_theme_toggle_wired(config, surface):
    """The theme toggle switches theme, persists it and publishes the change."""
    themes = []
    bus = EventBus()
    bus.subscribe(Events.THEME_CHANGED, themes.append)
    app = build_portal(config, surface, bus=bus)
    await app.bootstrap()

    surface.dispatch("#theme-toggle", "click")

    assert surface.has_class(surface.root(), "dark-mode")
    assert themes == [{"theme": "dark"}]
    assert app.get_service("storage").get("portal_theme") == "dark"


@pytest.mark.asyncio
async def test_saved_theme_applied_on_start(config, surface):
    """A stored theme is applied during bootstrap."""
    LocalStore(config.storage.path).set("portal_theme", "dark")
    app = build_portal(config, surface)

    await app.bootstrap()

    assert surface.has_class(surface.root(), "dark-mode")


# --- Access surface ---
@pytest.mark.asyncio
async def test_access_surface(config, surface):
    """Services and components are reachable by key, string or class name."""
    app = build_portal(config, surface)
    assert app.get_service("blog") is None

    await app.bootstrap()

    assert app.get_service(ServiceKey.BLOG) is app.inject("blog")
    assert app.inject("unknown") is None
    assert app.get_component("blog") is app.get_component("BlogComponent")
    assert app.get_component("missing") is None


@pytest.mark.asyncio
async def test_shutdown_destroys_components(config, surface):
    """Shutdown destroys every component."""
    app = build_portal(config, surface)
    await app.bootstrap()

    await app.shutdown()

    assert all(c.phase is ComponentPhase.DESTROYED for c in app.components)


def test_default_factories_share_storage(config):
    """Default services share one LocalStore."""
    factories = default_service_factories(config)

    store = factories[ServiceKey.STORAGE]()

    assert factories[ServiceKey.STORAGE]() is store
    assert factories[ServiceKey.BLOG]().store is store
    assert factories[ServiceKey.THEME]().store is store

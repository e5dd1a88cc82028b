"""
Application bootstrap.

``Application`` is the bootstrap sequencer and the application context in
one object: the process entry point constructs it, calls ``bootstrap()``
once and passes it by reference to whatever needs late access to services
or components.

Stages run in a fixed order; each may assume the previous ones succeeded:
    1. initialize_services   - registry populated, required names verified
    2. initialize_theme      - theme applied, optional toggle wired
    3. initialize_components - bundle resolved, components initialized
    4. external stages       - 3D scene and async data loads (best effort)
    5. completion            - loading screen hidden, READY, app.ready published

An exception in stages 1-3 aborts the sequence and leaves the application
FAILED. Stage 4 failures are logged as warnings.
"""
import asyncio
import functools
import inspect
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

from loguru import logger

from .bundle import DependencyBundle
from .capabilities import Notifier, ThemeProvider
from .config import AppConfig
from .errors import BootstrapError, ConfigurationError, PortalError
from .events import EventBus, Events
from .keys import ServiceKey, ServiceName, service_name
from .lifecycle import BOOTSTRAP_TRANSITIONS, BootstrapState, ComponentPhase, StateMachine
from .registry import ServiceRegistry

ServiceFactory = Callable[[], Any]


class Application:
    """
    Bootstrap sequencer and application context.

    Usage:
        app = Application(config, surface, services, components)
        await app.bootstrap()
        blog = app.get_service("blog")
    """

    # (service, method) pairs awaited together in the external data stage
    DATA_LOADERS = [
        (ServiceKey.SPACE, "load_space_images"),
        (ServiceKey.CRYPTO, "load_crypto_data"),
    ]

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        surface=None,
        service_factories: Optional[Dict[ServiceName, ServiceFactory]] = None,
        component_factories: Optional[Dict[str, Callable]] = None,
        component_dependencies: Optional[List[ServiceName]] = None,
        scene_loader: Optional[Callable[[], Awaitable[Any]]] = None,
        bus: Optional[EventBus] = None,
    ):
        # Local import keeps portal.core importable without the UI layer loaded first
        from portal.ui.directory import ComponentDirectory
        from portal.ui.navigation import Navigator

        self.config = config or AppConfig()
        self.surface = surface
        self.service_factories = dict(service_factories or {})
        self.component_factories = dict(component_factories or {})
        self.component_dependencies = component_dependencies
        self.scene_loader = scene_loader
        self.bus = bus or EventBus()

        self.registry: Optional[ServiceRegistry] = None
        self.directory = ComponentDirectory()
        self.navigator = Navigator(surface, self.bus) if surface is not None else None
        self.bundle: Optional[DependencyBundle] = None
        self.components: List[Any] = []
        self.error: Optional[BaseException] = None
        self.timings: Dict[str, float] = {}
        self._state = StateMachine("bootstrap", BootstrapState.NOT_STARTED, BOOTSTRAP_TRANSITIONS)

    # --- State ---
    @property
    def state(self) -> BootstrapState:
        return self._state.state

    @property
    def is_ready(self) -> bool:
        return self.state is BootstrapState.READY

    @property
    def is_failed(self) -> bool:
        return self.state is BootstrapState.FAILED

    # --- Sequence ---
    async def bootstrap(self) -> bool:
        """
        Run the bootstrap sequence.

        Returns:
            True when the application reached READY.

        Raises:
            LifecycleError: If bootstrap was already run on this instance.
        """
        self._state.transition_to(BootstrapState.BOOTSTRAPPING)
        logger.info(f"Starting {self.config.general.app_name} bootstrap...")
        started = time.perf_counter()

        try:
            await self._run_stage("initialize_services", self.initialize_services)
            await self._run_stage("initialize_theme", self.initialize_theme)
            await self._run_stage("initialize_components", self.initialize_components)
        except Exception as error:
            self.error = error
            self._state.transition_to(BootstrapState.FAILED)
            logger.error(f"Bootstrap failed: {error}")
            await self._handle_bootstrap_error(error)
            return False

        await self.initialize_scene()
        await self.load_async_data()
        await self.complete_initialization()

        logger.info(f"Application bootstrap completed in {(time.perf_counter() - started) * 1000:.1f} ms")
        return True

    async def _run_stage(self, name: str, stage: Callable) -> None:
        logger.info(f"Stage: {name}")
        started = time.perf_counter()
        try:
            result = stage()
            if inspect.isawaitable(result):
                await result
        except PortalError:
            raise
        except Exception as error:
            raise BootstrapError(name, error) from error
        self.timings[name] = (time.perf_counter() - started) * 1000

    # Stage 1
    def initialize_services(self) -> None:
        """Construct the registry, register every service and verify the required ones."""
        self.registry = ServiceRegistry()
        for name, factory in self.service_factories.items():
            self.registry.register(name, factory())

        required = self.config.bootstrap.required_services
        missing = self.registry.require(required)
        if missing:
            raise ConfigurationError(missing)
        logger.info(f"Services initialized: {required}")

    # Stage 2
    def initialize_theme(self) -> None:
        theme = self.registry.get(ServiceKey.THEME)
        if not isinstance(theme, ThemeProvider):
            logger.warning("Theme service not available, skipping theme setup")
            return
        theme.init_theme(self.surface)

        toggle = self.surface.resolve(self.config.bootstrap.theme_toggle_id) if self.surface else None
        if toggle is None:
            logger.debug("Theme toggle not present")
            return

        def on_toggle(event=None):
            new_theme = theme.toggle_theme(self.surface)
            logger.info(f"Theme switched to: {new_theme}")
            self.bus.publish_sync(Events.THEME_CHANGED, {"theme": new_theme})

        self.surface.add_listener(toggle, "click", on_toggle)
        logger.info("Theme initialized")

    # Stage 3
    async def initialize_components(self) -> None:
        self.bundle = self.registry.bundle(self.component_dependencies)
        for name, factory in self.component_factories.items():
            self.directory.register(name, factory)

        deferred = self.config.bootstrap.deferred_components
        self.components = await self.directory.initialize_all(self.bundle, self.surface, deferred=deferred)
        self._register_pages()
        logger.info(f"Components initialized: {len(self.components)} components")

    def _register_pages(self) -> None:
        if self.navigator is None:
            return
        for name in self.config.bootstrap.pages:
            self.navigator.register_page(name)
        for name in self.directory.names():
            component = self.directory.instance(name)
            if component is not None and component in self.components:
                self.navigator.register_page(name, functools.partial(self._on_page_shown, name, component))
        self.navigator.bind_nav_links()

    async def _on_page_shown(self, name: str, component) -> None:
        if component.phase is ComponentPhase.INITIALIZED_DATA_ONLY:
            await self.attach_deferred(name)
        elif component.is_active and hasattr(component, "refresh"):
            component.refresh()

    async def attach_deferred(self, name: str) -> bool:
        """
        Attach a data-only component once its page is shown.

        Creates the mount point inside ``#<name>-page`` when the surface
        supports it.
        """
        component = self.directory.instance(name)
        if component is None or component.phase is not ComponentPhase.INITIALIZED_DATA_ONLY:
            return bool(component is not None and component.is_active)
        if self.surface.resolve(component.mount_id) is None and hasattr(self.surface, "create_mount"):
            self.surface.create_mount(f"{name}-page", component.mount_id)
        attached = await component.attach(self.surface)
        if attached:
            logger.info(f"Deferred component '{name}' attached")
        return attached

    # Stage 4
    async def initialize_scene(self) -> None:
        if self.scene_loader is None:
            logger.warning("3D scene initializer not found")
            return
        try:
            await self.scene_loader()
            logger.info("3D scene initialized")
        except Exception as e:
            logger.warning(f"3D scene failed to initialize: {e}")

    async def load_async_data(self) -> None:
        calls = []
        for key, method in self.DATA_LOADERS:
            loader = getattr(self.registry.get(key), method, None)
            if callable(loader):
                calls.append((service_name(key), loader))
        if not calls:
            return

        results = await asyncio.gather(*(loader() for _, loader in calls), return_exceptions=True)
        for (name, _), result in zip(calls, results):
            if isinstance(result, BaseException):
                logger.warning(f"Error loading async data from '{name}': {result}")
        logger.info("Async data loaded")

    # Stage 5
    async def complete_initialization(self) -> None:
        loading = self.surface.resolve(self.config.bootstrap.loading_screen_id) if self.surface else None
        if loading is not None:
            self.surface.add_class(loading, "hidden")

        self._state.transition_to(BootstrapState.READY)
        await self.bus.publish(Events.APP_READY, {"is_initialized": True, "components": list(self.components)})
        logger.info("Application ready")

    async def _handle_bootstrap_error(self, error: BaseException) -> None:
        notifier = self.registry.get(ServiceKey.NOTIFICATION) if self.registry else None
        if isinstance(notifier, Notifier):
            notifier.error(f"Bootstrap failed: {error}")

        if self.surface is not None:
            for element in self.surface.query_all(self.surface.root(), self.config.bootstrap.loading_text_selector):
                self.surface.set_text(element, self.config.bootstrap.failure_message)

        await self.bus.publish(Events.APP_FAILED, {"error": error})

    # --- Access surface ---
    def get_service(self, name: ServiceName) -> Optional[Any]:
        """Resolve a service; None before stage 1 or when unknown."""
        if self.registry is None:
            return None
        return self.registry.get(name)

    def inject(self, name: ServiceName) -> Optional[Any]:
        service = self.get_service(name)
        if service is None:
            logger.warning(f"Service '{service_name(name)}' not available for injection")
        return service

    def get_component(self, name: str) -> Optional[Any]:
        """Find an initialized component by directory name or class name."""
        component = self.directory.instance(name)
        if component is not None and component in self.components:
            return component
        return next((c for c in self.components if type(c).__name__ == name), None)

    @property
    def active_components(self) -> List[Any]:
        return [c for c in self.components if c.is_active]

    async def show_page(self, name: str) -> bool:
        if self.navigator is None:
            return False
        return await self.navigator.show_page(name)

    async def shutdown(self) -> None:
        """Destroy every component that can be torn down."""
        for component in list(self.components):
            if component.phase in (ComponentPhase.ACTIVE, ComponentPhase.INITIALIZED_DATA_ONLY):
                await component.destroy()
        logger.info("Application shut down")


def default_service_factories(config: AppConfig) -> Dict[ServiceName, ServiceFactory]:
    """Factories for the built-in services, sharing one LocalStore."""
    from portal.services import (
        BlogService,
        CourtService,
        CryptoService,
        LocalStore,
        NotificationService,
        SpaceService,
        ThemeService,
    )

    @functools.lru_cache(maxsize=None)
    def storage():
        return LocalStore(config.storage.path)

    return {
        ServiceKey.STORAGE: storage,
        ServiceKey.BLOG: lambda: BlogService(storage()),
        ServiceKey.CRYPTO: CryptoService,
        ServiceKey.COURT: lambda: CourtService(config.downloads.directory),
        ServiceKey.THEME: lambda: ThemeService(storage(), default=config.general.theme),
        ServiceKey.SPACE: lambda: SpaceService(config.space),
        ServiceKey.NOTIFICATION: NotificationService,
    }


class ApplicationBuilder:
    """
    Fluent builder for Portal applications.

    Example:
        app = (ApplicationBuilder(config)
               .with_surface(surface)
               .with_default_services()
               .with_default_components()
               .build())
        await app.bootstrap()
    """

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or AppConfig()
        self._surface = None
        self._services: Dict[str, ServiceFactory] = {}
        self._components: Dict[str, Callable] = {}
        self._dependencies: Optional[List[ServiceName]] = None
        self._scene_loader = None
        self._bus: Optional[EventBus] = None
        self._logging_configured = False

    def with_surface(self, surface):
        self._surface = surface
        return self

    def with_default_services(self, enable: bool = True):
        """
        Include the built-in services.

        Default services: storage, blog, crypto, court, theme, space, notification
        """
        if enable:
            for name, factory in default_service_factories(self.config).items():
                self._services.setdefault(service_name(name), factory)
        return self

    def add_service(self, name: ServiceName, factory: ServiceFactory):
        """
        Register a service factory (a zero-argument callable).

        Returns:
            Self for chaining
        """
        self._services[service_name(name)] = factory
        return self

    def with_default_components(self, enable: bool = True):
        """Include the blog, crypto, court and admin screens."""
        if enable:
            from portal.components import DEFAULT_COMPONENTS
            for name, factory in DEFAULT_COMPONENTS.items():
                self._components.setdefault(name, factory)
        return self

    def add_component(self, name: str, factory: Callable):
        self._components[name] = factory
        return self

    def with_component_dependencies(self, names: List[ServiceName]):
        """Restrict the dependency bundle to these services."""
        self._dependencies = list(names)
        return self

    def with_scene(self, loader: Callable[[], Awaitable[Any]]):
        self._scene_loader = loader
        return self

    def with_event_bus(self, bus: EventBus):
        self._bus = bus
        return self

    def with_logging(self, enable: bool = True):
        self._logging_configured = enable
        return self

    def build(self) -> Application:
        if self._logging_configured:
            from .logging import setup_logging
            setup_logging(
                self.config.general.debug_mode, self.config.general.log_dir, self.config.general.app_name,
            )

        return Application(
            config=self.config,
            surface=self._surface,
            service_factories=self._services,
            component_factories=self._components,
            component_dependencies=self._dependencies,
            scene_loader=self._scene_loader,
            bus=self._bus,
        )

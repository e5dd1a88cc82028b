"""
Component Base Abstraction.

Stateful UI component owning one mount point, with lifecycle hooks and
change detection. Any accepted state change re-renders the whole
component; ``render()`` is the single place that writes to the surface.

Lifecycle:
    UNINITIALIZED -> INITIALIZING -> RENDERING -> READY -> ACTIVE
    ACTIVE -> RENDERING -> ACTIVE          (accepted set_state)
    ACTIVE -> DESTROYED                    (destroy)
    UNINITIALIZED -> FAILED                (mount point missing)
    UNINITIALIZED -> INITIALIZED_DATA_ONLY -> RENDERING ...   (deferred attach)

Example:
    class CounterComponent(BaseComponent):
        def __init__(self, dependencies):
            super().__init__("counter", dependencies)

        def on_init(self):
            self.set_state({"count": 0})

        def build_markup(self):
            return f'<button id="inc">{self.state["count"]}</button>'

        def bind_events(self):
            self.listen("#inc", "click", lambda e: self.set_state({"count": self.state["count"] + 1}))
"""
import asyncio
import copy
import inspect
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Tuple, Union

from loguru import logger

from portal.core.bundle import DependencyBundle
from portal.core.errors import LifecycleError
from portal.core.events import Signal
from portal.core.keys import ServiceName
from portal.core.lifecycle import COMPONENT_TRANSITIONS, ComponentPhase, StateMachine


class Change(NamedTuple):
    """Before/after value of one state key."""
    old: Any
    new: Any


Binding = Tuple[Any, str, Callable]


class BaseComponent:
    """
    Base class for all screens.

    Subclasses override the hooks they need:
        on_init()            - load initial data into state (may be async)
        build_markup()       - pure function of state returning markup
        bind_events()        - bind handlers on freshly rendered markup
        on_after_view_init() - once, after the first render
        on_changes(changes)  - after each accepted state update
        on_destroy()         - release what the component acquired
    """

    def __init__(
        self,
        mount_id: str,
        dependencies: Optional[DependencyBundle] = None,
        template: str = "",
        surface=None,
        name: Optional[str] = None,
    ):
        self.mount_id = mount_id
        self.template = template
        self.dependencies = dependencies if dependencies is not None else DependencyBundle()
        self.surface = surface
        self.element = None
        self.name = name or type(self).__name__
        self.events = Signal(f"{self.name}.events")

        self._state: Dict[str, Any] = {}
        self._lifecycle = StateMachine(self.name, ComponentPhase.UNINITIALIZED, COMPONENT_TRANSITIONS)
        self._init_future: Optional[asyncio.Future] = None
        self._dirty = False
        self._binding_view = False
        self._view_bindings: List[Binding] = []
        self._bindings: List[Binding] = []

    # --- Lifecycle hooks ---
    def on_init(self):
        pass

    def on_after_view_init(self):
        pass

    def on_changes(self, changes: Dict[str, Change]):
        pass

    def on_destroy(self):
        pass

    def bind_events(self):
        pass

    def build_markup(self) -> str:
        return self.template

    # --- Properties ---
    @property
    def state(self) -> Mapping[str, Any]:
        """Read-only view of the state record. Use set_state() to change it."""
        return MappingProxyType(self._state)

    @property
    def phase(self) -> ComponentPhase:
        return self._lifecycle.state

    @property
    def lifecycle(self) -> StateMachine:
        return self._lifecycle

    @property
    def is_active(self) -> bool:
        return self.phase is ComponentPhase.ACTIVE

    # --- Initialization ---
    async def initialize(self, surface=None) -> bool:
        """
        Attach to the mount point and run the full lifecycle.

        Returns:
            False when the mount point cannot be resolved (component FAILED).
            True once the component is ACTIVE.

        Raises:
            LifecycleError: If the component was already initialized.
            Exception: Whatever on_init raised (component FAILED).
        """
        if surface is not None:
            self.surface = surface
        if self.phase is not ComponentPhase.UNINITIALIZED:
            raise LifecycleError(f"{self.name} cannot initialize from {self.phase.value}")

        if not self._resolve_mount():
            self._lifecycle.transition_to(ComponentPhase.FAILED)
            logger.warning(f"Component selector '#{self.mount_id}' not found")
            return False

        self._lifecycle.transition_to(ComponentPhase.INITIALIZING)
        await self._run_on_init()
        self._first_render()
        return True

    async def initialize_data_only(self) -> None:
        """
        Deferred initialization: run on_init without attaching.

        Used for components whose mount point only appears later; call
        attach() when it exists.
        """
        if self.phase is not ComponentPhase.UNINITIALIZED:
            raise LifecycleError(f"{self.name} cannot initialize from {self.phase.value}")
        self._lifecycle.transition_to(ComponentPhase.INITIALIZED_DATA_ONLY)
        await self._run_on_init()
        logger.debug(f"{self.name} initialized in data-only mode")

    async def attach(self, surface=None) -> bool:
        """
        Complete a deferred initialization once the mount point exists.

        on_init is not invoked again. When the mount point is still missing
        the component stays INITIALIZED_DATA_ONLY and False is returned.
        """
        if surface is not None:
            self.surface = surface
        if self.phase in (ComponentPhase.READY, ComponentPhase.ACTIVE):
            return True
        if self.phase is not ComponentPhase.INITIALIZED_DATA_ONLY:
            raise LifecycleError(f"{self.name} cannot attach from {self.phase.value}")

        if not self._resolve_mount():
            logger.warning(f"Component selector '#{self.mount_id}' not found, attach deferred")
            return False

        await self._run_on_init()
        if self.phase is not ComponentPhase.INITIALIZED_DATA_ONLY:
            # Another attach finished while on_init was pending
            return self.is_active
        self._first_render()
        return True

    async def _run_on_init(self) -> None:
        # Single flight: every caller awaits the same on_init run
        if self._init_future is None:
            self._init_future = asyncio.ensure_future(self._invoke_on_init())
        try:
            await self._init_future
        except Exception:
            if self.phase in (ComponentPhase.INITIALIZING, ComponentPhase.INITIALIZED_DATA_ONLY):
                self._lifecycle.transition_to(ComponentPhase.FAILED)
            logger.error(f"{self.name}.on_init failed")
            raise

    async def _invoke_on_init(self) -> None:
        result = self.on_init()
        if inspect.isawaitable(result):
            await result

    def _resolve_mount(self) -> bool:
        if self.surface is None:
            return False
        self.element = self.surface.resolve(self.mount_id)
        return self.element is not None

    def _first_render(self) -> None:
        self._lifecycle.transition_to(ComponentPhase.RENDERING)
        self.render()
        self._lifecycle.transition_to(ComponentPhase.READY)
        self.on_after_view_init()
        self._lifecycle.transition_to(ComponentPhase.ACTIVE)
        if self._dirty:
            self._rerender()

    # --- Rendering ---
    def render(self) -> None:
        """Replace the contents of the mount point with build_markup()."""
        if self.element is None or self.surface is None:
            return
        self._release(self._view_bindings)
        self.surface.replace_markup(self.element, self.build_markup())
        self._binding_view = True
        try:
            self.bind_events()
        finally:
            self._binding_view = False

    def _rerender(self) -> None:
        # set_state from build_markup/bind_events marks dirty; render until it settles
        self._dirty = True
        while self._dirty:
            self._dirty = False
            self._lifecycle.transition_to(ComponentPhase.RENDERING)
            try:
                self.render()
            finally:
                self._lifecycle.transition_to(ComponentPhase.ACTIVE)

    # --- State ---
    def set_state(self, partial: Mapping[str, Any]) -> Dict[str, Change]:
        """
        Merge ``partial`` into state and re-render if anything changed.

        Values are compared by value. When nothing differs, neither
        on_changes nor render is invoked.

        Returns:
            The changed keys with their old and new values.
        """
        if self.phase in (ComponentPhase.FAILED, ComponentPhase.DESTROYED):
            raise LifecycleError(f"{self.name} is {self.phase.value}, state is frozen")

        changes: Dict[str, Change] = {}
        for key, value in partial.items():
            if key not in self._state or self._state[key] != value:
                changes[key] = Change(self._state.get(key), copy.deepcopy(value))

        if not changes:
            return changes

        self._state.update({key: change.new for key, change in changes.items()})
        self.on_changes(changes)

        if self.phase is ComponentPhase.ACTIVE:
            self._rerender()
        elif self.phase in (ComponentPhase.RENDERING, ComponentPhase.READY):
            self._dirty = True
        return changes

    # --- Services ---
    def get_service(self, name: ServiceName) -> Any:
        """Look up a service in this component's own dependency bundle."""
        return self.dependencies.get(name)

    # --- DOM helpers ---
    def query(self, selector: str):
        found = self.query_all(selector)
        return found[0] if found else None

    def query_all(self, selector: str) -> List[Any]:
        if self.element is None or self.surface is None:
            return []
        return self.surface.query_all(self.element, selector)

    def listen(self, target: Union[str, Any], event: str, handler: Callable) -> int:
        """
        Bind ``handler`` to every element matching ``target``.

        Bindings made from bind_events() are released on the next render;
        others live until destroy().

        Returns:
            Number of elements bound.
        """
        elements = self.query_all(target) if isinstance(target, str) else [target]
        bucket = self._view_bindings if self._binding_view else self._bindings
        for element in elements:
            self.surface.add_listener(element, event, handler)
            bucket.append((element, event, handler))
        return len(elements)

    def emit(self, event_name: str, detail: Any = None) -> None:
        """Emit a component event to subscribers of ``self.events``."""
        self.events.emit(event_name, detail)

    def _release(self, bindings: List[Binding]) -> None:
        if self.surface is not None:
            for element, event, handler in bindings:
                self.surface.remove_listener(element, event, handler)
        bindings.clear()

    # --- Teardown ---
    async def destroy(self) -> None:
        """Run on_destroy, release bindings and mark the component DESTROYED."""
        if self.phase is ComponentPhase.DESTROYED:
            return
        if self.phase not in (ComponentPhase.ACTIVE, ComponentPhase.INITIALIZED_DATA_ONLY):
            raise LifecycleError(f"{self.name} cannot be destroyed from {self.phase.value}")

        result = self.on_destroy()
        if inspect.isawaitable(result):
            await result

        if self._init_future is not None and not self._init_future.done():
            self._init_future.cancel()
        self._release(self._view_bindings)
        self._release(self._bindings)
        self.events.clear()
        self._lifecycle.transition_to(ComponentPhase.DESTROYED)
        self.element = None
        logger.debug(f"{self.name} destroyed")

    def __repr__(self) -> str:
        return f"<{self.name} #{self.mount_id} {self.phase.value}>"

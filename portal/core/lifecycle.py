"""
Lifecycle State Machines.

Component phases and bootstrap states with their valid transitions.
"""
from enum import Enum
from typing import Callable, Dict, Generic, Iterable, List, TypeVar
from loguru import logger

from .errors import LifecycleError

S = TypeVar("S", bound=Enum)


class ComponentPhase(Enum):
    """Component lifecycle phases."""
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    INITIALIZED_DATA_ONLY = "initialized_data_only"
    RENDERING = "rendering"
    READY = "ready"
    ACTIVE = "active"
    FAILED = "failed"
    DESTROYED = "destroyed"


class BootstrapState(Enum):
    """Bootstrap sequencer states."""
    NOT_STARTED = "not_started"
    BOOTSTRAPPING = "bootstrapping"
    READY = "ready"
    FAILED = "failed"


COMPONENT_TRANSITIONS = {
    ComponentPhase.UNINITIALIZED: [
        ComponentPhase.INITIALIZING,
        ComponentPhase.FAILED,
        ComponentPhase.INITIALIZED_DATA_ONLY,
    ],
    ComponentPhase.INITIALIZING: [ComponentPhase.RENDERING, ComponentPhase.FAILED],
    ComponentPhase.INITIALIZED_DATA_ONLY: [
        ComponentPhase.RENDERING,
        ComponentPhase.FAILED,
        ComponentPhase.DESTROYED,
    ],
    ComponentPhase.RENDERING: [ComponentPhase.READY, ComponentPhase.ACTIVE],
    ComponentPhase.READY: [ComponentPhase.ACTIVE],
    ComponentPhase.ACTIVE: [ComponentPhase.RENDERING, ComponentPhase.DESTROYED],
    ComponentPhase.FAILED: [],
    ComponentPhase.DESTROYED: [],
}

BOOTSTRAP_TRANSITIONS = {
    BootstrapState.NOT_STARTED: [BootstrapState.BOOTSTRAPPING],
    BootstrapState.BOOTSTRAPPING: [BootstrapState.READY, BootstrapState.FAILED],
    BootstrapState.READY: [],
    BootstrapState.FAILED: [],
}


class StateMachine(Generic[S]):
    """
    Tracks a current state and enforces a transition table.

    Usage:
        machine = StateMachine("blog", ComponentPhase.UNINITIALIZED, COMPONENT_TRANSITIONS)
        machine.add_listener(on_change)
        machine.transition_to(ComponentPhase.INITIALIZING)
    """

    def __init__(self, name: str, initial: S, transitions: Dict[S, Iterable[S]]):
        self.name = name
        self._state = initial
        self._transitions = {state: list(targets) for state, targets in transitions.items()}
        self._listeners: List[Callable[[S, S], None]] = []

    @property
    def state(self) -> S:
        """Get current state."""
        return self._state

    def can_transition(self, target: S) -> bool:
        """
        Check if can transition to target state.

        Args:
            target: Target state

        Returns:
            True if transition is valid
        """
        return target in self._transitions.get(self._state, [])

    def transition_to(self, target: S) -> S:
        """
        Transition to target state.

        Args:
            target: Target state

        Returns:
            The previous state

        Raises:
            LifecycleError: If transition is invalid
        """
        if not self.can_transition(target):
            raise LifecycleError(
                f"{self.name}: invalid transition {self._state.value} -> {target.value}"
            )

        old_state = self._state
        self._state = target
        logger.debug(f"Lifecycle[{self.name}]: {old_state.value} -> {target.value}")

        self._notify_listeners(old_state, target)
        return old_state

    @property
    def is_terminal(self) -> bool:
        return not self._transitions.get(self._state)

    def add_listener(self, listener: Callable[[S, S], None]) -> None:
        """
        Add a listener for all state changes.

        Args:
            listener: Callable(old_state, new_state)
        """
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Callable) -> None:
        """Remove a state change listener."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify_listeners(self, old: S, new: S) -> None:
        """Notify all state change listeners."""
        for listener in list(self._listeners):
            try:
                listener(old, new)
            except Exception as e:
                logger.error(f"Listener error: {e}")

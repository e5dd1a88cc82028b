"""
UI Surface contract.

The surface is the single shared mutable resource components write to.
Each component owns exactly one mount point and is its only writer.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, runtime_checkable


@dataclass
class UIEvent:
    """Event passed to listeners bound through a surface."""
    type: str
    target: Any = None
    data: Dict[str, Any] = field(default_factory=dict)

    def attr(self, name: str, default: Any = None) -> Any:
        """Read an attribute of the target element (e.g. ``data-id``)."""
        if self.target is None:
            return default
        getter = getattr(self.target, "get", None)
        if callable(getter):
            return getter(name, default)
        value = self.target.property(name) if hasattr(self.target, "property") else None
        return default if value is None else value


Listener = Callable[[UIEvent], Any]


@runtime_checkable
class UISurface(Protocol):
    def root(self) -> Any: ...

    def resolve(self, element_id: str) -> Optional[Any]: ...

    def replace_markup(self, element: Any, markup: str) -> None: ...

    def query_all(self, element: Any, selector: str) -> List[Any]: ...

    def add_listener(self, element: Any, event: str, handler: Listener) -> None: ...

    def remove_listener(self, element: Any, event: str, handler: Listener) -> None: ...

    def add_class(self, element: Any, name: str) -> None: ...

    def remove_class(self, element: Any, name: str) -> None: ...

    def set_text(self, element: Any, text: str) -> None: ...

    def get_value(self, element: Any) -> str: ...

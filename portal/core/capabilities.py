"""
Capability interfaces for the service categories the core talks to.

The registry stores services as opaque values; these protocols describe
the few calls the bootstrap sequencer makes on them.
"""
from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...


@runtime_checkable
class ThemeProvider(Protocol):
    def init_theme(self, surface: Any) -> str: ...

    def toggle_theme(self, surface: Any) -> str: ...

    def get_theme(self) -> str: ...


@runtime_checkable
class KeyValueStore(Protocol):
    def get(self, key: str, default: Optional[Any] = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

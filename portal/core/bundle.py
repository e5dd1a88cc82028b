"""
Dependency Bundle.

Read-only snapshot of named services handed to every component
constructor. All components of one application share the same instance.
"""
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional

from .keys import ServiceName, service_name


class DependencyBundle(Mapping):
    """
    Immutable name -> service mapping.

    Example:
        bundle = registry.bundle(["blog", "notification"])
        blog = bundle.get("blog")
    """

    __slots__ = ("_services",)

    def __init__(self, services: Optional[Mapping[ServiceName, Any]] = None):
        snapshot = {service_name(k): v for k, v in (services or {}).items()}
        object.__setattr__(self, "_services", MappingProxyType(snapshot))

    def __getitem__(self, name: ServiceName) -> Any:
        return self._services[service_name(name)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._services)

    def __len__(self) -> int:
        return len(self._services)

    def __contains__(self, name) -> bool:
        return service_name(name) in self._services

    def get(self, name: ServiceName, default: Any = None) -> Any:
        return self._services.get(service_name(name), default)

    def __setattr__(self, name: str, value: Any) -> None:
        raise TypeError("DependencyBundle is read-only")

    def __repr__(self) -> str:
        return f"DependencyBundle({list(self._services)})"

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._services)

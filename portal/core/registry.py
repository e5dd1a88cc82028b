"""
Service Registry.

Name-keyed store of singleton service instances. Services are opaque
values; the registry only stores and resolves them.
"""
from typing import Any, Dict, Iterable, List, Optional
from loguru import logger

from .bundle import DependencyBundle
from .keys import ServiceName, service_name


class ServiceRegistry:
    """
    Dependency injection container keyed by service name.

    Usage:
        registry = ServiceRegistry()
        registry.register(ServiceKey.BLOG, BlogService(store))
        blog = registry.get("blog")
    """

    def __init__(self):
        self._services: Dict[str, Any] = {}

    def register(self, name: ServiceName, service: Any) -> None:
        """
        Register a service under a name.

        Registering twice under the same name replaces the first service.

        Args:
            name: ServiceKey or plain string
            service: Service instance
        """
        key = service_name(name)
        if key in self._services and self._services[key] is not service:
            logger.warning(
                f"Service '{key}' re-registered: {type(self._services[key]).__name__} "
                f"replaced by {type(service).__name__}"
            )
        self._services[key] = service
        logger.debug(f"Registered service: {key}")

    def get(self, name: ServiceName) -> Optional[Any]:
        """
        Resolve a service by name.

        Returns:
            The registered instance, or None when the name is unknown.
        """
        key = service_name(name)
        if key not in self._services:
            logger.warning(f"Service '{key}' not found in registry")
            return None
        return self._services[key]

    def require(self, names: Iterable[ServiceName]) -> List[str]:
        """Return the names that do not resolve (empty when all are present)."""
        return [service_name(n) for n in names if service_name(n) not in self._services]

    def bundle(self, names: Optional[Iterable[ServiceName]] = None) -> DependencyBundle:
        """
        Snapshot services into a read-only DependencyBundle.

        Args:
            names: Names to include. Defaults to every registered service.
                Unknown names are left out of the bundle.
        """
        if names is None:
            return DependencyBundle(self._services)
        selected = {}
        for name in names:
            key = service_name(name)
            if key in self._services:
                selected[key] = self._services[key]
            else:
                logger.warning(f"Service '{key}' not available for bundle")
        return DependencyBundle(selected)

    def names(self) -> List[str]:
        return list(self._services)

    def __contains__(self, name) -> bool:
        return service_name(name) in self._services

    def __len__(self) -> int:
        return len(self._services)

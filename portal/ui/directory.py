"""
Component Directory.

Name-keyed store of component factories. A factory is any callable taking
the dependency bundle and returning a BaseComponent (usually the class).
"""
from typing import Callable, Dict, Iterable, List, Optional

from loguru import logger

from portal.core.bundle import DependencyBundle
from .component import BaseComponent

ComponentFactory = Callable[[DependencyBundle], BaseComponent]


class ComponentDirectory:
    """
    Registry of component factories.

    Usage:
        directory = ComponentDirectory()
        directory.register("blog", BlogComponent)
        components = await directory.initialize_all(bundle, surface)
    """

    def __init__(self):
        self._factories: Dict[str, ComponentFactory] = {}
        self._instances: Dict[str, BaseComponent] = {}

    def register(self, name: str, factory: ComponentFactory) -> None:
        """Register a factory; a later registration under the same name replaces it."""
        if name in self._factories:
            logger.debug(f"Component '{name}' re-registered")
        self._factories[name] = factory

    def create(self, name: str, dependencies: DependencyBundle) -> Optional[BaseComponent]:
        """
        Instantiate a registered component.

        Returns:
            The new component, or None when ``name`` is not registered.
        """
        factory = self._factories.get(name)
        if factory is None:
            logger.error(f"Component '{name}' not found in directory")
            return None
        instance = factory(dependencies)
        self._instances[name] = instance
        return instance

    async def initialize_all(
        self,
        dependencies: DependencyBundle,
        surface=None,
        deferred: Iterable[str] = (),
    ) -> List[BaseComponent]:
        """
        Create and initialize every registered component in registration order.

        Components whose mount point is missing are left out of the result;
        the remaining components are still initialized. Names listed in
        ``deferred`` only get their data loaded (INITIALIZED_DATA_ONLY) and
        are included in the result.

        Args:
            dependencies: Bundle shared by every component
            surface: UI surface to attach to
            deferred: Names to initialize in data-only mode

        Returns:
            Successfully initialized components.
        """
        deferred = set(deferred)
        instances: List[BaseComponent] = []
        for name in list(self._factories):
            instance = self.create(name, dependencies)
            if instance is None:
                continue
            if surface is not None:
                instance.surface = surface

            if name in deferred:
                await instance.initialize_data_only()
                instances.append(instance)
            elif await instance.initialize():
                instances.append(instance)
            else:
                logger.warning(f"Component '{name}' skipped: mount point '#{instance.mount_id}' missing")

        logger.info(f"Components initialized: {len(instances)} of {len(self._factories)}")
        return instances

    def names(self) -> List[str]:
        return list(self._factories)

    def instance(self, name: str) -> Optional[BaseComponent]:
        """Most recent instance created under ``name``."""
        return self._instances.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)

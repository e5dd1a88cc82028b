"""
Portal Core - Application Infrastructure.

Provides:
- ServiceRegistry: Name-keyed service container
- DependencyBundle: Read-only service snapshot handed to components
- Application: Bootstrap sequencer and application context
- ConfigManager: Configuration with persistence
- EventBus: Application-wide pub/sub
- StateMachine: Component and bootstrap lifecycles

Usage:
    from portal.core import ApplicationBuilder

    app = ApplicationBuilder(config).with_surface(surface).with_default_services().build()
    await app.bootstrap()
"""
from .errors import PortalError, ConfigurationError, BootstrapError, LifecycleError
from .keys import ServiceKey, ServiceName, service_name
from .bundle import DependencyBundle
from .registry import ServiceRegistry
from .capabilities import Notifier, ThemeProvider, KeyValueStore
from .lifecycle import ComponentPhase, BootstrapState, StateMachine
from .config import ConfigManager, AppConfig, GeneralSettings, BootstrapSettings, SpaceSettings
from .events import Signal, EventBus, Events
from .bootstrap import Application, ApplicationBuilder, default_service_factories

__all__ = [
    "PortalError",
    "ConfigurationError",
    "BootstrapError",
    "LifecycleError",
    "ServiceKey",
    "ServiceName",
    "service_name",
    "DependencyBundle",
    "ServiceRegistry",
    "Notifier",
    "ThemeProvider",
    "KeyValueStore",
    "ComponentPhase",
    "BootstrapState",
    "StateMachine",
    "ConfigManager",
    "AppConfig",
    "GeneralSettings",
    "BootstrapSettings",
    "SpaceSettings",
    "Signal",
    "EventBus",
    "Events",
    "Application",
    "ApplicationBuilder",
    "default_service_factories",
]

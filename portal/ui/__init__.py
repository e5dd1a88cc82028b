"""
UI layer: component base class, component directory, surfaces and navigation.

The Qt surface is imported from ``portal.ui.qt_surface`` directly so that
headless use does not load PySide6.
"""
from .surface import UISurface, UIEvent
from .memory_surface import MemorySurface
from .component import BaseComponent, Change
from .directory import ComponentDirectory
from .navigation import Navigator

__all__ = [
    "UISurface",
    "UIEvent",
    "MemorySurface",
    "BaseComponent",
    "Change",
    "ComponentDirectory",
    "Navigator",
]

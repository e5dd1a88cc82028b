"""
Event System - Notifications for the application.

Provides:
- Signal: Simple observer pattern for sync notifications (config changes, component events)
- EventBus: Name-keyed pub/sub for application-wide events (app ready, page shown)
- Events: Standard event name constants

Usage:
    from portal.core.events import EventBus, Events

    bus.subscribe(Events.APP_READY, on_ready)
    await bus.publish(Events.APP_READY, {"components": components})
"""
from .observer import Signal
from .bus import EventBus
from .constants import Events


__all__ = ["Signal", "EventBus", "Events"]

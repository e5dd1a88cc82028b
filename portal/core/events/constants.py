"""
Event Name Constants.

Use these constants with EventBus instead of string literals.

Usage:
    from portal.core.events import Events, EventBus

    bus.subscribe(Events.APP_READY, on_ready)
"""


class Events:
    """
    Standard event names for EventBus.

    Example:
        >>> bus.subscribe(Events.PAGE_SHOWN, handler)
    """

    # Application lifecycle - published by the bootstrap sequencer
    APP_READY = "app.ready"
    APP_FAILED = "app.failed"

    # UI events
    THEME_CHANGED = "theme.changed"
    PAGE_SHOWN = "page.shown"

    # Config events
    CONFIG_CHANGED = "config.changed"

"""
EventBus - Application-wide notifications.

Decoupled publish/subscribe keyed by event name. The bootstrap sequencer
publishes its completion through it; screens and the shell subscribe.
"""
import asyncio
import inspect
from typing import Any, Callable, Dict, List
from loguru import logger


class EventBus:
    """
    Name-keyed event bus.

    Usage:
        bus.subscribe("app.ready", handle_ready)
        await bus.publish("app.ready", {"components": [...]})
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = {}

    def subscribe(self, event: str, handler: Callable) -> None:
        """
        Subscribe to an event.

        Args:
            event: Event name (e.g., "app.ready")
            handler: Callback function (sync or async)
        """
        handlers = self._subscribers.setdefault(event, [])
        if handler not in handlers:
            handlers.append(handler)
            logger.debug(f"Subscribed to {event}: {getattr(handler, '__name__', handler)}")

    def unsubscribe(self, event: str, handler: Callable) -> None:
        """Remove a handler previously passed to subscribe()."""
        if event in self._subscribers and handler in self._subscribers[event]:
            self._subscribers[event].remove(handler)
            logger.debug(f"Unsubscribed from {event}: {getattr(handler, '__name__', handler)}")

    async def publish(self, event: str, data: Any = None) -> None:
        """
        Publish an event to all subscribers.

        Handler errors are logged and do not reach the publisher.

        Args:
            event: Event name
            data: Optional data to pass to handlers
        """
        for handler in list(self._subscribers.get(event, [])):
            try:
                result = handler(data)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Error in handler for {event}: {e}")

    def publish_sync(self, event: str, data: Any = None) -> None:
        """
        Publish an event synchronously (for UI callbacks).

        Async handlers are scheduled on the running loop.
        """
        for handler in list(self._subscribers.get(event, [])):
            try:
                if inspect.iscoroutinefunction(handler):
                    asyncio.get_running_loop().create_task(handler(data))
                else:
                    handler(data)
            except Exception as e:
                logger.error(f"Error in sync handler for {event}: {e}")

    def subscribers(self, event: str) -> List[Callable]:
        return list(self._subscribers.get(event, []))

"""
Synchronous signals.

Used for in-process notifications where the sender does not await its
listeners: component events, page changes, theme and config changes.
"""
from typing import Callable, List

from loguru import logger


class Signal:
    """
    Named list of callbacks invoked in connection order.

    A failing subscriber is logged and skipped; the remaining subscribers
    still run.
    """

    def __init__(self, name: str = "Signal"):
        self.name = name
        self._subscribers: List[Callable] = []

    def connect(self, callback: Callable) -> Callable:
        """Subscribe ``callback`` once. Returns it, so this works as a decorator."""
        if callback not in self._subscribers:
            self._subscribers.append(callback)
        return callback

    def disconnect(self, callback: Callable) -> bool:
        if callback in self._subscribers:
            self._subscribers.remove(callback)
            return True
        return False

    def emit(self, *args, **kwargs) -> int:
        """
        Call every subscriber with the given arguments.

        Returns:
            Number of subscribers that completed without raising.
        """
        delivered = 0
        for callback in list(self._subscribers):
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.opt(exception=e).error(f"{self.name}: subscriber {callback!r} failed: {e}")
                continue
            delivered += 1
        return delivered

    def clear(self) -> None:
        self._subscribers.clear()

    def __len__(self) -> int:
        return len(self._subscribers)

    def __repr__(self) -> str:
        return f"<Signal {self.name} ({len(self)} subscribers)>"

from loguru import logger

from portal.core.events import Signal

_LEVELS = {
    "info": "INFO",
    "success": "SUCCESS",
    "warning": "WARNING",
    "error": "ERROR",
}


class NotificationService:
    """
    User notifications.

    Messages are logged and re-emitted on ``on_notify(type, message)`` so a
    shell can show them as toasts.
    """

    def __init__(self):
        self.on_notify = Signal("Notify")

    def notify(self, message: str, type: str = "info") -> None:
        logger.log(_LEVELS.get(type, "INFO"), f"[{type.upper()}]: {message}")
        self.on_notify.emit(type, message)

    def success(self, message: str) -> None:
        self.notify(message, "success")

    def error(self, message: str) -> None:
        self.notify(message, "error")

    def warning(self, message: str) -> None:
        self.notify(message, "warning")

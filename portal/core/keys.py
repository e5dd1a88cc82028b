from enum import Enum
from typing import Union


class ServiceKey(str, Enum):
    """Known service categories. Plain strings are accepted alongside."""
    BLOG = "blog"
    CRYPTO = "crypto"
    COURT = "court"
    THEME = "theme"
    SPACE = "space"
    NOTIFICATION = "notification"
    STORAGE = "storage"


ServiceName = Union[ServiceKey, str]


def service_name(key: ServiceName) -> str:
    """Normalise a ServiceKey or string to the registry key."""
    if isinstance(key, Enum):
        return key.value
    return str(key)

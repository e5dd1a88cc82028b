"""
Application screens.

Each screen is a BaseComponent bound to one mount point.
"""
from .blog import BlogComponent
from .crypto import CryptoComponent
from .court import CourtComponent
from .admin import AdminComponent

# Registration order is initialization order
DEFAULT_COMPONENTS = {
    "blog": BlogComponent,
    "crypto": CryptoComponent,
    "court": CourtComponent,
    "admin": AdminComponent,
}

__all__ = [
    "BlogComponent",
    "CryptoComponent",
    "CourtComponent",
    "AdminComponent",
    "DEFAULT_COMPONENTS",
]

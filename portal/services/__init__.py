"""
Business services registered in the service registry at startup.
"""
from .storage import LocalStore
from .blog import BlogService, Post
from .crypto import CryptoService, Coin
from .court import CourtService, CourtCase, Transcript
from .theme import ThemeService
from .space import SpaceService, SpaceImage
from .notification import NotificationService

__all__ = [
    "LocalStore",
    "BlogService",
    "Post",
    "CryptoService",
    "Coin",
    "CourtService",
    "CourtCase",
    "Transcript",
    "ThemeService",
    "SpaceService",
    "SpaceImage",
    "NotificationService",
]

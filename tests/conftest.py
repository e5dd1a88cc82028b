import os

# Qt tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest  # noqa: E402

from portal.core.config import AppConfig
from portal.services import (
    BlogService,
    CourtService,
    CryptoService,
    LocalStore,
    NotificationService,
    SpaceService,
    ThemeService,
)
from portal.ui.memory_surface import MemorySurface

PORTAL_DOCUMENT = """
<html><body>
  <nav>
    <a id="nav-home" class="nav-link">Home</a>
    <a id="nav-blog" class="nav-link">Blog</a>
    <a id="nav-crypto" class="nav-link">Crypto</a>
    <a id="nav-court" class="nav-link">Court</a>
    <a id="nav-space" class="nav-link">Space</a>
    <a id="nav-admin" class="nav-link">Admin</a>
    <button id="theme-toggle">Theme</button>
  </nav>
  <div id="loading-screen"><p class="loading-text">Loading...</p></div>
  <main>
    <div id="home-page" class="page"></div>
    <div id="blog-page" class="page"><section id="blog-section"></section></div>
    <div id="crypto-page" class="page"><section id="crypto-section"></section></div>
    <div id="court-page" class="page"></div>
    <div id="space-page" class="page"></div>
    <div id="admin-page" class="page"><section id="admin-section"></section></div>
  </main>
</body></html>
"""


@pytest.fixture
def surface():
    return MemorySurface(PORTAL_DOCUMENT)


@pytest.fixture
def config(tmp_path):
    config = AppConfig()
    config.general.log_dir = ""
    config.storage.path = str(tmp_path / "store.json")
    config.downloads.directory = str(tmp_path / "downloads")
    return config


@pytest.fixture
def store():
    return LocalStore(None)


@pytest.fixture
def services(store, tmp_path):
    """One instance of every built-in service over an in-memory store."""
    return {
        "storage": store,
        "blog": BlogService(store),
        "crypto": CryptoService(),
        "court": CourtService(str(tmp_path / "downloads")),
        "theme": ThemeService(store),
        "space": SpaceService(),
        "notification": NotificationService(),
    }

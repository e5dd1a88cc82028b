"""
Desktop shell.

Builds the main window (nav bar, theme toggle, loading screen and one page
per screen), wraps it in a QtSurface and runs the bootstrap sequence on a
qasync event loop.

Usage:
    python -m portal.app [config.json]
"""
import asyncio
import sys
from typing import Dict, Optional, Tuple

from loguru import logger
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)
from qasync import QEventLoop

from portal.core.bootstrap import Application, ApplicationBuilder
from portal.core.config import ConfigManager
from portal.core.logging import setup_logging
from portal.ui.qt_surface import QtSurface

PAGES = ["home", "blog", "crypto", "court", "space", "admin"]

# Pages whose mount point exists from the start; the others get one on first show
MOUNTED_PAGES = {"blog", "crypto", "admin"}


def _with_class(widget: QWidget, name: str, css_class: str = "") -> QWidget:
    widget.setObjectName(name)
    if css_class:
        widget.setProperty("class", css_class)
    return widget


class MainWindow(QMainWindow):
    def __init__(self, title: str = "Portal"):
        super().__init__()
        self.setWindowTitle(title)
        self.resize(1200, 800)

        central = _with_class(QWidget(), "portal-root")
        layout = QVBoxLayout(central)

        nav = QHBoxLayout()
        for name in PAGES:
            nav.addWidget(_with_class(QPushButton(name.title()), f"nav-{name}", "nav-link"))
        nav.addStretch()
        nav.addWidget(_with_class(QPushButton("Theme"), "theme-toggle"))
        layout.addLayout(nav)

        self.loading = _with_class(QLabel("Loading..."), "loading-screen", "loading-text")
        layout.addWidget(self.loading)

        self.pages: Dict[str, QWidget] = {}
        for name in PAGES:
            page = _with_class(QWidget(), f"{name}-page", "page")
            page_layout = QVBoxLayout(page)
            if name in MOUNTED_PAGES:
                mount = _with_class(QTextBrowser(), f"{name}-section")
                mount.setOpenLinks(False)
                page_layout.addWidget(mount)
            elif name == "home":
                page_layout.addWidget(QLabel("Welcome to Portal"))
            page.setVisible(False)
            layout.addWidget(page)
            self.pages[name] = page

        self.setCentralWidget(central)

    def on_page_shown(self, name: str):
        for page_name, page in self.pages.items():
            page.setVisible(page_name == name)


def build_application(config_path: Optional[str] = "config.json") -> Tuple[Application, MainWindow]:
    """Create the window, surface and application without running anything."""
    config = ConfigManager(config_path).data
    setup_logging(config.general.debug_mode, config.general.log_dir, config.general.app_name)

    window = MainWindow(config.general.app_name)
    surface = QtSurface(window.centralWidget())
    app = (ApplicationBuilder(config)
           .with_surface(surface)
           .with_default_services()
           .with_default_components()
           .build())
    if app.navigator is not None:
        app.navigator.page_shown.connect(window.on_page_shown)
    return app, window


def run_app(config_path: Optional[str] = "config.json"):
    """
    Run the desktop shell until the window is closed.

    Handles:
    - Qt application setup
    - Event loop configuration
    - Async bootstrap
    - Graceful shutdown
    """
    qt_app = QApplication.instance() or QApplication(sys.argv)
    loop = QEventLoop(qt_app)
    asyncio.set_event_loop(loop)

    async def async_main() -> Tuple[Application, MainWindow]:
        app, window = build_application(config_path)
        window.show()
        if await app.bootstrap():
            await app.show_page("home")
        logger.info(f"{app.config.general.app_name} started, state: {app.state.value}")
        return app, window

    try:
        with loop:
            app, window = loop.run_until_complete(async_main())
            qt_app.lastWindowClosed.connect(loop.stop)
            loop.run_forever()
            loop.run_until_complete(app.shutdown())
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
    except RuntimeError as e:
        if "Event loop stopped" not in str(e):
            raise


if __name__ == "__main__":
    run_app(sys.argv[1] if len(sys.argv) > 1 else "config.json")

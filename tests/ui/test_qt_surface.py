"""
QtSurface against real widgets (offscreen).
"""
import pytest

QtWidgets = pytest.importorskip("PySide6.QtWidgets")

from portal.ui.qt_surface import QtSurface  # noqa: E402
from portal.ui.surface import UISurface  # noqa: E402


@pytest.fixture
def root(qtbot):
    widget = QtWidgets.QWidget()
    widget.setObjectName("portal-root")
    layout = QtWidgets.QVBoxLayout(widget)

    button = QtWidgets.QPushButton("Theme")
    button.setObjectName("theme-toggle")
    layout.addWidget(button)

    label = QtWidgets.QLabel("Loading...")
    label.setObjectName("loading-screen")
    label.setProperty("class", "loading-text")
    layout.addWidget(label)

    search = QtWidgets.QLineEdit()
    search.setObjectName("crypto-search")
    layout.addWidget(search)

    page = QtWidgets.QWidget()
    page.setObjectName("court-page")
    QtWidgets.QVBoxLayout(page)
    layout.addWidget(page)

    qtbot.addWidget(widget)
    return widget


@pytest.fixture
def surface(root):
    return QtSurface(root)


def test_satisfies_protocol(surface):
    assert isinstance(surface, UISurface)


def test_resolve_by_object_name(surface, root):
    """Mount points resolve by widget objectName."""
    assert surface.resolve("portal-root") is root
    assert surface.resolve("theme-toggle").text() == "Theme"
    assert surface.resolve("missing") is None


def test_query_by_id_and_class(surface, root):
    """Queries match by objectName or class property."""
    assert surface.query_all(root, "#crypto-search") == [surface.resolve("crypto-search")]
    assert surface.query_all(root, ".loading-text") == [surface.resolve("loading-screen")]
    assert surface.query_all(root, "div") == []


def test_click_listener(surface, qtbot):
    """Clicking a button calls the listener."""
    from PySide6.QtCore import Qt

    button = surface.resolve("theme-toggle")
    events = []
    surface.add_listener(button, "click", events.append)

    qtbot.mouseClick(button, Qt.MouseButton.LeftButton)

    assert len(events) == 1
    assert events[0].type == "click"
    assert events[0].target is button
    assert "href" not in events[0].data


def test_remove_listener_disconnects(surface):
    """A removed listener is no longer called."""
    button = surface.resolve("theme-toggle")
    events = []
    surface.add_listener(button, "click", events.append)
    surface.remove_listener(button, "click", events.append)

    button.click()

    assert events == []


def test_input_listener_and_value(surface):
    """Typing fires input listeners and updates the value."""
    search = surface.resolve("crypto-search")
    events = []
    surface.add_listener(search, "input", events.append)

    search.setText("btc")

    assert events
    assert surface.get_value(search) == "btc"


def test_hidden_class_hides_widget(surface, root):
    """The hidden class hides the widget."""
    root.show()
    label = surface.resolve("loading-screen")

    surface.add_class(label, "hidden")

    assert surface.classes(label) == ["loading-text", "hidden"]
    assert not label.isVisible()

    surface.remove_class(label, "hidden")
    assert label.isVisible()


def test_create_mount_and_markup(surface):
    """A created mount accepts markup."""
    mount = surface.create_mount("court-page", "court-section")

    assert surface.resolve("court-section") is mount
    assert surface.create_mount("court-page", "court-section") is mount

    surface.replace_markup(mount, "<h2>Court Document Search</h2>")
    assert "Court Document Search" in mount.toPlainText()


def test_markup_rejected_for_plain_widget(surface):
    """Markup cannot be set on a widget without a text view."""
    with pytest.raises(TypeError):
        surface.replace_markup(surface.resolve("court-page"), "<p>x</p>")


def test_set_text(surface):
    label = surface.resolve("loading-screen")
    surface.set_text(label, "Initialization failed. Please refresh.")
    assert label.text() == "Initialization failed. Please refresh."

"""
Qt UI surface.

Mount points are widgets looked up by object name. Markup is rich text
handed to ``setHtml`` (text browsers) or ``setText`` (labels).
"""
from typing import Any, List, Optional, Tuple

from PySide6.QtWidgets import (
    QAbstractButton,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QTextBrowser,
    QTextEdit,
    QWidget,
)
from loguru import logger

from .surface import Listener, UIEvent


class QtSurface:
    """
    UISurface implementation over a widget tree.

    Supported events:
        click  - QAbstractButton.clicked, QTextBrowser.anchorClicked,
                 QLabel.linkActivated (href in data)
        input  - QLineEdit / QTextEdit / QPlainTextEdit textChanged
        submit - QLineEdit.returnPressed
    """

    def __init__(self, root: QWidget):
        self._root = root
        self._connections: List[Tuple[QWidget, str, Listener, Any]] = []

    def root(self) -> QWidget:
        return self._root

    def resolve(self, element_id: str) -> Optional[QWidget]:
        if self._root.objectName() == element_id:
            return self._root
        return self._root.findChild(QWidget, element_id)

    def replace_markup(self, element: QWidget, markup: str) -> None:
        if isinstance(element, QTextEdit):
            element.setHtml(markup)
        elif isinstance(element, QLabel):
            element.setText(markup)
        else:
            raise TypeError(f"Widget '{element.objectName()}' cannot display markup")

    def create_mount(self, parent, element_id: str) -> QWidget:
        """Create a QTextBrowser mount point inside ``parent`` (widget or object name)."""
        existing = self.resolve(element_id)
        if existing is not None:
            return existing
        if isinstance(parent, str):
            parent = self.resolve(parent)
        if parent is None:
            parent = self._root
        mount = QTextBrowser(parent)
        mount.setObjectName(element_id)
        mount.setOpenLinks(False)
        layout = parent.layout()
        if layout is not None:
            layout.addWidget(mount)
        mount.show()
        logger.debug(f"Created mount point {element_id}")
        return mount

    def query_all(self, element: Optional[QWidget], selector: str) -> List[QWidget]:
        if element is None:
            return []
        if selector.startswith("#"):
            found = element.findChild(QWidget, selector[1:])
            return [found] if found is not None else []
        if selector.startswith("."):
            name = selector[1:]
            return [w for w in element.findChildren(QWidget) if name in self.classes(w)]
        return []

    # --- Listeners ---
    def add_listener(self, element: QWidget, event: str, handler: Listener) -> None:
        signal = self._signal_for(element, event)
        if signal is None:
            logger.warning(f"No '{event}' signal on {type(element).__name__} '{element.objectName()}'")
            return

        def slot(*args):
            data = {"args": args}
            if event == "click" and args and not isinstance(args[0], bool):
                href = args[0]
                data["href"] = href.toString() if hasattr(href, "toString") else href
            return handler(UIEvent(type=event, target=element, data=data))

        signal.connect(slot)
        self._connections.append((element, event, handler, slot))

    def remove_listener(self, element: QWidget, event: str, handler: Listener) -> None:
        for entry in list(self._connections):
            widget, name, bound, slot = entry
            if widget is element and name == event and bound == handler:
                signal = self._signal_for(widget, name)
                if signal is not None:
                    signal.disconnect(slot)
                self._connections.remove(entry)

    @staticmethod
    def _signal_for(element: QWidget, event: str):
        if event == "click":
            if isinstance(element, QAbstractButton):
                return element.clicked
            if isinstance(element, QTextBrowser):
                return element.anchorClicked
            if isinstance(element, QLabel):
                return element.linkActivated
        elif event == "input":
            if isinstance(element, (QLineEdit, QTextEdit, QPlainTextEdit)):
                return element.textChanged
        elif event == "submit":
            if isinstance(element, QLineEdit):
                return element.returnPressed
        return None

    # --- Classes / text ---
    @staticmethod
    def classes(element: QWidget) -> List[str]:
        value = element.property("class")
        return str(value).split() if value else []

    def add_class(self, element: QWidget, name: str) -> None:
        classes = self.classes(element)
        if name not in classes:
            self._set_classes(element, classes + [name])

    def remove_class(self, element: QWidget, name: str) -> None:
        classes = self.classes(element)
        if name in classes:
            self._set_classes(element, [c for c in classes if c != name])

    def _set_classes(self, element: QWidget, classes: List[str]) -> None:
        element.setProperty("class", " ".join(classes))
        element.setVisible("hidden" not in classes)
        # Re-polish so stylesheet selectors on [class~="..."] apply
        element.style().unpolish(element)
        element.style().polish(element)

    def set_text(self, element: QWidget, text: str) -> None:
        if isinstance(element, (QTextEdit, QPlainTextEdit)):
            element.setPlainText(text)
        elif hasattr(element, "setText"):
            element.setText(text)

    def get_value(self, element: Optional[QWidget]) -> str:
        if element is None:
            return ""
        if isinstance(element, (QTextEdit, QPlainTextEdit)):
            return element.toPlainText()
        if hasattr(element, "text"):
            return element.text()
        return ""

"""
Headless UI surface backed by BeautifulSoup.

Holds a parsed document, tracks listeners per element and lets scripted
sessions and tests dispatch events.

Example:
    surface = MemorySurface('<body><div id="blog-section"></div></body>')
    el = surface.resolve("blog-section")
    surface.replace_markup(el, '<button id="save">Save</button>')
    surface.add_listener(surface.resolve("save"), "click", on_save)
    surface.dispatch("#save", "click")
"""
import inspect
from typing import Any, List, Optional, Tuple, Union

from bs4 import BeautifulSoup, Tag
from loguru import logger

from .surface import Listener, UIEvent

DEFAULT_DOCUMENT = "<html><body></body></html>"


class MemorySurface:
    """In-memory document implementing the UISurface contract."""

    def __init__(self, markup: str = DEFAULT_DOCUMENT):
        self.document = BeautifulSoup(markup, "html.parser")
        self._listeners: List[Tuple[Tag, str, Listener]] = []

    # --- Lookup ---
    def root(self) -> Tag:
        return self.document.body or self.document

    def resolve(self, element_id: str) -> Optional[Tag]:
        return self.document.find(id=element_id)

    def select(self, selector: str) -> Optional[Tag]:
        return self.document.select_one(selector)

    def query_all(self, element: Optional[Tag], selector: str) -> List[Tag]:
        if element is None:
            return []
        return element.select(selector)

    # --- Mutation ---
    def replace_markup(self, element: Tag, markup: str) -> None:
        """Replace the children of ``element``; listeners on the old subtree are dropped."""
        element.clear()
        fragment = BeautifulSoup(markup, "html.parser")
        for child in list(fragment.contents):
            element.append(child.extract())
        self._prune_listeners()

    def create_mount(self, parent: Union[str, Tag, None], element_id: str, tag: str = "section") -> Tag:
        """Insert a new empty mount point under ``parent`` (the body when None)."""
        existing = self.resolve(element_id)
        if existing is not None:
            return existing
        if isinstance(parent, str):
            parent = self.resolve(parent)
        if parent is None:
            parent = self.root()
        mount = self.document.new_tag(tag, id=element_id)
        parent.append(mount)
        logger.debug(f"Created mount point #{element_id}")
        return mount

    def add_class(self, element: Tag, name: str) -> None:
        classes = self.classes(element)
        if name not in classes:
            element["class"] = classes + [name]

    def remove_class(self, element: Tag, name: str) -> None:
        classes = [c for c in self.classes(element) if c != name]
        if classes:
            element["class"] = classes
        elif element.has_attr("class"):
            del element["class"]

    def has_class(self, element: Tag, name: str) -> bool:
        return name in self.classes(element)

    @staticmethod
    def classes(element: Tag) -> List[str]:
        value = element.get("class", [])
        if isinstance(value, str):
            return value.split()
        return list(value)

    def set_text(self, element: Tag, text: str) -> None:
        element.string = text

    def get_value(self, element: Optional[Tag]) -> str:
        if element is None:
            return ""
        if element.name == "textarea":
            return element.get_text()
        if element.name == "select":
            option = element.select_one("option[selected]") or element.select_one("option")
            return option.get("value", option.get_text()) if option else ""
        return element.get("value", "")

    def set_value(self, element: Tag, value: str) -> None:
        """Simulate typing into an input or textarea, or picking a select option."""
        if element.name == "textarea":
            element.string = value
        elif element.name == "select":
            for option in element.find_all("option"):
                if option.get("value") == value:
                    option["selected"] = ""
                elif option.has_attr("selected"):
                    del option["selected"]
        else:
            element["value"] = value

    # --- Listeners ---
    def add_listener(self, element: Tag, event: str, handler: Listener) -> None:
        self._listeners.append((element, event, handler))

    def remove_listener(self, element: Tag, event: str, handler: Listener) -> None:
        self._listeners = [
            entry for entry in self._listeners
            if not (entry[0] is element and entry[1] == event and entry[2] == handler)
        ]

    def listeners(self, element: Optional[Tag] = None, event: Optional[str] = None) -> List[Listener]:
        return [
            handler for target, name, handler in self._listeners
            if (element is None or target is element) and (event is None or name == event)
        ]

    def dispatch(self, target: Union[str, Tag], event: str, **data: Any) -> List[Any]:
        """
        Fire the listeners bound to ``target`` for ``event``.

        Args:
            target: Element or CSS selector
            event: Event name ("click", "input", "submit", ...)
            **data: Extra payload stored on the UIEvent

        Returns:
            Handler return values (awaitables are returned unawaited)
        """
        element = self.select(target) if isinstance(target, str) else target
        if element is None:
            logger.warning(f"Dispatch target not found: {target}")
            return []
        ui_event = UIEvent(type=event, target=element, data=data)
        return [handler(ui_event) for handler in self.listeners(element, event)]

    async def dispatch_async(self, target: Union[str, Tag], event: str, **data: Any) -> List[Any]:
        """Like dispatch(), awaiting handlers that return awaitables."""
        results = []
        for result in self.dispatch(target, event, **data):
            if inspect.isawaitable(result):
                result = await result
            results.append(result)
        return results

    def _prune_listeners(self) -> None:
        self._listeners = [entry for entry in self._listeners if self._is_attached(entry[0])]

    def _is_attached(self, element: Tag) -> bool:
        if element is self.document:
            return True
        return any(parent is self.document for parent in element.parents)

    def __str__(self) -> str:
        return str(self.document)

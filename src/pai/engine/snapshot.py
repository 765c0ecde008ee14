"""DOM snapshot model — the narrow page interface the audit engine reads.

A snapshot is captured once from a live page (see ``pai.shared.browser``)
as plain JSON: every element with its attributes, computed style, bounding
box and click-listener flag. ``PageSnapshot`` wraps that capture in a small
element tree with the handful of queries the rule checks need.
"""

from __future__ import annotations

import html
import json
import logging
from pathlib import Path
from typing import Callable, Iterator, Protocol

from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

_VOID_TAGS = {
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "source", "track", "wbr",
}

# Form controls whose ``disabled`` attribute maps to the DOM ``disabled`` property
_DISABLEABLE_TAGS = {"button", "fieldset", "input", "optgroup", "option", "select", "textarea"}

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


class GeometryUnavailable(Exception):
    """Raised when an element has no layout box to query."""


class Rect(BaseModel):
    """A bounding client rect in CSS pixels, relative to the viewport."""

    top: float = 0.0
    left: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def right(self) -> float:
        return self.left + self.width


class Viewport(BaseModel):
    """Size of the browser viewport at capture time."""

    width: int = 1280
    height: int = 800


class CapturedNode(BaseModel):
    """One serialized element.

    ``children`` mixes text nodes (strings) and element children, given as
    indexes into ``CapturedPage.nodes``.
    """

    tag: str
    namespace: str = ""  # namespaceURI; empty means HTML
    attributes: dict[str, str] = {}
    style: dict[str, str] = {}  # computed style, CSS property names
    rect: Rect | None = None
    has_click_listener: bool = False
    disabled: bool = False
    children: list[int | str] = []


class CapturedPage(BaseModel):
    """Wire form of a snapshot, as produced by the capture script.

    Elements are stored flat in document order with ``nodes[0]`` as the
    document element, so nesting depth never reaches the validator.
    """

    url: str = ""
    viewport: Viewport = Viewport()
    nodes: list[CapturedNode] = Field(min_length=1)

    @model_validator(mode="after")
    def check_tree_links(self) -> "CapturedPage":
        attached = {0}
        for index, node in enumerate(self.nodes):
            for child in node.children:
                if isinstance(child, str):
                    continue
                if not index < child < len(self.nodes):
                    raise ValueError(f"Node {index} has out-of-order child index {child}")
                if child in attached:
                    raise ValueError(f"Node {child} has more than one parent")
                attached.add(child)
        if len(attached) != len(self.nodes):
            raise ValueError(f"{len(self.nodes) - len(attached)} node(s) are not attached to the document")
        return self


class Element:
    """A read-only element in a captured page.

    Child links are filled in by ``PageSnapshot`` once every element exists.
    """

    def __init__(self, node: CapturedNode, parent: Element | None = None) -> None:
        self.tag = node.tag.lower()
        self.namespace = node.namespace
        self.attributes = dict(node.attributes)
        self.parent = parent
        self._style = node.style
        self._rect = node.rect
        self._click_listener = node.has_click_listener
        self.disabled = node.disabled or (
            self.tag in _DISABLEABLE_TAGS and "disabled" in self.attributes
        )
        self.child_nodes: list[Element | str] = []

    def __repr__(self) -> str:
        return f"<Element {self.tag}{' #' + self.id if self.id else ''}>"

    @property
    def id(self) -> str:
        return self.attributes.get("id", "")

    @property
    def class_name(self) -> str:
        """The DOM ``className`` string. SVG elements expose none."""
        if self.is_svg:
            return ""
        return self.attributes.get("class", "")

    @property
    def is_svg(self) -> bool:
        return self.namespace == SVG_NAMESPACE

    @property
    def children(self) -> list[Element]:
        return [c for c in self.child_nodes if isinstance(c, Element)]

    @property
    def has_click_handler(self) -> bool:
        """Inline ``onclick`` attribute or a captured ``onclick`` property."""
        return "onclick" in self.attributes or self._click_listener

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def computed_style(self, prop: str, default: str = "") -> str:
        return self._style.get(prop, default)

    def bounding_box(self) -> Rect:
        if self._rect is None:
            raise GeometryUnavailable(f"{self!r} has no layout box")
        return self._rect

    def text_content(self) -> str:
        """Concatenated text of all descendant text nodes, like DOM ``textContent``."""
        parts: list[str] = []
        stack = list(reversed(self.child_nodes))
        while stack:
            node = stack.pop()
            if isinstance(node, Element):
                stack.extend(reversed(node.child_nodes))
            else:
                parts.append(node)
        return "".join(parts)

    def iter_descendants(self) -> Iterator[Element]:
        """Yield descendant elements in document order (self excluded)."""
        stack = list(reversed(self.children))
        while stack:
            el = stack.pop()
            yield el
            stack.extend(reversed(el.children))

    def find_first(self, predicate: Callable[[Element], bool]) -> Element | None:
        return next((el for el in self.iter_descendants() if predicate(el)), None)

    def _start_tag(self) -> str:
        attrs = "".join(
            f' {name}="{html.escape(value, quote=True)}"' if value != "" else f" {name}"
            for name, value in self.attributes.items()
        )
        return f"<{self.tag}{attrs}>"

    def outer_html(self, limit: int | None = None) -> str:
        """Serialized markup; stops early once ``limit`` characters are produced."""
        parts: list[str] = []
        size = 0
        # Elements still to open, or markup ready to emit
        stack: list[Element | str] = [self]
        while stack and (limit is None or size < limit):
            node = stack.pop()
            if isinstance(node, Element):
                markup = node._start_tag()
                if node.tag not in _VOID_TAGS:
                    stack.append(f"</{node.tag}>")
                    stack.extend(
                        c if isinstance(c, Element) else html.escape(c, quote=False)
                        for c in reversed(node.child_nodes)
                    )
            else:
                markup = node
            parts.append(markup)
            size += len(markup)
        text = "".join(parts)
        return text if limit is None else text[:limit]


class Snapshot(Protocol):
    """What the audit engine needs from a page."""

    url: str
    viewport: Viewport

    @property
    def document_element(self) -> Element: ...

    @property
    def body(self) -> Element | None: ...

    def query_all(self, *tags: str, attr: str | None = None) -> list[Element]: ...


class PageSnapshot:
    """In-memory snapshot built from a ``CapturedPage``."""

    def __init__(self, page: CapturedPage) -> None:
        self.url = page.url
        self.viewport = page.viewport
        elements = [Element(node) for node in page.nodes]
        for element, node in zip(elements, page.nodes):
            for child in node.children:
                if isinstance(child, str):
                    element.child_nodes.append(child)
                else:
                    elements[child].parent = element
                    element.child_nodes.append(elements[child])
        self._root = elements[0]

    @classmethod
    def from_dict(cls, data: dict) -> "PageSnapshot":
        return cls(CapturedPage.model_validate(data))

    @property
    def document_element(self) -> Element:
        return self._root

    @property
    def body(self) -> Element | None:
        return next((c for c in self._root.children if c.tag == "body"), None)

    def iter_elements(self) -> Iterator[Element]:
        """Every element in document order, root included."""
        yield self._root
        yield from self._root.iter_descendants()

    def query_all(self, *tags: str, attr: str | None = None) -> list[Element]:
        """Elements matching any of ``tags`` (all tags if none) that carry ``attr``."""
        wanted = {t.lower() for t in tags}
        return [
            el
            for el in self.iter_elements()
            if (not wanted or el.tag in wanted) and (attr is None or el.has_attribute(attr))
        ]


def load_snapshot(path: str | Path) -> PageSnapshot:
    """Load a snapshot JSON file written by ``pai audit --save-snapshot``.

    Raises ``FileNotFoundError`` if the path doesn't exist and
    ``pydantic.ValidationError`` if the content is not a captured page.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")
    data = json.loads(path.read_text(encoding="utf-8"))
    snapshot = PageSnapshot.from_dict(data)
    logger.debug("Loaded snapshot for %s from %s", snapshot.url or "(no url)", path)
    return snapshot

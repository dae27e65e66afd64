"""BeautifulSoup-backed implementation of the document-tree query capability.

Pages are parsed with the ``html5lib`` backend, which builds the same tree a
browser does: omitted end tags are implied (``<p>one<p>two`` is two
paragraphs, a ``<div>`` closes an open ``<p>``) and malformed markup never
raises. Elements that are missing simply do not match.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from bs4 import BeautifulSoup
from bs4.element import Tag

from ..types import ElementLike


class SoupElement:
    """Wrap a bs4 ``Tag`` (or the soup itself) behind ``ElementLike``."""

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SoupElement) and other._tag is self._tag

    def __hash__(self) -> int:
        return id(self._tag)

    def __repr__(self) -> str:
        return f"SoupElement(<{self.name}>)"

    @property
    def name(self) -> str:
        return self._tag.name or ""

    def find_all(
        self,
        name: str | Sequence[str],
        predicate: Callable[[ElementLike], bool] | None = None,
    ) -> list[ElementLike]:
        names = [name] if isinstance(name, str) else list(name)
        found: list[ElementLike] = []
        for tag in self._tag.find_all(names):
            element = SoupElement(tag)
            if predicate is None or predicate(element):
                found.append(element)
        return found

    def find_first(self, name: str | Sequence[str]) -> ElementLike | None:
        names = [name] if isinstance(name, str) else list(name)
        tag = self._tag.find(names)
        return SoupElement(tag) if isinstance(tag, Tag) else None

    def find_by_id(self, element_id: str) -> ElementLike | None:
        tag = self._tag.find(id=element_id)
        return SoupElement(tag) if isinstance(tag, Tag) else None

    def attr(self, name: str) -> str | None:
        value = self._tag.get(name)
        if value is None:
            return None
        # Multi-valued attributes (class, rel, ...) come back as lists
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def text(self) -> str:
        return self._tag.get_text()

    def has_class(self, class_name: str) -> bool:
        classes = self._tag.get("class") or []
        if isinstance(classes, str):
            classes = classes.split()
        return class_name in classes

    def children(self) -> list[ElementLike]:
        return [SoupElement(child) for child in self._tag.children if isinstance(child, Tag)]

    def parent(self) -> ElementLike | None:
        parent = self._tag.parent
        return SoupElement(parent) if isinstance(parent, Tag) else None


def parse_html(html: str) -> ElementLike:
    """Parse ``html`` with HTML5 tree-building rules and return the document root."""

    return SoupElement(BeautifulSoup(html or "", "html5lib"))


__all__ = ["SoupElement", "parse_html"]

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol


class ElementLike(Protocol):
    """Minimal document-tree query capability the extractor relies on.

    Any lenient HTML parser can provide it; ``studyhub.parser.html_tree``
    implements it over BeautifulSoup.
    """

    @property
    def name(self) -> str:  # pragma: no cover - typing
        ...

    def find_all(
        self, name: str | Sequence[str], predicate: Callable[[ElementLike], bool] | None = ...
    ) -> list[ElementLike]:  # pragma: no cover - typing
        ...

    def find_first(self, name: str | Sequence[str]) -> ElementLike | None:  # pragma: no cover
        ...

    def find_by_id(self, element_id: str) -> ElementLike | None:  # pragma: no cover - typing
        ...

    def attr(self, name: str) -> str | None:  # pragma: no cover - typing
        ...

    def text(self) -> str:  # pragma: no cover - typing
        ...

    def has_class(self, class_name: str) -> bool:  # pragma: no cover - typing
        ...

    def children(self) -> list[ElementLike]:  # pragma: no cover - typing
        ...

    def parent(self) -> ElementLike | None:  # pragma: no cover - typing
        ...


@dataclass(frozen=True)
class ExtractedImage:
    src: str
    alt: str
    page_no: int  # 1-based, contiguous after dedup


@dataclass(frozen=True)
class Section:
    """One extracted unit of content: an accordion panel or a whole page."""

    title: str
    images: list[ExtractedImage] = field(default_factory=list)
    text_blocks: list[str] = field(default_factory=list)
    term_date_label: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.images and not self.text_blocks

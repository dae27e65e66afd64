"""Extract material sections from course pages.

Two layouts are supported:

- accordion pages (exam and test papers), where every ``<label for="accordion...">``
  opens the next sibling ``.content`` panel holding one paper variant
- regular pages, where the whole document is a single material item

Both produce ``Section`` values carrying normalized, deduplicated images and
text blocks; sections with neither are dropped.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from typing import TypeVar

from ..types import ElementLike, ExtractedImage, Section
from .html_tree import parse_html
from .paths import html_base_name, normalize_image_src

logger = logging.getLogger(__name__)

T = TypeVar("T")

ACCORDION_LABEL_PREFIX = "accordion"
CONTENT_CLASS = "content"
TEXT_BLOCK_TAGS = ("pre", "p")

_WS_RE = re.compile(r"\s+")


def clean_text(value: str | None) -> str:
    return _WS_RE.sub(" ", value or "").strip()


def _is_accordion_label(element: ElementLike) -> bool:
    return (element.attr("for") or "").startswith(ACCORDION_LABEL_PREFIX)


def _is_content_block(element: ElementLike) -> bool:
    return element.has_class(CONTENT_CLASS)


def pair_accordion_blocks(
    siblings: Sequence[T],
    is_label: Callable[[T], bool],
    is_content: Callable[[T], bool],
) -> list[tuple[T, T]]:
    """Pair every label with the nearest following content sibling.

    Siblings between a label and its content are skipped. A label with no
    content after it is left unpaired. Two labels in a row share the same
    content block.
    """

    pairs: list[tuple[T, T]] = []
    content_idx = 0
    for label_idx, candidate in enumerate(siblings):
        if not is_label(candidate):
            continue
        if content_idx <= label_idx:
            content_idx = label_idx + 1
        while content_idx < len(siblings) and not is_content(siblings[content_idx]):
            content_idx += 1
        if content_idx >= len(siblings):
            break
        pairs.append((candidate, siblings[content_idx]))
    return pairs


def collect_images(scope: ElementLike, file_rel_path: str) -> list[ExtractedImage]:
    """Collect ``<img>`` elements under ``scope`` in document order.

    Sources are normalized against ``file_rel_path``; images without a usable
    source are skipped. Repeated sources keep their first occurrence and page
    numbers are reassigned 1..k over the survivors.
    """
    seen: set[str] = set()
    images: list[ExtractedImage] = []
    for position, img in enumerate(scope.find_all("img"), start=1):
        src = normalize_image_src(file_rel_path, img.attr("src"))
        if not src or src in seen:
            continue
        seen.add(src)
        alt = clean_text(img.attr("alt") or f"Material page {position}")
        images.append(ExtractedImage(src=src, alt=alt, page_no=len(images) + 1))
    return images


def collect_text_blocks(scope: ElementLike) -> list[str]:
    blocks = (clean_text(el.text()) for el in scope.find_all(TEXT_BLOCK_TAGS))
    # dict preserves first-appearance order
    return list(dict.fromkeys(block for block in blocks if block))


def _accordion_pairs(root: ElementLike) -> list[tuple[ElementLike, ElementLike]]:
    pairs: list[tuple[ElementLike, ElementLike]] = []
    paired_by_parent: dict[ElementLike, dict[ElementLike, ElementLike]] = {}
    for label in root.find_all("label", _is_accordion_label):
        parent = label.parent()
        if parent is None:  # pragma: no cover - every parsed tag has a parent
            continue
        if parent not in paired_by_parent:
            paired_by_parent[parent] = dict(
                pair_accordion_blocks(parent.children(), _is_accordion_label, _is_content_block)
            )
        content = paired_by_parent[parent].get(label)
        if content is None:
            logger.debug("Accordion label %r has no content block", clean_text(label.text()))
            continue
        pairs.append((label, content))
    return pairs


def extract_accordion_sections(html: str, file_rel_path: str) -> list[Section]:
    """Extract one section per accordion label of an exam/test page."""

    root = parse_html(html)
    fallback_title = html_base_name(file_rel_path)
    sections: list[Section] = []

    for label, content in _accordion_pairs(root):
        label_text = clean_text(label.text())
        images = collect_images(content, file_rel_path)
        text_blocks = collect_text_blocks(content)
        if not images and not text_blocks:
            logger.debug("%s: dropping empty accordion section %r", file_rel_path, label_text)
            continue

        heading = content.find_first("h1")
        heading_text = clean_text(heading.text()) if heading is not None else ""
        sections.append(
            Section(
                title=heading_text or label_text or fallback_title,
                images=images,
                text_blocks=text_blocks,
                term_date_label=label_text or None,
            )
        )

    return sections


def parse_regular_item(html: str, file_rel_path: str) -> Section | None:
    """Treat the whole page as one section; ``None`` when it holds nothing."""

    root = parse_html(html)
    images = collect_images(root, file_rel_path)
    text_blocks = collect_text_blocks(root)
    if not images and not text_blocks:
        return None

    title_el = root.find_first("title")
    title = clean_text(title_el.text()) if title_el is not None else ""
    return Section(
        title=title or html_base_name(file_rel_path),
        images=images,
        text_blocks=text_blocks,
    )


__all__ = [
    "clean_text",
    "collect_images",
    "collect_text_blocks",
    "extract_accordion_sections",
    "pair_accordion_blocks",
    "parse_regular_item",
]

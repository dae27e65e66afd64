from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from studyhub.model.options import DEFAULT_NON_SUBJECT_PAGES
from studyhub.parser.html_tree import parse_html
from studyhub.parser.sections import clean_text

logger = logging.getLogger(__name__)

HEADER_CONFIG_ID = "header-config"


def read_html(path: Path) -> str:
    # Pages are UTF-8; undecodable bytes are replaced rather than aborting the run
    return path.read_text(encoding="utf-8", errors="replace")


def subject_name_from_html(html: str, subject_code: str) -> str:
    """Pick the display name configured in a subject's landing page.

    Priority: header config ``data-title``, ``<title>``, header config
    ``data-menu-links``, then the subject code itself.
    """
    root = parse_html(html)
    header = root.find_by_id(HEADER_CONFIG_ID)
    title_el = root.find_first("title")

    candidates = [
        header.attr("data-title") if header is not None else None,
        title_el.text() if title_el is not None else None,
        header.attr("data-menu-links") if header is not None else None,
    ]
    for candidate in candidates:
        cleaned = clean_text(candidate)
        if cleaned:
            return cleaned
    return subject_code


def resolve_subject_name(
    root: Path,
    subject_code: str,
    non_subject_pages: Iterable[str] = DEFAULT_NON_SUBJECT_PAGES,
) -> str:
    """Resolve the display name for ``subject_code`` from ``<root>/<code>.html``."""

    page_name = f"{subject_code}.html"
    if page_name in set(non_subject_pages):
        return subject_code
    page = root / page_name
    if not page.is_file():
        logger.debug("No name page for %s; using the subject code", subject_code)
        return subject_code
    return subject_name_from_html(read_html(page), subject_code)


__all__ = ["read_html", "resolve_subject_name", "subject_name_from_html"]

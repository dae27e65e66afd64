from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from studyhub.model.options import DEFAULT_IGNORED_DIRS
from studyhub.parser.paths import is_html_file, natural_sort_key

logger = logging.getLogger(__name__)


def list_html_files(directory: Path) -> list[str]:
    """Return the ``.html`` file names in ``directory`` in natural order.

    Listing errors propagate to the caller.
    """
    names = [p.name for p in directory.iterdir() if is_html_file(p.name) and p.is_file()]
    return sorted(names, key=natural_sort_key)


def list_subject_directories(
    root: Path, ignored: Iterable[str] = DEFAULT_IGNORED_DIRS
) -> list[str]:
    """Return the names of subject directories directly under ``root``.

    A directory is a subject when it is not ignored and holds at least one
    ``.html`` file. Names are sorted with plain string ordering.
    """
    ignored_names = set(ignored)
    subjects: list[str] = []
    for child in root.iterdir():
        if not child.is_dir() or child.name in ignored_names:
            continue
        if not list_html_files(child):
            logger.debug("Skipping %s: no HTML pages", child.name)
            continue
        subjects.append(child.name)
    return sorted(subjects)


__all__ = ["list_html_files", "list_subject_directories"]

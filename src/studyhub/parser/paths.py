from __future__ import annotations

import os
import posixpath
import re

_ABSOLUTE_PREFIXES = ("http://", "https://", "data:")
_DIGITS_RE = re.compile(r"(\d+)")


def to_posix(path: str) -> str:
    return path.replace(os.sep, "/") if os.sep != "/" else path


def html_base_name(path: str) -> str:
    """Return the file name of ``path`` without its ``.html`` extension."""

    name = posixpath.basename(to_posix(path))
    # only the lowercase extension is stripped; "Exams.HTML" keeps its suffix
    if name.endswith(".html"):
        return name[: -len(".html")]
    return name


def is_html_file(name: str) -> bool:
    return name.lower().endswith(".html")


def natural_sort_key(value: str) -> tuple[tuple[str | int, ...], str]:
    """Sort key comparing digit runs numerically ("Module 2" < "Module 10").

    Text runs compare case-insensitively; the raw value breaks ties so the
    order is total.
    """

    parts = _DIGITS_RE.split(value)
    # re.split with a capture group alternates text/digits starting with text,
    # so every position holds the same type across keys.
    key = tuple(int(part) if i % 2 else part.casefold() for i, part in enumerate(parts))
    return key, value


def normalize_image_src(file_rel_path: str, raw_src: str | None) -> str:
    """Resolve an ``<img src>`` against the page that references it.

    - blank -> "" (no image)
    - http(s): and data: references are returned trimmed but otherwise unchanged
    - backslashes become "/", the path is joined to the page directory,
      "." and ".." segments collapse and a leading "./" is removed
    - a path that already starts with the page's top-level directory is taken
      as repo-relative and only collapsed, so normalizing twice is a no-op,
      including for sources that climbed out of a nested directory with ".."

    A source that climbs above the page's top-level directory (for example
    "../shared/x.png" from "A/page.html" gives "shared/x.png") cannot be told
    apart from a page-relative path and is re-anchored if normalized again.
    """

    if not raw_src:
        return ""
    cleaned = raw_src.strip()
    if not cleaned:
        return ""
    if cleaned.startswith(_ABSOLUTE_PREFIXES):
        return cleaned

    cleaned = cleaned.replace("\\", "/")
    base_dir = posixpath.dirname(to_posix(file_rel_path)) or "."
    top_dir = base_dir.split("/", 1)[0]
    if base_dir != "." and posixpath.normpath(cleaned).startswith(f"{top_dir}/"):
        normalized = posixpath.normpath(cleaned)
    else:
        normalized = posixpath.normpath(f"{base_dir}/{cleaned}")
    if normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


__all__ = [
    "html_base_name",
    "is_html_file",
    "natural_sort_key",
    "normalize_image_src",
    "to_posix",
]

"""JSON serialization for the catalog and manifest artifacts.

Output is formatted the way the reader application's fixtures are: two-space
indentation, non-ASCII characters kept as-is, and a trailing newline. Key
order follows the model's ``to_dict`` order so unchanged sources produce
byte-identical files.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any


def dump_json(data: Any) -> str:
    """Serialize ``data`` deterministically with a trailing newline."""

    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"


def load_json_file(path: Path) -> Any:
    """Read and decode a JSON document.

    Raises:
        OSError: If the file cannot be read
        json.JSONDecodeError: If the content is not valid JSON
    """
    return json.loads(path.read_text(encoding="utf-8"))


def _stage_text(path: Path, data: str, encoding: str) -> Path:
    """Write ``data`` to a synced temp file beside ``path`` and return its path.

    The temp file is removed again if writing fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with NamedTemporaryFile("w", encoding=encoding, dir=str(path.parent), delete=False) as tmp:
        tmp_path = Path(tmp.name)
        try:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        except Exception:
            tmp.close()
            tmp_path.unlink(missing_ok=True)
            raise
    return tmp_path


def atomic_write_text(path: Path, data: str, *, encoding: str = "utf-8") -> None:
    """Atomically write text to a file by writing to a temp file then replacing.

    Ensures parent directories exist and minimizes risk of partial writes.
    """
    atomic_write_texts({path: data}, encoding=encoding)


def atomic_write_texts(files: Mapping[Path, str], *, encoding: str = "utf-8") -> None:
    """Write several files so that none is replaced unless all of them staged.

    Every temp file is written and synced first; only then are they moved over
    their targets. On failure the remaining temp files are removed and the
    targets keep their previous content.
    """
    staged: list[tuple[Path, Path]] = []
    try:
        for path, data in files.items():
            staged.append((_stage_text(path, data, encoding), path))
        for tmp_path, path in staged:
            os.replace(tmp_path, path)
    except Exception:
        for tmp_path, _ in staged:
            tmp_path.unlink(missing_ok=True)
        raise


__all__ = [
    "atomic_write_text",
    "atomic_write_texts",
    "dump_json",
    "load_json_file",
]

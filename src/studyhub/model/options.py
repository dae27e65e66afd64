"""Ingestion options for studyhub.

Defaults describe the site layout the material pages were authored in:
one directory per subject beside a handful of infrastructure folders and
site-level pages that are never subjects.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from studyhub.ids import STABLE_ID_LENGTH

DEFAULT_IGNORED_DIRS = frozenset(
    {
        ".git",
        "css",
        "img",
        "js",
        "node_modules",
        "study-hub-v2",
    }
)

DEFAULT_NON_SUBJECT_PAGES = frozenset(
    {
        "Credits.html",
        "Exam Format.html",
        "Module Format.html",
        "Notes Format.html",
        "PPP PDS.html",
        "Subject Format.html",
        "Update logs.html",
        "index.html",
        "googled56de59a594a0c09.html",
    }
)

CATALOG_FILENAME = "materials.json"
MANIFEST_FILENAME = "manifest.json"


@dataclass
class IngestOptions:
    """Configuration for a single ingestion run."""

    # Source tree holding one directory per subject
    root: Path = Path(".")

    # Where materials.json and manifest.json are written
    out_dir: Path = Path("public/data")

    # Where the asset sync copies referenced images
    materials_dir: Path = Path("public/materials")

    # Top-level directories that are never subjects
    ignored_dirs: frozenset[str] = field(default_factory=lambda: DEFAULT_IGNORED_DIRS)

    # Site-level pages that must not be read as subject name pages
    non_subject_pages: frozenset[str] = field(default_factory=lambda: DEFAULT_NON_SUBJECT_PAGES)

    # Hex characters kept from the sha1 item fingerprint
    id_length: int = STABLE_ID_LENGTH

    @property
    def catalog_path(self) -> Path:
        return self.out_dir / CATALOG_FILENAME

    @property
    def manifest_path(self) -> Path:
        return self.out_dir / MANIFEST_FILENAME

    @classmethod
    def from_cli(
        cls,
        *,
        root: Path,
        out_dir: Path | None = None,
        materials_dir: Path | None = None,
        extra_ignored: Iterable[str] = (),
        id_length: int = STABLE_ID_LENGTH,
    ) -> IngestOptions:
        """Build IngestOptions from CLI argument values.

        Raises:
            ValueError: If any argument has an invalid value
        """
        if not 8 <= id_length <= 40:
            raise ValueError(f"Invalid id length {id_length}. Expected a value between 8 and 40")

        ignored = set(DEFAULT_IGNORED_DIRS)
        for name in extra_ignored:
            cleaned = name.strip().strip("/")
            if not cleaned or "/" in cleaned:
                raise ValueError(f"Invalid ignored directory '{name}'. Use a top-level directory name")
            ignored.add(cleaned)

        return cls(
            root=root,
            out_dir=out_dir if out_dir is not None else root / "public" / "data",
            materials_dir=(
                materials_dir if materials_dir is not None else root / "public" / "materials"
            ),
            ignored_dirs=frozenset(ignored),
            id_length=id_length,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization/logging."""
        return {
            "root": str(self.root),
            "out_dir": str(self.out_dir),
            "materials_dir": str(self.materials_dir),
            "ignored_dirs": sorted(self.ignored_dirs),
            "id_length": self.id_length,
        }


__all__ = [
    "CATALOG_FILENAME",
    "DEFAULT_IGNORED_DIRS",
    "DEFAULT_NON_SUBJECT_PAGES",
    "IngestOptions",
    "MANIFEST_FILENAME",
]

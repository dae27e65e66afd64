from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from studyhub.ingest.json_io import load_json_file

logger = logging.getLogger(__name__)

_ABSOLUTE_PREFIXES = ("http://", "https://", "data:")


class AssetSyncError(RuntimeError):
    pass


@dataclass(frozen=True)
class SyncResult:
    copied: int
    missing: int
    outside: int = 0  # sources that would land outside the target root

    def summary_line(self) -> str:
        line = f"Asset sync complete: copied {self.copied} files, missing {self.missing} files."
        if self.outside:
            line += f" Skipped {self.outside} outside the materials root."
        return line


def collect_image_sources(catalog: dict[str, Any]) -> list[str]:
    """Return the unique repo-relative image sources referenced by a catalog.

    Absolute URLs and data URIs are not files and are left out. Order is the
    catalog's first-reference order.
    """
    sources: dict[str, None] = {}
    for subject in catalog.get("subjects") or []:
        for category in subject.get("categories") or []:
            for item in category.get("items") or []:
                for image in item.get("images") or []:
                    src = image.get("src")
                    if not isinstance(src, str) or not src.strip():
                        continue
                    src = src.strip()
                    if src.startswith(_ABSOLUTE_PREFIXES):
                        continue
                    sources.setdefault(src, None)
    return list(sources)


def sync_material_assets(catalog_path: Path, source_root: Path, target_root: Path) -> SyncResult:
    """Copy every image the catalog references from ``source_root`` to ``target_root``.

    Relative structure is preserved. Sources that do not exist are counted as
    missing and skipped. A source whose destination would resolve outside
    ``target_root`` (a ".." climb or an absolute path) is never copied.

    Raises:
        AssetSyncError: If the catalog cannot be read or is not a catalog object
    """
    try:
        payload = load_json_file(catalog_path)
    except (OSError, json.JSONDecodeError) as exc:
        raise AssetSyncError(f"Cannot load catalog {catalog_path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise AssetSyncError(f"Catalog {catalog_path} is not a JSON object")

    copied = 0
    missing = 0
    outside = 0
    target_base = target_root.resolve()
    for rel_src in collect_image_sources(payload):
        dest_path = (target_root / rel_src).resolve()
        if not dest_path.is_relative_to(target_base):
            outside += 1
            logger.warning("Skipping asset outside the materials root: %s", rel_src)
            continue
        src_path = source_root / rel_src
        if not src_path.is_file():
            missing += 1
            logger.debug("Missing asset %s", rel_src)
            continue
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src_path, dest_path)
        copied += 1

    return SyncResult(copied=copied, missing=missing, outside=outside)


__all__ = ["AssetSyncError", "SyncResult", "collect_image_sources", "sync_material_assets"]

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from studyhub.ids import create_stable_id, material_fingerprint, slugify
from studyhub.ingest.classify import classify_category, uses_accordion_layout
from studyhub.ingest.json_io import atomic_write_texts, dump_json
from studyhub.ingest.scanner import list_html_files, list_subject_directories
from studyhub.ingest.subjects import read_html, resolve_subject_name
from studyhub.model.catalog import (
    CATEGORY_ORDER,
    Catalog,
    Category,
    CategoryType,
    Manifest,
    MaterialImage,
    MaterialItem,
    Subject,
)
from studyhub.model.options import CATALOG_FILENAME, MANIFEST_FILENAME, IngestOptions
from studyhub.parser.paths import html_base_name, natural_sort_key
from studyhub.parser.sections import extract_accordion_sections, parse_regular_item
from studyhub.types import Section

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, dict[str, int | str]], None] | None


class IngestError(RuntimeError):
    pass


def _safe_emit(on_progress: ProgressCallback, event: str, payload: dict[str, int | str]) -> None:
    if on_progress is None:
        return
    from contextlib import suppress

    with suppress(Exception):
        on_progress(event, payload)


@dataclass
class IngestTotals:
    """Running counts for one subject or a whole run.

    - materials/images: emitted items and their images
    - skipped_files: pages that produced no items
    - duplicates: items dropped because their id was already used in the subject
    """

    materials: int = 0
    images: int = 0
    skipped_files: int = 0
    duplicates: int = 0

    def add_item(self, item: MaterialItem) -> None:
        self.materials += 1
        self.images += len(item.images)

    def merge(self, other: IngestTotals) -> None:
        self.materials += other.materials
        self.images += other.images
        self.skipped_files += other.skipped_files
        self.duplicates += other.duplicates


@dataclass
class SubjectResult:
    subject: Subject | None
    totals: IngestTotals = field(default_factory=IngestTotals)


@dataclass
class IngestResult:
    catalog: Catalog
    totals: IngestTotals

    def manifest(self, generated_at: str | None = None) -> Manifest:
        return Manifest.from_catalog(self.catalog, generated_at or utc_timestamp())


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-01-31T08:00:00.000Z."""

    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def extract_file_sections(html: str, source_html: str) -> list[Section]:
    """Extract the sections of one page.

    Exam and test pages are read panel by panel; when no accordion panel
    yields content the page is read as a single regular item.
    """
    if uses_accordion_layout(html_base_name(source_html)):
        sections = extract_accordion_sections(html, source_html)
        if sections:
            return sections
        logger.debug("%s: no accordion sections, reading as a regular page", source_html)
    regular = parse_regular_item(html, source_html)
    return [regular] if regular is not None else []


def build_item(
    subject_code: str,
    source_html: str,
    section: Section,
    tags: list[str],
    id_length: int,
) -> MaterialItem:
    fingerprint = material_fingerprint(
        subject_code, source_html, section.title, section.term_date_label
    )
    return MaterialItem(
        id=create_stable_id(fingerprint, id_length),
        title=section.title,
        source_html=source_html,
        images=[
            MaterialImage(src=image.src, alt=image.alt, page_no=image.page_no)
            for image in section.images
        ],
        text_blocks=list(section.text_blocks),
        tags=list(tags),
        term_date_label=section.term_date_label,
    )


def ingest_subject(
    options: IngestOptions,
    subject_code: str,
    on_progress: ProgressCallback = None,
) -> SubjectResult:
    """Build the Subject for one directory, or ``None`` when nothing survives."""

    subject_dir = options.root / subject_code
    files = list_html_files(subject_dir)
    _safe_emit(on_progress, "subject:start", {"subject": subject_code, "file_count": len(files)})

    totals = IngestTotals()
    buckets: dict[CategoryType, Category] = {}
    seen_ids: set[str] = set()

    for file_name in files:
        source_html = f"{subject_code}/{file_name}"
        html = read_html(subject_dir / file_name)
        category_type = classify_category(source_html)
        tags = [category_type.value, html_base_name(file_name)]

        sections = extract_file_sections(html, source_html)
        if not sections:
            totals.skipped_files += 1
            logger.debug("%s: no images or text, skipped", source_html)

        for section in sections:
            item = build_item(subject_code, source_html, section, tags, options.id_length)
            if item.id in seen_ids:
                totals.duplicates += 1
                logger.debug(
                    "%s: dropping %r, id %s already used in %s",
                    source_html,
                    item.title,
                    item.id,
                    subject_code,
                )
                continue
            seen_ids.add(item.id)
            buckets.setdefault(category_type, Category(type=category_type)).items.append(item)
            totals.add_item(item)

        _safe_emit(on_progress, "file:processed", {"subject": subject_code, "file": file_name})

    categories = [buckets[t] for t in CATEGORY_ORDER if t in buckets and buckets[t].items]
    if not categories:
        logger.info("Subject %s has no extractable materials; excluded", subject_code)
        _safe_emit(on_progress, "subject:skipped", {"subject": subject_code})
        return SubjectResult(subject=None, totals=totals)

    subject = Subject(
        id=slugify(subject_code),
        code=subject_code,
        name=resolve_subject_name(options.root, subject_code, options.non_subject_pages),
        categories=categories,
    )
    _safe_emit(
        on_progress, "subject:done", {"subject": subject_code, "materials": totals.materials}
    )
    return SubjectResult(subject=subject, totals=totals)


def ingest_catalog(options: IngestOptions, on_progress: ProgressCallback = None) -> IngestResult:
    """Scan ``options.root`` and build the full catalog in memory.

    Raises:
        IngestError: If the root, a subject directory or a page cannot be read
    """
    try:
        subject_codes = list_subject_directories(options.root, options.ignored_dirs)
    except OSError as exc:
        raise IngestError(f"Cannot list source root {options.root}: {exc}") from exc

    _safe_emit(on_progress, "ingest:start", {"subject_count": len(subject_codes)})

    subjects: list[Subject] = []
    totals = IngestTotals()
    for subject_code in subject_codes:
        try:
            result = ingest_subject(options, subject_code, on_progress)
        except OSError as exc:
            raise IngestError(f"Cannot read subject {subject_code}: {exc}") from exc
        totals.merge(result.totals)
        if result.subject is not None:
            subjects.append(result.subject)

    subjects.sort(key=lambda subject: natural_sort_key(subject.code))
    _safe_emit(
        on_progress,
        "ingest:finalized",
        {"subjects": len(subjects), "materials": totals.materials, "images": totals.images},
    )
    return IngestResult(catalog=Catalog(subjects=subjects), totals=totals)


def write_outputs(
    result: IngestResult,
    out_dir: Path,
    *,
    generated_at: str | None = None,
) -> Manifest:
    """Write materials.json and manifest.json under ``out_dir``.

    Both documents are serialized and staged before either file is replaced,
    so a failed write leaves the previous pair in place.
    """
    manifest = result.manifest(generated_at)
    catalog_text = dump_json(result.catalog.to_dict())
    manifest_text = dump_json(manifest.to_dict())
    atomic_write_texts(
        {
            out_dir / CATALOG_FILENAME: catalog_text,
            out_dir / MANIFEST_FILENAME: manifest_text,
        }
    )
    logger.info("Wrote %s and %s to %s", CATALOG_FILENAME, MANIFEST_FILENAME, out_dir)
    return manifest


def run_ingest(options: IngestOptions, on_progress: ProgressCallback = None) -> IngestResult:
    """Build the catalog and write both artifacts; nothing is written on failure."""

    result = ingest_catalog(options, on_progress)
    try:
        write_outputs(result, options.out_dir)
    except OSError as exc:
        raise IngestError(f"Cannot write catalog to {options.out_dir}: {exc}") from exc
    return result


def summary_line(result: IngestResult) -> str:
    return (
        f"Ingest complete: {len(result.catalog.subjects)} subjects, "
        f"{result.totals.materials} materials, {result.totals.images} images."
    )


__all__ = [
    "IngestError",
    "IngestResult",
    "IngestTotals",
    "SubjectResult",
    "build_item",
    "extract_file_sections",
    "ingest_catalog",
    "ingest_subject",
    "run_ingest",
    "summary_line",
    "utc_timestamp",
    "write_outputs",
]

from __future__ import annotations

import json
import os
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

import pytest

from studyhub.ids import create_stable_id
from studyhub.ingest.ingestion import (
    IngestError,
    IngestTotals,
    extract_file_sections,
    ingest_catalog,
    ingest_subject,
    run_ingest,
    summary_line,
    utc_timestamp,
    write_outputs,
)
from studyhub.model.options import IngestOptions


def _options(root: Path) -> IngestOptions:
    return IngestOptions.from_cli(root=root, out_dir=root / "out")


def test_end_to_end_subject(material_tree: Path) -> None:
    result = ingest_catalog(_options(material_tree))

    assert len(result.catalog.subjects) == 1
    subject = result.catalog.subjects[0]
    assert subject.id == "tsn-2201"
    assert subject.code == "TSN 2201"
    assert subject.name == "TSN 2201"
    assert [(c.type.value, len(c.items)) for c in subject.categories] == [
        ("lecture", 1),
        ("exam", 2),
    ]

    lecture = subject.categories[0].items[0]
    assert lecture.title == "Module 1: Introduction"
    assert lecture.source_html == "TSN 2201/Module 1.html"
    assert lecture.tags == ["lecture", "Module 1"]
    assert lecture.term_date_label is None
    assert lecture.images[0].src == "TSN 2201/Images/Module 1/slide1.png"
    assert lecture.id == create_stable_id("TSN 2201|TSN 2201/Module 1.html|Module 1: Introduction|")

    exams = subject.categories[1].items
    assert [e.term_date_label for e in exams] == ["Trimester 1 2023", "Trimester 2 2023"]
    assert [e.title for e in exams] == ["Final Exam", "Trimester 2 2023"]
    assert exams[0].tags == ["exam", "Exams"]

    manifest = result.manifest("2024-01-01T00:00:00.000Z")
    assert manifest.material_count == 3
    assert manifest.image_count == 3
    assert manifest.subject_count == 1
    assert manifest.subjects[0]["counts"] == {"lecture": 1, "exam": 2}
    assert result.totals.materials == 3


def test_rerun_produces_identical_catalog(material_tree: Path) -> None:
    options = _options(material_tree)
    run_ingest(options)
    first = options.catalog_path.read_bytes()
    first_manifest = json.loads(options.manifest_path.read_text(encoding="utf-8"))

    run_ingest(options)
    assert options.catalog_path.read_bytes() == first
    second_manifest = json.loads(options.manifest_path.read_text(encoding="utf-8"))
    first_manifest.pop("generatedAt")
    second_manifest.pop("generatedAt")
    assert first_manifest == second_manifest


def test_catalog_json_shape(material_tree: Path) -> None:
    options = _options(material_tree)
    run_ingest(options)
    text = options.catalog_path.read_text(encoding="utf-8")
    assert text.endswith("}\n")
    assert text.startswith('{\n  "subjects": [')

    data = json.loads(text)
    lecture = data["subjects"][0]["categories"][0]
    assert lecture["type"] == "lecture"
    assert lecture["title"] == "Lectures"
    item = lecture["items"][0]
    assert list(item) == ["id", "title", "sourceHtml", "images", "tags"]
    assert item["images"][0] == {
        "src": "TSN 2201/Images/Module 1/slide1.png",
        "alt": "Slide 1",
        "pageNo": 1,
    }
    exam_item = data["subjects"][0]["categories"][1]["items"][0]
    assert exam_item["termDateLabel"] == "Trimester 1 2023"
    assert "textBlocks" not in exam_item

    manifest = json.loads(options.manifest_path.read_text(encoding="utf-8"))
    assert list(manifest) == [
        "generatedAt",
        "subjectCount",
        "materialCount",
        "imageCount",
        "subjects",
    ]
    assert manifest["materialCount"] == 3


def test_subject_without_extractable_items_is_excluded(
    material_tree: Path, write_page: Callable[[str, str], Path]
) -> None:
    write_page("EMPTY 1001/Module 1.html", "<html><title>Nothing</title></html>")
    write_page("EMPTY 1001/Exams.html", '<label for="accordion1">T1</label><div class="content"></div>')

    result = ingest_catalog(_options(material_tree))
    assert [s.code for s in result.catalog.subjects] == ["TSN 2201"]
    assert result.totals.skipped_files == 2


def test_subject_name_resolved_from_sibling_page(
    material_tree: Path, write_page: Callable[[str, str], Path]
) -> None:
    write_page("TSN 2201.html", '<div id="header-config" data-title="Data Networks"></div>')
    result = ingest_catalog(_options(material_tree))
    assert result.catalog.subjects[0].name == "Data Networks"


def test_subjects_sorted_numerically(tmp_path: Path, write_page: Callable[[str, str], Path]) -> None:
    for code in ["TSN 10", "TSN 9", "ABC 100"]:
        write_page(f"{code}/Notes.html", "<p>text</p>")
    result = ingest_catalog(_options(tmp_path))
    assert [s.code for s in result.catalog.subjects] == ["ABC 100", "TSN 9", "TSN 10"]


def test_duplicate_ids_within_subject_are_dropped(
    tmp_path: Path, write_page: Callable[[str, str], Path]
) -> None:
    write_page(
        "S/Exams.html",
        """
        <label for="accordion1">T1</label><div class="content"><img src="a.png"></div>
        <label for="accordion2">T1</label><div class="content"><img src="b.png"></div>
        """,
    )
    result = ingest_subject(_options(tmp_path), "S")
    assert result.subject is not None
    items = result.subject.categories[0].items
    assert len(items) == 1
    assert items[0].images[0].src == "S/a.png"
    assert result.totals.duplicates == 1
    assert result.totals.materials == 1


def test_exam_page_without_accordion_falls_back_to_regular() -> None:
    html = "<title>Exam Tips</title><p>Bring a pencil</p>"
    sections = extract_file_sections(html, "S/Exam Tips.html")
    assert len(sections) == 1
    assert sections[0].title == "Exam Tips"
    assert sections[0].term_date_label is None


def test_regular_page_ignores_accordion_markup() -> None:
    html = (
        '<title>Module 3</title><label for="accordion1">Part A</label>'
        '<div class="content"><img src="a.png"></div>'
    )
    sections = extract_file_sections(html, "S/Module 3.html")
    assert len(sections) == 1
    assert sections[0].term_date_label is None
    assert sections[0].title == "Module 3"


def test_missing_root_raises_ingest_error(tmp_path: Path) -> None:
    with pytest.raises(IngestError):
        ingest_catalog(_options(tmp_path / "missing"))


def test_failure_writes_nothing(
    material_tree: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    options = _options(material_tree)

    def boom(path: Path) -> str:
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr("studyhub.ingest.ingestion.read_html", boom)
    with pytest.raises(IngestError):
        run_ingest(options)
    assert not options.catalog_path.exists()
    assert not options.manifest_path.exists()


def test_failed_manifest_write_keeps_previous_outputs(
    material_tree: Path,
    write_page: Callable[[str, str], Path],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    options = _options(material_tree)
    run_ingest(options)
    catalog_before = options.catalog_path.read_bytes()
    manifest_before = options.manifest_path.read_bytes()
    write_page("TSN 2201/Notes.html", "<p>new notes</p>")

    real_fsync = os.fsync
    calls: list[int] = []

    def fsync_fails_second_time(fd: int) -> None:
        calls.append(fd)
        if len(calls) == 2:
            raise OSError(28, "No space left on device")
        real_fsync(fd)

    monkeypatch.setattr("studyhub.ingest.json_io.os.fsync", fsync_fails_second_time)
    with pytest.raises(IngestError):
        run_ingest(options)

    assert options.catalog_path.read_bytes() == catalog_before
    assert options.manifest_path.read_bytes() == manifest_before
    assert sorted(p.name for p in options.out_dir.iterdir()) == ["manifest.json", "materials.json"]


def test_progress_events_emitted(material_tree: Path) -> None:
    events: list[tuple[str, dict[str, int | str]]] = []

    def on_progress(event: str, payload: dict[str, int | str]) -> None:
        events.append((event, payload))

    ingest_catalog(_options(material_tree), on_progress=on_progress)
    names = [e[0] for e in events]
    assert names[0] == "ingest:start"
    assert names.count("file:processed") == 2
    assert "subject:done" in names
    assert names[-1] == "ingest:finalized"
    assert events[-1][1] == {"subjects": 1, "materials": 3, "images": 3}


def test_progress_callback_errors_are_ignored(material_tree: Path) -> None:
    def on_progress(event: str, payload: dict[str, int | str]) -> None:
        raise RuntimeError("display failed")

    result = ingest_catalog(_options(material_tree), on_progress=on_progress)
    assert result.totals.materials == 3


def test_write_outputs_uses_given_timestamp(material_tree: Path) -> None:
    options = _options(material_tree)
    result = ingest_catalog(options)
    write_outputs(result, options.out_dir, generated_at="2024-05-01T10:00:00.000Z")
    manifest = json.loads(options.manifest_path.read_text(encoding="utf-8"))
    assert manifest["generatedAt"] == "2024-05-01T10:00:00.000Z"


def test_utc_timestamp_format() -> None:
    moment = datetime(2024, 1, 31, 8, 5, 9, 123456, tzinfo=timezone.utc)
    assert utc_timestamp(moment) == "2024-01-31T08:05:09.123Z"


def test_totals_merge_and_summary(material_tree: Path) -> None:
    totals = IngestTotals(materials=1, images=2)
    totals.merge(IngestTotals(materials=2, images=3, skipped_files=1, duplicates=4))
    assert totals == IngestTotals(materials=3, images=5, skipped_files=1, duplicates=4)

    result = ingest_catalog(_options(material_tree))
    assert summary_line(result) == "Ingest complete: 1 subjects, 3 materials, 3 images."

from __future__ import annotations

from studyhub.model.catalog import CategoryType

# Checked in order; the first group with a keyword in the path wins, so a
# "Module Test.html" page is a lecture.
_KEYWORD_GROUPS: tuple[tuple[tuple[str, ...], CategoryType], ...] = (
    (("module", "lecture"), CategoryType.LECTURE),
    (("tutorial",), CategoryType.TUTORIAL),
    (("test",), CategoryType.TEST),
    (("exam",), CategoryType.EXAM),
    (("notes",), CategoryType.NOTES),
    (("lab",), CategoryType.LAB),
    (("quiz",), CategoryType.QUIZ),
)


def classify_category(relative_path: str) -> CategoryType:
    """Map a source-relative page path to its material category."""

    normalized = relative_path.lower()
    for keywords, category in _KEYWORD_GROUPS:
        if any(keyword in normalized for keyword in keywords):
            return category
    return CategoryType.OTHER


def uses_accordion_layout(file_name: str) -> bool:
    """Exam and test pages hold one accordion panel per paper variant."""

    lowered = file_name.lower()
    return "exam" in lowered or "test" in lowered


__all__ = ["classify_category", "uses_accordion_layout"]

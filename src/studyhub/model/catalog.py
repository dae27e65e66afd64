"""Catalog data structures consumed by the reader application.

The JSON produced from these classes is a compatibility contract with the
viewer: key names are camelCase and optional keys are omitted rather than
written as ``null``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CategoryType(Enum):
    """Material categories, declared in display priority order."""

    LECTURE = "lecture"
    TUTORIAL = "tutorial"
    TEST = "test"
    EXAM = "exam"
    NOTES = "notes"
    LAB = "lab"
    QUIZ = "quiz"
    OTHER = "other"

    @property
    def title(self) -> str:
        return CATEGORY_TITLES[self]


CATEGORY_ORDER: tuple[CategoryType, ...] = tuple(CategoryType)

CATEGORY_TITLES: dict[CategoryType, str] = {
    CategoryType.LECTURE: "Lectures",
    CategoryType.TUTORIAL: "Tutorials",
    CategoryType.TEST: "Tests",
    CategoryType.EXAM: "Exam Papers",
    CategoryType.NOTES: "Notes",
    CategoryType.LAB: "Labs",
    CategoryType.QUIZ: "Quizzes",
    CategoryType.OTHER: "Other Materials",
}


@dataclass(slots=True)
class MaterialImage:
    src: str
    alt: str
    page_no: int  # 1-based

    def to_dict(self) -> dict[str, Any]:
        return {"src": self.src, "alt": self.alt, "pageNo": self.page_no}


@dataclass(slots=True)
class MaterialItem:
    id: str
    title: str
    source_html: str
    images: list[MaterialImage] = field(default_factory=list)
    text_blocks: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    term_date_label: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "sourceHtml": self.source_html,
            "images": [image.to_dict() for image in self.images],
        }
        if self.text_blocks:
            data["textBlocks"] = list(self.text_blocks)
        data["tags"] = list(self.tags)
        if self.term_date_label:
            data["termDateLabel"] = self.term_date_label
        return data


@dataclass(slots=True)
class Category:
    type: CategoryType
    items: list[MaterialItem] = field(default_factory=list)

    @property
    def title(self) -> str:
        return self.type.title

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "title": self.title,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(slots=True)
class Subject:
    id: str
    code: str
    name: str
    categories: list[Category] = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        return {category.type.value: len(category.items) for category in self.categories}

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "categories": [category.to_dict() for category in self.categories],
        }


@dataclass(slots=True)
class Catalog:
    subjects: list[Subject] = field(default_factory=list)

    def all_items(self) -> list[MaterialItem]:
        return [
            item
            for subject in self.subjects
            for category in subject.categories
            for item in category.items
        ]

    def to_dict(self) -> dict[str, Any]:
        return {"subjects": [subject.to_dict() for subject in self.subjects]}


@dataclass(slots=True)
class Manifest:
    generated_at: str  # ISO-8601, UTC
    subject_count: int
    material_count: int
    image_count: int
    subjects: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_catalog(cls, catalog: Catalog, generated_at: str) -> Manifest:
        items = catalog.all_items()
        return cls(
            generated_at=generated_at,
            subject_count=len(catalog.subjects),
            material_count=len(items),
            image_count=sum(len(item.images) for item in items),
            subjects=[
                {
                    "id": subject.id,
                    "code": subject.code,
                    "name": subject.name,
                    "counts": subject.counts(),
                }
                for subject in catalog.subjects
            ],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "generatedAt": self.generated_at,
            "subjectCount": self.subject_count,
            "materialCount": self.material_count,
            "imageCount": self.image_count,
            "subjects": [dict(entry) for entry in self.subjects],
        }


__all__ = [
    "CATEGORY_ORDER",
    "CATEGORY_TITLES",
    "Catalog",
    "Category",
    "CategoryType",
    "Manifest",
    "MaterialImage",
    "MaterialItem",
    "Subject",
]

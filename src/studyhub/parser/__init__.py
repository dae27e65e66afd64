from __future__ import annotations

__all__ = [
    "ElementLike",
    "ExtractedImage",
    "Section",
    "clean_text",
    "collect_images",
    "collect_text_blocks",
    "extract_accordion_sections",
    "html_base_name",
    "natural_sort_key",
    "normalize_image_src",
    "pair_accordion_blocks",
    "parse_html",
    "parse_regular_item",
    "to_posix",
]

# Re-export types (explicit alias marks intent for linters)
from ..types import ElementLike as ElementLike
from ..types import ExtractedImage as ExtractedImage
from ..types import Section as Section

# Re-export primary functions from submodules (explicit alias)
from .html_tree import parse_html as parse_html
from .paths import html_base_name as html_base_name
from .paths import natural_sort_key as natural_sort_key
from .paths import normalize_image_src as normalize_image_src
from .paths import to_posix as to_posix
from .sections import clean_text as clean_text
from .sections import collect_images as collect_images
from .sections import collect_text_blocks as collect_text_blocks
from .sections import extract_accordion_sections as extract_accordion_sections
from .sections import pair_accordion_blocks as pair_accordion_blocks
from .sections import parse_regular_item as parse_regular_item

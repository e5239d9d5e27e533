"""
Section extractors for detail pages.

Add a section by implementing SectionExtractor and adding it to
get_default_extractors() in registry.py.
"""

from orsr_parser.parsing.sections.base import SectionExtractor, TextSection
from orsr_parser.parsing.sections.registry import SectionRegistry, get_default_extractors

__all__ = [
    "SectionExtractor",
    "SectionRegistry",
    "TextSection",
    "get_default_extractors",
]

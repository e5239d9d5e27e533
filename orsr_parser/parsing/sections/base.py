"""
Base interface for detail page section extractors.

Each recognized section of a detail page (court, company name, registered
office, officers, ...) is handled by one SectionExtractor. Extractors are
plugged into a SectionRegistry in a fixed priority order; the first extractor
whose label matches a row handles it.
"""

import re
from abc import ABC, abstractmethod
from typing import Any

from orsr_parser.parsing.markup import HtmlDocument
from orsr_parser.parsing.text import collapse_whitespace, join_fragments, label_key

# Value rows of the nested table in a value cell
ENTRY_CELLS = ".//table/tr/td[1]"
# Inline fragments (spans, line breaks) of a multi-line value cell
ENTRY_FRAGMENTS = ".//table/tr/td[1]/*"
# Same, relative to one nested table
TABLE_FRAGMENTS = ".//tr/td[1]/*"
TABLE_VALIDITY = ".//tr/td[2]"


class SectionExtractor(ABC):
    """
    Base interface for section extractors.

    Subclasses set `labels` (matched case and accent insensitive against the
    row label) and implement `extract`.

    Example:
        class IcoSection(SectionExtractor):
            labels = ("IČO",)

            @property
            def field_name(self) -> str:
                return "ico"

            def extract(self, label, node, doc, record):
                return {"ico": cell_text(doc, node)}
    """

    labels: tuple[str, ...] = ()

    # List sections report [] instead of omitting the key
    always_list: bool = False

    @property
    @abstractmethod
    def field_name(self) -> str:
        """
        Primary key of this extractor in the record.

        Returns:
            Record key (e.g. "obchodne_meno", "adresa")
        """
        pass

    @abstractmethod
    def extract(self, label: str, node, doc: HtmlDocument, record: dict[str, Any]) -> dict[str, Any]:
        """
        Extract a fragment from one section row.

        Args:
            label: Collapsed text of the row label (first column)
            node: Value cell (second column) or None
            doc: Document used to query the value cell
            record: Record accumulated from the rows processed so far (read only)

        Returns:
            Fragment to merge into the record, empty dict when nothing was found
        """
        pass

    def matches(self, key: str) -> bool:
        """True if one of the labels occurs in the folded row label."""
        for label in self.labels:
            if re.search(r"(?<!\w)" + re.escape(label_key(label)), key):
                return True
        return False

    def empty_fragment(self) -> dict[str, Any]:
        """Fragment reported for a row with an empty value cell."""
        return {self.field_name: []} if self.always_list else {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.field_name})"


class TextSection(SectionExtractor):
    """Section whose value is the plain text of the nested value table."""

    def __init__(self, field_name: str, labels: tuple[str, ...], path: str = ENTRY_CELLS):
        self._field_name = field_name
        self.labels = labels
        self.path = path

    @property
    def field_name(self) -> str:
        return self._field_name

    def extract(self, label, node, doc, record):
        text = cell_text(doc, node, self.path)
        return {self.field_name: text} if text else {}


def cell_entries(doc: HtmlDocument, node, path: str = ENTRY_CELLS) -> list[str]:
    """Collapsed, non-empty texts of all nodes matching path below node."""
    if node is None:
        return []
    entries = [collapse_whitespace(doc.text(match)) for match in doc.query(path, node)]
    return [entry for entry in entries if entry]


def cell_text(doc: HtmlDocument, node, path: str = ENTRY_CELLS) -> str:
    """Entries of a value cell joined into one line."""
    return " ".join(cell_entries(doc, node, path))


def entry_lines(doc: HtmlDocument, node, path: str = ENTRY_FRAGMENTS) -> str:
    """
    Multi-line value cell as one comma separated line.

    Example:
        <span>Tuhovská 3</span><br/><span>Bratislava 831 06</span><br/>
        -> "Tuhovská 3, Bratislava 831 06"
    """
    if node is None:
        return ""
    return join_fragments([doc.text(fragment) for fragment in doc.query(path, node)])


def nested_tables(doc: HtmlDocument, node) -> list:
    """Tables inside a value cell, one per repeating entry."""
    if node is None:
        return []
    return doc.query(".//table", node)

"""
Search result page extraction.

A search page lists matching entities in its third table, one row per entity:
td[2] holds the name, td[3] the links to the current and full extract.
Person searches add a company column, shifting the links to td[4].
"""

import logging
from collections.abc import Callable

from orsr_parser.constants import SEARCH_RESULTS_XPATH
from orsr_parser.parsing.markup import HtmlDocument, MarkupLoader
from orsr_parser.parsing.text import collapse_whitespace

logger = logging.getLogger(__name__)

# (name cell, document) -> (label, link) or None to skip the row
RowFormatter = Callable[[object, HtmlDocument], "tuple[str, str] | None"]


def format_entity_row(row, doc: HtmlDocument) -> tuple[str, str] | None:
    """
    Label a company search row.

    Double quotes are dropped; some companies carry them in their name.
    The first link is the current extract.
    """
    label = collapse_whitespace(doc.text(row).replace('"', ""))
    link = doc.first("../td[3]//a/@href", row)
    if not label or not link:
        return None
    return label, str(link)


def format_person_row(row, doc: HtmlDocument) -> tuple[str, str] | None:
    """
    Label a person search row as "Person (Company)".

    Example:
        "Ján Kováč (Matador s.r.o.)" -> "vypis.asp?ID=208887&SID=3&P=0"
    """
    person = collapse_whitespace(doc.text(row))
    company = collapse_whitespace(doc.text(doc.first("../td[3]", row)))
    link = doc.first("../td[4]//a/@href", row)
    if not person or not link:
        return None
    return f"{person} ({company})", str(link)


def extract_search_results(
    raw: bytes | str,
    formatter: RowFormatter | None = None,
    loader: MarkupLoader | None = None,
) -> dict[str, str]:
    """
    Extract label -> detail link pairs from a search result page.

    Entities sharing a name under different IDs get numbered labels
    ("Matador s.r.o.", "Matador s.r.o. (2)"); a row repeating an already
    listed link is skipped.

    Args:
        raw: Page bytes (windows-1250) or decoded text
        formatter: Row formatter (default: format_entity_row)
        loader: Markup loader (default: repairing, strict)

    Returns:
        Ordered mapping of label to partial link, e.g.
        {"Matador s.r.o.": "vypis.asp?ID=1234&SID=2&P=0"}
    """
    loader = loader or MarkupLoader()
    formatter = formatter or format_entity_row
    doc = loader.load(raw)

    results: dict[str, str] = {}
    for row in doc.query(SEARCH_RESULTS_XPATH):
        item = formatter(row, doc)
        if item is None:
            continue
        label, link = item
        if link in results.values():
            continue
        results[unique_label(label, results)] = link

    logger.debug(f"Found {len(results)} search results")
    return results


def unique_label(label: str, taken) -> str:
    """Return label, or label with the first free " (n)" suffix."""
    if label not in taken:
        return label
    n = 2
    while f"{label} ({n})" in taken:
        n += 1
    return f"{label} ({n})"

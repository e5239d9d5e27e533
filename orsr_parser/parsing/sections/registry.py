"""
Dispatch of detail page rows to section extractors.

The registry walks the content blocks of a detail page, reads the label of
every row and hands the row to the first extractor whose label matches.
Extractor order is the priority order: more specific labels come first.
"""

import logging
from typing import Any

from orsr_parser.constants import DETAIL_SKIP_BLOCKS
from orsr_parser.parsing.markup import HtmlDocument
from orsr_parser.parsing.sections.base import SectionExtractor, TextSection
from orsr_parser.parsing.sections.capital import CapitalSection, ContributionsSection, SharesSection
from orsr_parser.parsing.sections.company import (
    ActivitiesSection,
    AddressSection,
    CompanyNameSection,
    CourtSection,
    FooterDateSection,
    IcoSection,
    LegalFactsSection,
    RegistrationSection,
)
from orsr_parser.parsing.sections.persons import (
    LiquidatorsSection,
    PartnersSection,
    StatutoryBodySection,
    SupervisoryBoardSection,
)
from orsr_parser.parsing.text import collapse_whitespace, label_key

logger = logging.getLogger(__name__)


class SectionRegistry:
    """
    Ordered collection of section extractors.

    Args:
        extractors: Extractors in priority order (default: get_default_extractors())
        skip_blocks: Number of leading page blocks holding page furniture
    """

    def __init__(self, extractors: list[SectionExtractor] | None = None, skip_blocks: int = DETAIL_SKIP_BLOCKS):
        self.extractors = list(extractors) if extractors is not None else get_default_extractors()
        self.skip_blocks = skip_blocks

    def find(self, label: str) -> SectionExtractor | None:
        """Return the first extractor matching a row label, or None."""
        key = label_key(label)
        for extractor in self.extractors:
            if extractor.matches(key):
                return extractor
        return None

    def iter_rows(self, doc: HtmlDocument):
        """
        Yield (label, value node) for every labelled row of the content blocks.

        Value node is None for rows without a second column.
        """
        blocks = doc.query("/html/body/*")
        for block in blocks[self.skip_blocks :]:
            for row in block:
                # Skip comments and processing instructions
                if not isinstance(row.tag, str):
                    continue
                label = collapse_whitespace(doc.text(doc.first(".//td[1]", row)))
                if not label:
                    continue
                yield label, doc.first(".//td[2]", row)

    def run(self, doc: HtmlDocument, assembler) -> dict[str, Any]:
        """
        Extract all recognized rows of a document.

        Each extractor receives the record accumulated so far; its fragment is
        merged through the assembler. A failing extractor is logged and skipped.

        Args:
            doc: Loaded detail page
            assembler: Object with `record` and `merge(fragment)`

        Returns:
            The accumulated record
        """
        for label, node in self.iter_rows(doc):
            extractor = self.find(label)
            if extractor is None:
                continue
            try:
                fragment = extractor.extract(label, node, doc, assembler.record)
            except Exception as e:
                logger.debug(f"Section {extractor.field_name} failed for label {label!r}: {e}")
                # Continue with other sections even if one fails
                continue
            if not fragment:
                fragment = extractor.empty_fragment()
            assembler.merge(fragment)
        return assembler.record


def get_default_extractors() -> list[SectionExtractor]:
    """
    Get the default, priority-ordered list of section extractors.

    "Likvidátor" precedes "Likvidácia" and "Obchodné meno" precedes "IČO";
    the first matching label wins.

    Returns:
        List of SectionExtractor instances
    """
    return [
        CourtSection(),
        RegistrationSection(),
        CompanyNameSection(),
        AddressSection(),
        IcoSection(),
        TextSection("den_zapisu", ("Deň zápisu",)),
        TextSection("den_vymazu", ("Deň výmazu",)),
        TextSection("dovod_vymazu", ("Dôvod výmazu",)),
        TextSection("pravna_forma", ("Právna forma",)),
        ActivitiesSection(),
        PartnersSection(),
        ContributionsSection(),
        StatutoryBodySection(),
        LiquidatorsSection(),
        TextSection("likvidacia_udaje", ("Likvidácia",)),
        TextSection("konkurz_udaje", ("Konkurz",)),
        TextSection("zastupovanie", ("Zastupovanie",)),
        TextSection("konanie_menom_spolocnosti", ("Konanie menom spoločnosti",)),
        CapitalSection(),
        SharesSection(),
        SupervisoryBoardSection(),
        LegalFactsSection(),
        FooterDateSection("datum_aktualizacie", ("Dátum aktualizácie",)),
        FooterDateSection("datum_vypisu", ("Dátum výpisu",)),
    ]

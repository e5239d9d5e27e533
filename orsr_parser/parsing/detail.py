"""
Detail page extraction.

Main entry point for turning a register detail page into a structured
record. Rows are dispatched to section extractors by the SectionRegistry and
merged in page order by the RecordAssembler, which finally prepends the
meta block.
"""

import logging
import socket
import time
from datetime import datetime
from typing import Any

from orsr_parser.constants import API_VERSION
from orsr_parser.parsing.markup import MarkupLoader
from orsr_parser.parsing.sections.registry import SectionRegistry
from orsr_parser.utils.hashing import record_signature

logger = logging.getLogger(__name__)


class RecordAssembler:
    """
    Accumulate extraction fragments into one record.

    Later fragments overwrite keys of earlier ones. The record is replaced,
    never mutated, on merge, so a record handed to an extractor stays as it was.
    """

    def __init__(self):
        self.record: dict[str, Any] = {}
        self._started = time.perf_counter()

    def merge(self, fragment: dict[str, Any] | None) -> dict[str, Any]:
        """Merge a fragment; empty fragments are ignored."""
        if fragment:
            self.record = {**self.record, **fragment}
        return self.record

    def finalize(self, context: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Return the record with the meta block as its first key.

        Args:
            context: Extra meta fields supplied by the caller (e.g. source URL)

        Returns:
            {"meta": {...}, **record}
        """
        meta = {
            "api_version": API_VERSION,
            "sign": record_signature(self.record),
            "server": socket.gethostname(),
            "time": datetime.now().strftime("%d.%m.%Y %H:%M:%S"),
            "sec": f"{time.perf_counter() - self._started:.3f}",
        }
        if context:
            meta.update(context)
        return {"meta": meta, **self.record}


def extract_detail(
    raw: bytes | str,
    loader: MarkupLoader | None = None,
    registry: SectionRegistry | None = None,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Extract a structured record from a detail page.

    Args:
        raw: Page bytes (windows-1250) or decoded text
        loader: Markup loader (default: repairing, strict)
        registry: Section registry (default: all sections)
        context: Extra meta fields

    Returns:
        Record with a leading "meta" key. In lenient mode an unusable page
        yields a record holding only "meta".

    Raises:
        MarkupError: In strict mode when the page cannot be parsed
    """
    assembler = RecordAssembler()
    loader = loader or MarkupLoader()
    registry = registry or SectionRegistry()

    doc = loader.load(raw, squash_whitespace=True)
    registry.run(doc, assembler)

    record = assembler.finalize(context)
    logger.debug(f"Extracted {len(record) - 1} fields in {record['meta']['sec']}s")
    return record

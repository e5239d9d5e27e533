"""
Library facade for the Slovak business register.

OrsrConnector ties the fetcher, the extraction pipeline and the serializers
together:

    connector = OrsrConnector()
    record = connector.get_detail_by_ico("36294268")
    print(connector.render(record, "json"))
"""

import logging
import re
from typing import Any

from orsr_parser.config import Settings, get_settings
from orsr_parser.constants import ICO_LENGTH, TYP_OSOBY_PRAVNICKA
from orsr_parser.domain.models import DetailId
from orsr_parser.output.serializers import normalize_format, serialize
from orsr_parser.parsing.detail import extract_detail
from orsr_parser.parsing.markup import MarkupLoader
from orsr_parser.parsing.search import extract_search_results, format_person_row
from orsr_parser.parsing.sections.registry import SectionRegistry
from orsr_parser.sources.orsr import OrsrFetcher, detail_url

logger = logging.getLogger(__name__)

# Keys of the flat form view, in output order
NORMALIZED_KEYS = (
    "ico",
    "obchodne_meno",
    "street",
    "number",
    "city",
    "zip",
    "typ_osoby",
    "hlavicka",
    "hlavicka_kratka",
    "dic",
    "nace_kod",
    "nace_text",
)
_ADDRESS_KEYS = ("street", "number", "city", "zip")


def clean_ico(ico: str | int | None) -> str | None:
    """Digits of an IČO, or None unless exactly 8 digits remain."""
    digits = re.sub(r"\D", "", str(ico or ""))
    return digits if len(digits) == ICO_LENGTH else None


class OrsrConnector:
    """
    Fetch and extract register entries.

    Args:
        settings: Settings instance (default: get_settings())
        fetcher: Page fetcher (default: OrsrFetcher built from settings)
        loader: Markup loader (default: built from settings)
        registry: Section registry (default: all sections)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        fetcher: OrsrFetcher | None = None,
        loader: MarkupLoader | None = None,
        registry: SectionRegistry | None = None,
    ):
        self.settings = settings or get_settings()
        self.fetcher = fetcher or OrsrFetcher(settings=self.settings)
        self.loader = loader or MarkupLoader.from_settings(self.settings)
        self.registry = registry or SectionRegistry()
        self.output_format = normalize_format(self.settings.output_format)

    # -- detail --------------------------------------------------------------

    def get_detail_by_id(self, id: int | str, sid: int | str, full: bool | int | str = False) -> dict[str, Any]:
        """
        Fetch and extract an entity detail page.

        Args:
            id: Entity ID, e.g. 19456
            sid: Court ID 0-9 (0 = any court)
            full: True for the full historical extract

        Raises:
            InvalidIdentifierError: If id is not a positive integer or sid is out of range
            FetchError: If the page cannot be fetched
            MarkupError: In strict mode when the page cannot be parsed
        """
        detail_id = DetailId.from_values(id, sid, full)
        return self._get_detail(detail_id)

    def get_detail_by_partial_link(self, link: str, full: bool | None = None) -> dict[str, Any]:
        """
        Fetch the detail page behind a search result link.

        Args:
            link: Partial link, e.g. "vypis.asp?ID=54190&SID=7&P=0"
            full: True / False to force the extract variant, None to keep the link's

        Returns:
            Record, or {} when the link is not a detail link
        """
        detail_id = DetailId.from_link(link, full=full)
        if detail_id is None:
            logger.debug(f"Not a detail link: {link!r}")
            return {}
        return self._get_detail(detail_id)

    def get_detail_by_ico(self, ico: str, full: bool | None = None) -> dict[str, Any]:
        """
        Look an entity up by IČO and return its detail record.

        Returns:
            Record, or {} for a malformed IČO or when nothing is found
        """
        results = self.find_by_ico(ico)
        if not results:
            return {}
        link = next(iter(results.values()))
        return self.get_detail_by_partial_link(link, full=full)

    def _get_detail(self, detail_id: DetailId) -> dict[str, Any]:
        raw = self.fetcher.fetch_detail(detail_id)
        context = {"source": detail_url(self.fetcher.base_url, detail_id)}
        return extract_detail(raw, loader=self.loader, registry=self.registry, context=context)

    # -- search --------------------------------------------------------------

    def find_by_obchodne_meno(self, name: str) -> dict[str, str]:
        """Search current records by company name; returns label -> partial link."""
        if not name or not name.strip():
            return {}
        raw = self.fetcher.fetch_search_by_name(name)
        return extract_search_results(raw, loader=self.loader)

    def find_by_ico(self, ico: str) -> dict[str, str]:
        """Search by IČO (at most one result); {} for a malformed IČO."""
        ico = clean_ico(ico)
        if ico is None:
            return {}
        raw = self.fetcher.fetch_search_by_ico(ico)
        return extract_search_results(raw, loader=self.loader)

    def find_by_priezvisko_meno(self, surname: str, name: str = "") -> dict[str, str]:
        """Search persons by surname and optional first name; labels are "Person (Company)"."""
        if not surname or not surname.strip():
            return {}
        raw = self.fetcher.fetch_search_by_person(surname, name)
        return extract_search_results(raw, formatter=format_person_row, loader=self.loader)

    # -- output --------------------------------------------------------------

    def normalize_data(self, record: dict[str, Any], force: list[str] | None = None) -> dict[str, str]:
        """
        Flat form view of a record.

        Address parts are read from "adresa" with a fallback to top level keys.

        Args:
            record: Extracted (or previously normalized) record
            force: Keys to complete with an extra lookup when empty; only the
                registration headers of legal persons can be completed

        Returns:
            Dict with exactly NORMALIZED_KEYS, missing values as ""
        """
        address = record.get("adresa") or {}
        out = {key: record.get(key) or "" for key in NORMALIZED_KEYS}
        for key in _ADDRESS_KEYS:
            out[key] = address.get(key) or record.get(key) or ""

        for key in force or []:
            if out.get(key) or key not in ("hlavicka", "hlavicka_kratka"):
                continue
            if out["typ_osoby"] != TYP_OSOBY_PRAVNICKA or not out["ico"]:
                continue
            extra = self.get_detail_by_ico(out["ico"])
            if extra.get("hlavicka"):
                out["hlavicka"] = extra["hlavicka"]
                out["hlavicka_kratka"] = extra.get("hlavicka_kratka", out["hlavicka_kratka"])
        return out

    def render(self, record: dict[str, Any], fmt: str | None = None) -> Any:
        """Serialize a record (default format from settings)."""
        return serialize(record, self.output_format if fmt is None else fmt)

    def close(self) -> None:
        self.fetcher.close()

"""
Extractors for the identification sections of a detail page.

Covers the court line, the registration (section / insert number) line,
company name, registered address, IČO, activities, the legal facts log and
the footer dates.
"""

import logging
import re

from orsr_parser.constants import (
    TYP_OSOBY_FYZICKA,
    TYP_OSOBY_PRAVNICKA,
    TYP_SUDU_MESTSKY,
    TYP_SUDU_OKRESNY,
)
from orsr_parser.parsing.fields import DATE_PATTERN, extract_date_range, parse_address
from orsr_parser.parsing.sections.base import (
    SectionExtractor,
    cell_entries,
    entry_lines,
    nested_tables,
)
from orsr_parser.parsing.text import collapse_whitespace, fold_accents, strip_all_whitespace

logger = logging.getLogger(__name__)

_COURT_SPLIT_RE = re.compile(r"\s+s[úu]du\s+", re.IGNORECASE)
_SECTION_RE = re.compile(r"Oddiel\s*:\s*([^\s:]+)", re.IGNORECASE)
_INSERT_RE = re.compile(r"Vlo\S*\s+\S+\s*:\s*(\S+)", re.IGNORECASE)
_VALIDITY_SUFFIX_RE = re.compile(
    rf"\(\s*od\s*:\s*(?P<since>{DATE_PATTERN})(?:\s*do\s*:\s*(?P<until>{DATE_PATTERN}))?\s*\)\s*$",
    re.IGNORECASE,
)

# Court wording per court type: (genitive in full header, short header prefix)
COURT_WORDING = {
    TYP_SUDU_OKRESNY: ("Okresného súdu", "OS"),
    TYP_SUDU_MESTSKY: ("Mestského súdu", "MS"),
}


class CourtSection(SectionExtractor):
    """
    "Výpis z Obchodného registra Okresného súdu Banská Bystrica".

    Both values are read from the label; the row has no value cell.
    """

    labels = ("Výpis z Obchodného registra",)

    @property
    def field_name(self) -> str:
        return "prislusny_sud"

    def extract(self, label, node, doc, record):
        parts = _COURT_SPLIT_RE.split(label, maxsplit=1)
        court = parts[1].strip() if len(parts) == 2 else ""
        court_type = TYP_SUDU_MESTSKY if "mestsk" in fold_accents(label).lower() else TYP_SUDU_OKRESNY
        return {"prislusny_sud": court, "typ_sudu": court_type}


class RegistrationSection(SectionExtractor):
    """
    "Oddiel: Sro" / "Vložka číslo: 8429/S" plus the derived registration headers.

    The headers interpolate the court extracted from an earlier row, so the
    court row must have been merged into the record already.
    """

    labels = ("Oddiel",)

    @property
    def field_name(self) -> str:
        return "oddiel"

    def extract(self, label, node, doc, record):
        value = collapse_whitespace(doc.text(node))
        text = f"{label} {value}"

        match = _SECTION_RE.search(text)
        section = match.group(1) if match else ""
        match = _INSERT_RE.search(text)
        if match:
            insert = match.group(1)
        else:
            insert = value.split(":", 1)[1].strip() if ":" in value else ""

        out = {"oddiel": section, "vlozka": insert}
        out.update(registration_headers(section, insert, record))
        return out


def registration_headers(section: str, insert: str, record: dict) -> dict[str, str]:
    """
    Build the legal person type and the long/short registration header.

    Args:
        section: Section code, e.g. "Sro", "Sa", "Dr", "Pšn", "Firm"
        insert: Insert number, e.g. "8429/S"
        record: Record holding prislusny_sud and typ_sudu

    Returns:
        Dict with typ_osoby, hlavicka, hlavicka_kratka
    """
    court = record.get("prislusny_sud", "")
    court_name, court_abbr = COURT_WORDING.get(record.get("typ_sudu"), COURT_WORDING[TYP_SUDU_OKRESNY])
    code = fold_accents(section).lower()

    if "firm" in code:
        return {
            "typ_osoby": TYP_OSOBY_FYZICKA,
            "hlavicka": f"Fyzická osoba zapísaná v obchodnom registri {court_name} {court}, vložka {insert}.",
            "hlavicka_kratka": f"{court_abbr} {court}, vložka {insert}",
        }

    out = {"typ_osoby": TYP_OSOBY_PRAVNICKA}
    if "dr" in code:
        out["hlavicka"] = f"Družstvo zapísané v obchodnom registri {court_name} {court}, vložka {insert}."
        out["hlavicka_kratka"] = f"{court_abbr} {court}, vložka {insert}"
    elif "psn" in code:
        out["hlavicka"] = f"Podnik zapísaný v obchodnom registri {court_name} {court}, vložka {insert}."
        out["hlavicka_kratka"] = f"{court_abbr} {court}, vložka {insert}"
    else:
        out["hlavicka"] = (
            f"Spoločnosť zapísaná v obchodnom registri {court_name} {court}, "
            f"oddiel {section}, vložka {insert}."
        )
        out["hlavicka_kratka"] = f"{court_abbr} {court}, oddiel {section}, vložka {insert}"
    return out


class CompanyNameSection(SectionExtractor):
    """
    Company name, possibly with several historical entries (renames).

    The current name is the last entry still in effect; an entry carrying
    "v likvidácii" or "v konkurze" takes precedence. The liquidation and
    bankruptcy flags are derived from the chosen name.
    """

    labels = ("Obchodné meno",)

    @property
    def field_name(self) -> str:
        return "obchodne_meno"

    def extract(self, label, node, doc, record):
        entries = self._entries(node, doc)
        if not entries:
            return {}

        current = [entry for entry in entries if not entry.get("until")] or entries
        marked = [entry for entry in current if _is_liquidation(entry["name"]) or _is_bankruptcy(entry["name"])]
        chosen = (marked or current)[-1]

        out = {
            "obchodne_meno": chosen["name"],
            "likvidacia": _is_liquidation(chosen["name"]),
            "konkurz": _is_bankruptcy(chosen["name"]),
        }
        if len(entries) > 1:
            out["obchodne_meno_historia"] = entries
        return out

    def _entries(self, node, doc) -> list[dict[str, str]]:
        if node is None:
            return []
        entries = []
        for row in doc.query(".//table/tr", node):
            name = collapse_whitespace(doc.text(doc.first("./td[1]", row)).replace('"', ""))
            if not name:
                continue
            entry = {"name": name}
            entry.update(extract_date_range(doc.text(doc.first("./td[2]", row))))
            entries.append(entry)

        if not entries:
            # Value cell without nested table
            name = collapse_whitespace(doc.text(node).replace('"', ""))
            if name:
                entries.append({"name": name})
        return entries


def _is_liquidation(name: str) -> bool:
    return "v likvidacii" in fold_accents(name, strip_extra=False).lower()


def _is_bankruptcy(name: str) -> bool:
    return "v konkurze" in fold_accents(name, strip_extra=False).lower()


class AddressSection(SectionExtractor):
    """
    Registered office, residence or place of business.

    The three labels are mutually exclusive per entity type, so they share
    the "adresa" key. The last entry is the current address.
    """

    labels = ("Sídlo", "Bydlisko", "Miesto podnikania")

    @property
    def field_name(self) -> str:
        return "adresa"

    def extract(self, label, node, doc, record):
        lines = [entry_lines(doc, table, ".//tr/td[1]/*") for table in nested_tables(doc, node)]
        lines = [line for line in lines if line]
        if not lines:
            return {}
        return {"adresa": parse_address(lines[-1]).to_dict()}


class IcoSection(SectionExtractor):
    """IČO, printed with spaces ("36 294 268")."""

    labels = ("IČO",)

    @property
    def field_name(self) -> str:
        return "ico"

    def extract(self, label, node, doc, record):
        entries = cell_entries(doc, node)
        if not entries:
            return {}
        return {"ico": strip_all_whitespace(entries[-1])}


class ActivitiesSection(SectionExtractor):
    """Business activities, one per nested row."""

    labels = ("Predmet činnosti",)
    always_list = True

    @property
    def field_name(self) -> str:
        return "predmet_cinnosti"

    def extract(self, label, node, doc, record):
        return {"predmet_cinnosti": cell_entries(doc, node)}


class LegalFactsSection(SectionExtractor):
    """
    Free-text log of other legal facts.

    Each row may end with "(od: 12.03.1997)" or "(od: ... do: ...)", which is
    split off into the since / until fields.
    """

    labels = ("Ďalšie právne skutočnosti",)
    always_list = True

    @property
    def field_name(self) -> str:
        return "dalsie_skutocnosti"

    def extract(self, label, node, doc, record):
        events = []
        if node is not None:
            for row in doc.query(".//table/tr", node):
                text = collapse_whitespace(" ".join(doc.text(cell) for cell in doc.query("./td", row)))
                if text:
                    events.append(split_event(text))
        return {"dalsie_skutocnosti": events}


def split_event(text: str) -> dict[str, str]:
    """
    Split the trailing validity suffix off an event.

    Example:
        "Spoločnosť vznikla dňa 1.1.2000. (od: 01.01.2000)"
        -> {"text": "Spoločnosť vznikla dňa 1.1.2000.", "since": "01.01.2000"}
    """
    event = {"text": text, "since": ""}
    match = _VALIDITY_SUFFIX_RE.search(text)
    if not match:
        logger.debug(f"Event without validity suffix: {text[:60]!r}")
        return event
    event["text"] = text[: match.start()].strip()
    event["since"] = re.sub(r"\s", "", match.group("since"))
    if match.group("until"):
        event["until"] = re.sub(r"\s", "", match.group("until"))
    return event


class FooterDateSection(SectionExtractor):
    """Footer dates ("Dátum aktualizácie údajov", "Dátum výpisu") in the value cell itself."""

    def __init__(self, field_name: str, labels: tuple[str, ...]):
        self._field_name = field_name
        self.labels = labels

    @property
    def field_name(self) -> str:
        return self._field_name

    def extract(self, label, node, doc, record):
        text = collapse_whitespace(doc.text(node))
        if not text:
            # Date printed in the label cell ("Dátum výpisu: 17.10.2016")
            match = re.search(DATE_PATTERN, label)
            text = re.sub(r"\s", "", match.group(0)) if match else ""
        return {self.field_name: text} if text else {}

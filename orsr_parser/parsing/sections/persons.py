"""
Extractors for sections listing persons.

Partners, statutory bodies, liquidators and supervisory board members are
rendered as one nested table per person: the first column holds the
multi-line person text, the second column its validity ("(od: 01.06.2013)").
"""

from orsr_parser.constants import DEFAULT_COUNTRY
from orsr_parser.domain.models import PersonRecord
from orsr_parser.parsing.fields import extract_date_range, parse_person
from orsr_parser.parsing.sections.base import (
    TABLE_FRAGMENTS,
    TABLE_VALIDITY,
    SectionExtractor,
    cell_text,
    entry_lines,
    nested_tables,
)


def person_from_table(doc, table, default_country: str | None = None) -> PersonRecord | None:
    """
    Parse the person rendered in one nested table.

    Dates printed inside the person text win over the validity column.

    Returns:
        PersonRecord, or None for an empty table
    """
    line = entry_lines(doc, table, TABLE_FRAGMENTS)
    if not line:
        return None
    person = parse_person(line, default_country=default_country)
    validity = extract_date_range(cell_text(doc, table, TABLE_VALIDITY))
    if not person.since:
        person.since = validity.get("since", "")
    if not person.until:
        person.until = validity.get("until", "")
    return person


class PersonListSection(SectionExtractor):
    """Section holding a flat list of persons, one nested table each."""

    always_list = True
    default_country: str | None = None

    def __init__(self, field_name: str, labels: tuple[str, ...], default_country: str | None = None):
        self._field_name = field_name
        self.labels = labels
        self.default_country = default_country

    @property
    def field_name(self) -> str:
        return self._field_name

    def extract(self, label, node, doc, record):
        persons = []
        for table in nested_tables(doc, node):
            person = person_from_table(doc, table, self.default_country)
            if person is not None:
                persons.append(person.to_dict())
        return {self.field_name: persons}


class PartnersSection(PersonListSection):
    """Partners of an s.r.o. or a limited partnership (persons or companies)."""

    def __init__(self):
        super().__init__("spolocnici", ("Spoločníci",))


class LiquidatorsSection(PersonListSection):
    """Liquidators appointed for a company in liquidation."""

    def __init__(self):
        super().__init__("likvidatori", ("Likvidátor",))


class SupervisoryBoardSection(PersonListSection):
    """Supervisory board; members without a country are domestic."""

    def __init__(self):
        super().__init__("dozorna_rada", ("Dozorná rada",), default_country=DEFAULT_COUNTRY)


class StatutoryBodySection(SectionExtractor):
    """
    Statutory body: body names followed by their members.

    Layout (one nested table per line):
        konateľ
        Ing. Ján Novák, Hlavná 5, Bratislava 811 01
        predstavenstvo
        Ing. Vladislav Šustr - predseda predstavenstva, ...

    A line without a comma starts a new body. Members listed with their role
    ("name - function") before any body name are collected under a body with
    an empty name.

    Output:
        [{"nazov": "konateľ", "osoby": [person, ...]}, ...]
    """

    labels = ("Štatutárny orgán",)
    always_list = True

    @property
    def field_name(self) -> str:
        return "statutarny_organ"

    def extract(self, label, node, doc, record):
        bodies = []
        current = None

        for table in nested_tables(doc, node):
            line = entry_lines(doc, table, TABLE_FRAGMENTS)
            if not line:
                continue

            loose = current is None or not current["nazov"]
            if "," not in line and not (loose and _has_dash(line)):
                current = self._body(bodies, line)
                continue

            if current is None:
                current = self._body(bodies, "")
            current["osoby"].append(self._person(doc, table))

        return {self.field_name: bodies}

    @staticmethod
    def _body(bodies: list, name: str) -> dict:
        body = {"nazov": name, "osoby": []}
        bodies.append(body)
        return body

    @staticmethod
    def _person(doc, table) -> dict:
        person = person_from_table(doc, table)
        return person.to_dict()


def _has_dash(line: str) -> bool:
    return "-" in line or "–" in line

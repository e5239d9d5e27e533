"""
Extractors for the capital sections: contributions, registered capital, shares.
"""

import logging
import re

from orsr_parser.parsing.fields import parse_money, split_tokens
from orsr_parser.parsing.sections.base import (
    TABLE_FRAGMENTS,
    SectionExtractor,
    cell_entries,
    entry_lines,
    nested_tables,
)
from orsr_parser.parsing.text import collapse_whitespace, fold_accents, label_key, trim_space_in_number

logger = logging.getLogger(__name__)

_PAID_LABEL = "Rozsah splatenia"


def money_or_text(text: str, label: str | None = None) -> dict:
    """
    Parse an amount, keeping the source text.

    Returns:
        {"text", "amount", "currency"[, "original"]}, or only {"text"} when
        the amount cannot be split from its currency
    """
    text = collapse_whitespace(text)
    out = {"text": text}
    money = parse_money(text, label=label)
    if money is None:
        logger.debug(f"Amount kept as text: {text!r}")
        return out
    out.update(money.to_dict())
    return out


class ContributionsSection(SectionExtractor):
    """
    Contribution of each partner.

    Example entry:
        "Ing. Tibor Rauch, Vklad: 200 000 Sk, Splatené: 200 000 Sk"
        -> {"name": "Ing. Tibor Rauch", "vklad": {...}, "splatene": {...}}
    """

    labels = ("Výška vkladu",)
    always_list = True

    @property
    def field_name(self) -> str:
        return "vyska_vkladu"

    def extract(self, label, node, doc, record):
        contributions = []
        for table in nested_tables(doc, node):
            line = entry_lines(doc, table, TABLE_FRAGMENTS)
            if line:
                contributions.append(self.parse_entry(line))
        return {self.field_name: contributions}

    @staticmethod
    def parse_entry(line: str) -> dict:
        # "Vklad: 200 000 Sk Splatené: 200 000 Sk" is rendered without separator
        line = re.sub(r"\s+(Splaten)", r", \1", line)
        tokens = split_tokens(line)
        entry = {"name": tokens[0] if tokens else ""}
        for token in tokens[1:]:
            key, _, value = token.partition(":")
            key = label_key(key)
            if key.startswith("vklad"):
                entry["vklad"] = money_or_text(value)
            elif key.startswith("splaten"):
                entry["splatene"] = money_or_text(value)
        return entry


class CapitalSection(SectionExtractor):
    """
    Registered capital with the paid-up part.

    Example:
        "6 972 EUR Rozsah splatenia: 6 972 EUR"
        -> {"text": "6972 EUR, Rozsah splatenia: 6972 EUR",
            "amount": 6972.0, "currency": "EUR",
            "splatene": {"text": "6972 EUR", "amount": 6972.0, "currency": "EUR"}}
    """

    labels = ("Základné imanie",)

    @property
    def field_name(self) -> str:
        return "zakladne_imanie"

    def extract(self, label, node, doc, record):
        entries = cell_entries(doc, node)
        if not entries:
            return {}

        # Last entry is the current one
        text = trim_space_in_number(entries[-1].replace(" Rozsah", ", Rozsah"))
        amount_text, _, paid_text = text.partition(_PAID_LABEL)

        capital = money_or_text(amount_text.rstrip(" ,"))
        capital["text"] = text
        if paid_text:
            capital["splatene"] = money_or_text(paid_text.lstrip(" :"))
        return {self.field_name: capital}


class SharesSection(SectionExtractor):
    """
    Share classes of a joint-stock company.

    Example entry:
        "Počet: 1000, Menovitá hodnota: 33 EUR, Druh: kmeňové, Podoba: zaknihované"
        -> {"pocet": 1000, "menovita_hodnota": {...}, "druh": "kmeňové", "podoba": "zaknihované"}
    """

    labels = ("Akcie",)
    always_list = True

    @property
    def field_name(self) -> str:
        return "akcie"

    def extract(self, label, node, doc, record):
        shares = []
        for table in nested_tables(doc, node):
            line = entry_lines(doc, table, TABLE_FRAGMENTS)
            if line and "," in line:
                share = self.parse_entry(line)
                if share:
                    shares.append(share)
        return {self.field_name: shares}

    @staticmethod
    def parse_entry(line: str) -> dict:
        share = {}
        for item in line.split(","):
            if ":" not in item:
                continue
            key, _, value = item.partition(":")
            key = fold_accents(key).strip().lower().replace(" ", "_")
            if not key.isidentifier():
                continue
            value = value.strip()
            if key == "pocet":
                digits = trim_space_in_number(value)
                share[key] = int(digits) if digits.isdigit() else value
            elif key == "menovita_hodnota":
                share[key] = money_or_text(trim_space_in_number(value))
            else:
                share[key] = value
        return share

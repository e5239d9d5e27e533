"""
Positional field splitting for register text lines.

Register cells have no reliable delimiters beyond commas, so a line is split
on commas and the tokens are assigned left to right to the expected field
names. Misassignments are corrected afterwards by small pattern based fixups
(name/function, street/number, city/ZIP, money, dates), each usable on its own.
"""

import logging
import re

from orsr_parser.constants import (
    CURRENCY_EUR,
    SKK_PER_EUR,
)
from orsr_parser.domain.models import AddressParts, MonetaryAmount, PersonRecord
from orsr_parser.parsing.text import (
    close_up_spaced_letters,
    collapse_whitespace,
    fold_accents,
)

logger = logging.getLogger(__name__)

# Token sometimes rendered where an address is expected
PERMANENT_RESIDENCE_RE = re.compile(r"^\s*trval[ýy]\s+pobyt\s*:?\s*$", re.IGNORECASE)

# D.M.YYYY with optional spaces around the dots
DATE_PATTERN = r"(\d{1,2})\s*\.\s*(\d{1,2})\s*\.\s*(\d{4})"
_DATE_RE = re.compile(DATE_PATTERN)

# Labels are matched on accent-folded text
SINCE_LABELS = ("vznik funkcie", "vznik clenstva", "od")
UNTIL_LABELS = ("skoncenie funkcie", "skoncenie clenstva", "zanik funkcie", "do")

# Leading words of a role/title following a dash in a name field
ROLE_KEYWORDS = (
    "predseda",
    "podpredseda",
    "clen",
    "konatel",
    "riaditel",
    "generalny",
    "vykonny",
    "prokurista",
    "spolocnik",
    "likvidator",
    "veduci",
    "statutar",
    "spravca",
    "zastupca",
    "splnomocnen",
)

# Number token: starts with a digit, digits / slashes / dashes / spaces, optional letter suffix
_LEADING_NUMBER_RE = re.compile(r"^(?P<number>\d[\w/]{0,4})\s+(?P<street>\D+)$")
_TRAILING_NUMBER_RE = re.compile(r"^(?P<street>.*?[^\d\s/\-])\s+(?P<number>\d[\d/\-\s]*[A-Za-z]?)$")
_WORD_RE = re.compile(r"[^\W\d_]{2,}")

_CITY_ZIP_RE = re.compile(r"^(?P<city>.+?)\s+(?P<zip>\d{3}\s?\d{2})(?:\s+(?P<district>\D.*))?$")
_BARE_ZIP_RE = re.compile(r"^(?P<zip>\d{3}\s?\d{2})$")
_FOREIGN_ZIP_RE = re.compile(r"^(?P<city>.+?)\s+(?P<zip>[A-Z]{1,3}\s?-\s?[\dA-Z][\dA-Z ]{1,8})$")

_MONEY_RE = re.compile(
    r"(?P<amount>\d[\d ]*(?:[.,]\d+)?)\s*(?P<currency>EUR|€|SKK|Sk)(?![A-Za-z])",
    re.IGNORECASE,
)
_LEGACY_CURRENCIES = {"sk", "skk"}


def split_tokens(line: str, separator: str = ",", skip_pattern=None) -> list[str]:
    """
    Split a line into trimmed tokens, dropping tokens matching skip_pattern.

    Args:
        line: Text to split
        separator: Token separator
        skip_pattern: Optional regex (str or compiled) of tokens to drop

    Returns:
        List of trimmed tokens (empty tokens are kept)
    """
    if not line:
        return []
    tokens = [token.strip() for token in line.split(separator)]
    if skip_pattern is not None:
        if isinstance(skip_pattern, str):
            skip_pattern = re.compile(skip_pattern, re.IGNORECASE)
        tokens = [token for token in tokens if not skip_pattern.search(token)]
    return tokens


def split_fields(
    line: str,
    field_names: list[str],
    separator: str = ",",
    skip_pattern=None,
) -> dict[str, str]:
    """
    Assign the tokens of a line to field names, left to right.

    Extra tokens are discarded; missing tokens leave the remaining
    field names absent from the result.

    Example:
        split_fields("Hlavná 5, Nitra 949 01", ["street", "city"])
        -> {"street": "Hlavná 5", "city": "Nitra 949 01"}
    """
    tokens = split_tokens(line, separator, skip_pattern)
    return {name.strip(): value for name, value in zip(field_names, tokens)}


def _looks_like_role(text: str) -> bool:
    if not text:
        return False
    if text[0].islower():
        return True
    folded = fold_accents(text, strip_extra=False).lower()
    return folded.startswith(ROLE_KEYWORDS)


def split_name_function(text: str) -> tuple[str, str]:
    """
    Split "Ing. Vladislav Šustr - predseda predstavenstva" into name and function.

    A dash only separates a function when the text after it looks like a role
    and the part before it has at least two words, so hyphenated surnames
    ("Anna Nováková-Kováčová") are left intact.

    Returns:
        (name, function); function is "" when no split was made
    """
    text = collapse_whitespace(text)
    for match in re.finditer(r"[-–]", text):
        before = text[: match.start()].strip()
        after = text[match.end() :].strip()
        if len(before.split()) >= 2 and _looks_like_role(after):
            return before, after
    return text, ""


def split_street_number(street: str) -> dict[str, str]:
    """
    Split a street line into street name and house number.

    Rules, in order ("č." house number marker is stripped first):
    1. leading short number token followed by a name: "12 Hlavná"
    2. trailing number token: "Pod Kalváriou 373", "Nejaká ulica 654/ 99-87B"
    3. no digits at all (bare place name): street and number empty
    4. digits present otherwise, e.g. "373/12" or "1. mája": the whole line
       is the number
    """
    line = collapse_whitespace(re.sub(r"(?<!\w)č\.\s*", "", street or ""))
    out = {"street": line, "number": ""}

    match = _LEADING_NUMBER_RE.match(line)
    if match:
        out["street"] = match.group("street").strip()
        out["number"] = match.group("number").strip()
        return out

    match = _TRAILING_NUMBER_RE.match(line)
    if match:
        out["street"] = match.group("street").strip()
        out["number"] = match.group("number").strip()
        return out

    if not re.search(r"\d", line):
        # Only place name, e.g. "Beluša"
        out["street"] = ""
        return out

    if _WORD_RE.search(line):
        logger.debug(f"Street line without separable house number: {line!r}")
    out["street"] = ""
    out["number"] = line
    return out


def apply_street_number(parts: dict) -> dict:
    """Replace parts["street"] by street + number, only when a number is found."""
    street = parts.get("street")
    if not street:
        return parts
    split = split_street_number(street)
    if split["number"]:
        parts["street"] = split["street"]
        parts["number"] = split["number"]
    return parts


def split_city_zip(city: str) -> dict[str, str]:
    """
    Split a trailing postal code (and optional district) off a city.

    Examples:
        "Bratislava 821 04" -> {"city": "Bratislava", "zip": "82104"}
        "Bratislava 821 04 Ružinov" -> + {"district": "Ružinov"}
        "Praha CZ-110 00" -> {"city": "Praha", "zip": "CZ-11000"}
    """
    line = collapse_whitespace(city)
    out = {"city": line, "zip": ""}

    match = _CITY_ZIP_RE.match(line)
    if match:
        out["city"] = match.group("city").strip(" -")
        out["zip"] = re.sub(r"\s", "", match.group("zip"))
        if match.group("district"):
            out["district"] = match.group("district").strip()
        return out

    match = _BARE_ZIP_RE.match(line)
    if match:
        out["city"] = ""
        out["zip"] = re.sub(r"\s", "", match.group("zip"))
        return out

    match = _FOREIGN_ZIP_RE.match(line)
    if match:
        out["city"] = match.group("city").strip()
        out["zip"] = re.sub(r"\s", "", match.group("zip"))
    return out


def apply_city_zip(parts: dict) -> dict:
    """Replace parts["city"] by city + zip (+ district), only when a zip is found."""
    city = parts.get("city")
    if not city:
        return parts
    split = split_city_zip(city)
    if split["zip"]:
        parts.update(split)
    return parts


def parse_money(text: str, label: str | None = None) -> MonetaryAmount | None:
    """
    Parse "<number> <currency>" into a MonetaryAmount in EUR.

    Legacy SKK amounts are divided by the fixed conversion rate, rounded to
    two decimals and keep their source text in `original`.

    Args:
        text: Text containing an amount, e.g. "200 000 Sk" or "6 972,50 EUR"
        label: Only look for the amount after this label (accent insensitive)

    Returns:
        MonetaryAmount, or None when number and currency cannot be split
    """
    if not text:
        return None
    haystack = fold_accents(collapse_whitespace(text), strip_extra=False)
    if label:
        folded_label = fold_accents(label, strip_extra=False)
        position = haystack.lower().find(folded_label.lower())
        if position < 0:
            return None
        haystack = haystack[position + len(folded_label) :]

    match = _MONEY_RE.search(haystack)
    if not match:
        return None

    raw_amount = match.group("amount").replace(" ", "").replace(",", ".")
    try:
        value = float(raw_amount)
    except ValueError:
        logger.debug(f"Unparseable amount {match.group(0)!r}")
        return None

    if match.group("currency").lower() in _LEGACY_CURRENCIES:
        return MonetaryAmount(
            amount=round(value / SKK_PER_EUR, 2),
            currency=CURRENCY_EUR,
            original=match.group(0).strip(),
        )
    return MonetaryAmount(amount=round(value, 2), currency=CURRENCY_EUR)


def _find_labeled_date(folded: str, labels: tuple[str, ...]) -> str:
    for label in labels:
        pattern = rf"(?<!\w){re.escape(label)}\s*:\s*{DATE_PATTERN}"
        match = re.search(pattern, folded, re.IGNORECASE)
        if match:
            day, month, year = match.groups()
            return f"{day}.{month}.{year}"
    return ""


def extract_date_range(
    text: str,
    since_labels: tuple[str, ...] = SINCE_LABELS,
    until_labels: tuple[str, ...] = UNTIL_LABELS,
) -> dict[str, str]:
    """
    Find "effective from" and "effective until" dates in free text.

    Both dates are looked up independently; the since date first.

    Example:
        "Vznik funkcie: 01.06.2013 Skončenie funkcie: 30.01.2016"
        -> {"since": "01.06.2013", "until": "30.01.2016"}

    Returns:
        Dict with "since" and/or "until" keys for the dates found
    """
    out = {}
    if not text:
        return out
    folded = fold_accents(collapse_whitespace(text), strip_extra=False)
    since = _find_labeled_date(folded, since_labels)
    if since:
        out["since"] = since
    until = _find_labeled_date(folded, until_labels)
    if until:
        out["until"] = until
    return out


def _is_date_token(token: str) -> bool:
    return ":" in token and bool(_DATE_RE.search(token))


def _is_skipped_person_token(token: str) -> bool:
    return _is_date_token(token) or bool(PERMANENT_RESIDENCE_RE.search(token))


def parse_address(line: str) -> AddressParts:
    """
    Parse a registered office / residence line.

    Example:
        "Pod Kalváriou 373, Topoľčany 955 01"
        -> street "Pod Kalváriou", number "373", city "Topoľčany", zip "95501"
    """
    line = collapse_whitespace(line)
    parts = split_fields(line, ["street", "city", "country"])

    # Single token holding only city and postal code
    if "city" not in parts and parts.get("street"):
        city_zip = split_city_zip(parts["street"])
        if city_zip["zip"] and city_zip["city"]:
            parts = {"city": parts["street"]}

    address = AddressParts()
    if parts.get("street"):
        split = split_street_number(parts["street"])
        address.street = split["street"]
        address.number = split["number"]
    if parts.get("city"):
        split = split_city_zip(parts["city"])
        address.city = split["city"]
        address.zip = split["zip"]
        address.district = split.get("district")
    if parts.get("country"):
        address.country = parts["country"]

    if address.is_empty() and line:
        address.city = line
    return address


def parse_person(line: str, default_country: str | None = None) -> PersonRecord:
    """
    Parse an officer line into a PersonRecord.

    Expected layout (positional, comma separated):
        name[ - function], street, city[, country][, Vznik funkcie: D.M.YYYY ...]

    Date tokens and "trvalý pobyt" tokens are dropped before assignment. With
    only one token after the name it is taken as the city (village without
    street).

    Args:
        line: Multi-line cell joined with commas
        default_country: Country to set when the line carries none
    """
    line = collapse_whitespace(line)
    tokens = split_tokens(line)
    date_tokens = [token for token in tokens if _is_date_token(token)]
    kept = [token for token in tokens if not _is_skipped_person_token(token)]

    if len(kept) <= 2:
        names = ["name", "city"]
    elif len(kept) == 3:
        names = ["name", "street", "city"]
    else:
        names = ["name", "street", "city", "country"]
    parts = split_fields(line, names, skip_pattern=_SkipPersonTokens)

    name, function = split_name_function(close_up_spaced_letters(parts.get("name", "")))
    parts = apply_street_number(parts)
    parts = apply_city_zip(parts)

    address = AddressParts(
        street=parts.get("street", ""),
        number=parts.get("number", ""),
        city=parts.get("city", ""),
        zip=parts.get("zip", ""),
        country=parts.get("country") or default_country,
        district=parts.get("district"),
    )
    person = PersonRecord(name=name, function=function, address=address)

    # since is looked up before until
    dates = extract_date_range(line)
    person.since = dates.get("since", "")
    if not person.since and date_tokens:
        person.since = date_tokens[0].split(":", 1)[1].strip()
    person.until = dates.get("until", "")
    return person


class _SkipPersonTokens:
    """Adapter exposing the person token filter through the skip_pattern protocol."""

    @staticmethod
    def search(token: str) -> bool:
        return _is_skipped_person_token(token)

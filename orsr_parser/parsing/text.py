"""
Text normalization helpers for register pages.

Register cells are human-entered and rendered with a lot of noise:
non-breaking spaces, thousand separators written as spaces, decimal commas,
names rendered letter by letter. Everything here is a pure str -> str
function so it can be reused by the field parser and the section extractors.
"""

import re

# Non-breaking space is converted to a plain space before anything else
NBSP = "\xa0"

_WHITESPACE_RE = re.compile(r"\s+")

# Slovak, Czech, German, Hungarian and Polish diacritics
_ACCENT_MAP = {
    # Slovak / Czech consonants
    "š": "s", "Š": "S", "ž": "z", "Ž": "Z", "ť": "t", "Ť": "T",
    "ľ": "l", "Ľ": "L", "ĺ": "l", "Ĺ": "L", "č": "c", "Č": "C",
    "ŕ": "r", "Ŕ": "R", "ř": "r", "Ř": "R", "ň": "n", "Ň": "N",
    "ď": "d", "Ď": "D",
    # Slovak / Czech vowels
    "á": "a", "Á": "A", "ä": "a", "Ä": "A", "é": "e", "É": "E",
    "ě": "e", "Ě": "E", "í": "i", "Í": "I", "ó": "o", "Ó": "O",
    "ô": "o", "Ô": "O", "ú": "u", "Ú": "U", "ů": "u", "Ů": "U",
    "ý": "y", "Ý": "Y",
    # German
    "ö": "o", "Ö": "O", "ü": "u", "Ü": "U", "ß": "ss",
    # Hungarian
    "ő": "o", "Ő": "O", "ű": "u", "Ű": "U",
    # Polish
    "ą": "a", "Ą": "A", "ć": "c", "Ć": "C", "ę": "e", "Ę": "E",
    "ł": "l", "Ł": "L", "ń": "n", "Ń": "N", "ś": "s", "Ś": "S",
    "ź": "z", "Ź": "Z", "ż": "z", "Ż": "Z",
}
_ACCENT_TABLE = str.maketrans(_ACCENT_MAP)
_EXTRA_CHARS_RE = re.compile(r"[^A-Za-z0-9\-_ ]")

# 4+ single characters separated by single spaces, e.g. "N o v á k"
_SPACED_LETTERS_RE = re.compile(r"(?<!\S)(?:\w ){3,}\w(?!\S)")

_DECIMAL_COMMA_RE = re.compile(r"(?<=\d),(?=\d)")

# "6 972 989" -> "6972989"
_SPACED_NUMBER_RE = re.compile(r"(?<![\d,.])\d{1,3}(?: \d{3})+(?![\d])")


def collapse_whitespace(text: str | None) -> str:
    """Replace every whitespace run (nbsp included) with one space and trim."""
    if not text:
        return ""
    text = text.replace("&nbsp;", " ").replace(NBSP, " ")
    return _WHITESPACE_RE.sub(" ", text).strip()


def strip_all_whitespace(text: str | None) -> str:
    """
    Remove whitespace entirely.

    Used for codes such as ICO which are printed as "36 294 268".
    """
    if not text:
        return ""
    return _WHITESPACE_RE.sub("", text.replace(NBSP, " "))


def fold_accents(text: str | None, strip_extra: bool = True) -> str:
    """
    Map accented Latin letters to their ASCII equivalents.

    Args:
        text: Text to fold
        strip_extra: If True, additionally remove every character outside
            [A-Za-z0-9-_ ] (punctuation, slashes, remaining non-ASCII letters)

    Returns:
        Folded text. Folding is idempotent.
    """
    if not text:
        return ""
    folded = text.translate(_ACCENT_TABLE)
    if strip_extra:
        folded = _EXTRA_CHARS_RE.sub("", folded)
    return folded


def label_key(text: str | None) -> str:
    """Case and accent insensitive form of a label used for matching."""
    return collapse_whitespace(fold_accents(text, strip_extra=False)).casefold()


def close_up_spaced_letters(text: str | None) -> str:
    """
    Rejoin words rendered letter by letter.

    Example:
        "Ing. J o z e f Novák" -> "Ing. Jozef Novák"
    """
    if not text:
        return ""
    return _SPACED_LETTERS_RE.sub(lambda m: m.group(0).replace(" ", ""), text)


def normalize_decimal_comma(text: str | None) -> str:
    """
    Rewrite decimal commas to periods ("33,19 EUR" -> "33.19 EUR").

    Only a comma with digits on both sides is touched, so thousand separators
    written as spaces and field separating commas stay as they are.
    """
    if not text:
        return ""
    return _DECIMAL_COMMA_RE.sub(".", text)


def trim_space_in_number(text: str | None) -> str:
    """Drop spaces used as thousand separators ("6 972 EUR" -> "6972 EUR")."""
    if not text:
        return ""
    return _SPACED_NUMBER_RE.sub(lambda m: m.group(0).replace(" ", ""), text)


def join_fragments(fragments: list[str]) -> str:
    """
    Join the fragments of a multi-line cell into one comma separated line.

    Each rendered line of a cell is a sequence of inline fragments terminated
    by a line break. Empty fragments (line breaks) become ", ", the others are
    joined with a space. Decimal commas become periods ("33,19 EUR" ->
    "33.19 EUR"); remaining commas inside fragments are dropped so that they
    do not shift positional field splitting later on.

    Example:
        ["Tuhovská", "3", "", "Bratislava", "831 06", ""]
        -> "Tuhovská 3, Bratislava 831 06"
    """
    out = ""
    for fragment in fragments:
        fragment = normalize_decimal_comma(collapse_whitespace(fragment)).replace(",", "")
        out += ", " if fragment == "" else " " + fragment
    out = _WHITESPACE_RE.sub(" ", out)
    out = re.sub(r"(?:\s*,)+", ",", out)
    return out.strip(" ,\t\n")

"""
Pytest configuration and shared fixtures for orsr_parser tests.
"""

from pathlib import Path

import pytest

from orsr_parser.constants import SOURCE_ENCODING

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_page(name: str) -> bytes:
    """Read a fixture page and encode it the way the register serves it."""
    return (FIXTURES_DIR / name).read_text(encoding="utf-8").encode(SOURCE_ENCODING)


def section_row(label: str, *entries: str) -> str:
    """
    Markup of one labelled detail page row.

    Each entry is the inner HTML of the first column of one nested table;
    validity columns are left empty.
    """
    tables = "".join(
        f'<table width="100%"><tr><td width="67%">{entry}</td><td width="33%">&nbsp;</td></tr></table>'
        for entry in entries
    )
    return (
        f'<table width="100%"><tr><td width="20%"><span class="tl">{label}</span></td>'
        f'<td width="80%">{tables}</td></tr></table>'
    )


def make_detail_page(*rows: str, court: str = "Okresného súdu Bratislava I") -> bytes:
    """
    Minimal detail page: navigation block, court block, then the given rows.

    Args:
        rows: Row markup, usually built with section_row()
        court: Court part of the heading row

    Returns:
        Page bytes in the register's codepage
    """
    markup = (
        '<html><head><meta http-equiv="Content-Type" content="text/html; charset=windows-1250"></head><body>'
        '<table><tr><td><a href="index.asp">Úvod</a></td></tr></table>'
        f'<table><tr><td><span class="tl">Výpis z Obchodného registra {court}</span></td></tr></table>'
        + "".join(rows)
        + "</body></html>"
    )
    return markup.encode(SOURCE_ENCODING)


@pytest.fixture
def fixtures_dir():
    """Path to the HTML fixture pages."""
    return FIXTURES_DIR


@pytest.fixture
def sro_page():
    """Current extract of a limited liability company in liquidation."""
    return load_page("detail_sro.html")


@pytest.fixture
def as_page():
    """Current extract of a joint-stock company with shares and a supervisory board."""
    return load_page("detail_as.html")


@pytest.fixture
def firm_page():
    """Current extract of a sole trader registered in the register."""
    return load_page("detail_firm.html")


@pytest.fixture
def search_name_page():
    """Result page of a company name search."""
    return load_page("search_name.html")


@pytest.fixture
def search_person_page():
    """Result page of a person search."""
    return load_page("search_person.html")


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from the environment: no cache, no throttling pauses."""
    from orsr_parser.config import Settings

    return Settings(
        _env_file=None,
        cache_enabled=False,
        cache_dir=tmp_path / "cache",
        requests_per_second=1000.0,
        request_delay=0.0,
        output_format="",
    )


@pytest.fixture
def row():
    """Builder of labelled detail page rows, see section_row()."""
    return section_row


@pytest.fixture
def detail_page():
    """Builder of minimal detail pages, see make_detail_page()."""
    return make_detail_page

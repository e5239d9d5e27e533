"""
Unit tests for orsr_parser.parsing.markup module.

Tests page decoding, both tree builders and strict / lenient loading.
"""

import pytest

from orsr_parser.config import Settings
from orsr_parser.exceptions import MarkupError
from orsr_parser.parsing.markup import (
    HtmlDocument,
    MarkupLoader,
    RepairingTreeBuilder,
    TolerantTreeBuilder,
    decode_markup,
)


class TestDecodeMarkup:
    """Tests for decode_markup."""

    def test_decodes_legacy_codepage(self):
        raw = "<p>Žilina, Štúrova</p>".encode("windows-1250")
        assert decode_markup(raw) == "<p>Žilina, Štúrova</p>"

    def test_rewrites_charset(self):
        raw = b'<meta http-equiv="Content-Type" content="text/html; charset=windows-1250">'
        assert "charset=utf-8" in decode_markup(raw)

    def test_replaces_nbsp(self):
        text = decode_markup("<td>Oddiel:&nbsp;Sro&#160;x\xa0y</td>")
        assert text == "<td>Oddiel: Sro x y</td>"

    def test_drops_xml_declaration(self):
        assert decode_markup('<?xml version="1.0"?><html></html>') == "<html></html>"

    def test_none(self):
        assert decode_markup(None) == ""

    def test_undecodable_bytes_replaced(self):
        """Bytes outside the codepage do not raise."""
        assert decode_markup(b"a\x81b").startswith("a")


class TestTreeBuilders:
    """Tests for TolerantTreeBuilder and RepairingTreeBuilder."""

    MALFORMED = "<html><body><table><tr><td>Oddiel<td>Sro</table><span>open"

    @pytest.mark.parametrize("builder", [TolerantTreeBuilder(), RepairingTreeBuilder()])
    def test_builds_tree_from_malformed_markup(self, builder):
        root = builder.build(self.MALFORMED)
        cells = root.xpath("//td")
        assert [cell.text_content() for cell in cells] == ["Oddiel", "Sro"]

    def test_repair_closes_elements(self):
        repaired = RepairingTreeBuilder().repair(self.MALFORMED)
        assert "</table>" in repaired
        assert "</html>" in repaired

    def test_builder_names(self):
        assert TolerantTreeBuilder().name == "tolerant"
        assert RepairingTreeBuilder().name == "repairing"


class TestHtmlDocument:
    """Tests for HtmlDocument queries."""

    def test_query_and_first(self):
        doc = MarkupLoader().load("<html><body><p>a</p><p>b</p></body></html>")
        assert len(doc.query("//p")) == 2
        assert doc.text(doc.first("//p")) == "a"
        assert doc.first("//table") is None

    def test_relative_query(self):
        doc = MarkupLoader().load("<html><body><div><p>a</p></div><p>b</p></body></html>")
        div = doc.first("//div")
        assert [doc.text(p) for p in doc.query(".//p", div)] == ["a"]

    def test_attribute_query_returns_strings(self):
        doc = MarkupLoader().load('<html><body><a href="vypis.asp?ID=1&amp;SID=2&amp;P=0">x</a></body></html>')
        assert doc.first("//a/@href") == "vypis.asp?ID=1&SID=2&P=0"

    def test_empty_document(self):
        doc = HtmlDocument(None)
        assert doc.is_empty
        assert doc.query("//td") == []
        assert doc.first("//td") is None

    def test_text_of_none_and_string(self):
        assert HtmlDocument.text(None) == ""
        assert HtmlDocument.text("abc") == "abc"


class TestMarkupLoader:
    """Tests for strict and lenient loading."""

    def test_load_fixture(self, sro_page):
        doc = MarkupLoader().load(sro_page)
        assert not doc.is_empty
        assert "Tuhovská" in doc.text(doc.root)

    def test_squash_whitespace(self):
        doc = MarkupLoader().load("<html><body><p>a\n\n   b</p></body></html>", squash_whitespace=True)
        assert doc.text(doc.first("//p")) == "a b"

    def test_strict_empty_page_raises(self):
        with pytest.raises(MarkupError) as exc_info:
            MarkupLoader(strict=True).load(b"   ")
        assert exc_info.value.diagnostics == ["Document is empty"]

    def test_lenient_empty_page_returns_empty_document(self):
        doc = MarkupLoader(strict=False).load(b"")
        assert doc.is_empty

    def test_lenient_builder_failure(self):
        """A builder error is turned into an empty document in lenient mode."""

        class FailingBuilder(TolerantTreeBuilder):
            def build(self, markup):
                raise MarkupError("Failed building document tree", ["broken"])

        doc = MarkupLoader(builder=FailingBuilder(), strict=False).load("<html></html>")
        assert doc.is_empty

        with pytest.raises(MarkupError, match="broken"):
            MarkupLoader(builder=FailingBuilder(), strict=True).load("<html></html>")

    def test_from_settings(self):
        settings = Settings(_env_file=None, repair_markup=False, strict_markup=False)
        loader = MarkupLoader.from_settings(settings)
        assert isinstance(loader.builder, TolerantTreeBuilder)
        assert loader.strict is False

        settings = Settings(_env_file=None, repair_markup=True, strict_markup=True)
        loader = MarkupLoader.from_settings(settings)
        assert isinstance(loader.builder, RepairingTreeBuilder)
        assert loader.strict is True

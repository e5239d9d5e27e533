"""
Tolerant loading of register HTML pages.

The register serves windows-1250 encoded, frequently malformed HTML
(unclosed cells, tables nested inside spans). Pages are re-encoded to UTF-8
and turned into an lxml tree which is queried with XPath by the extractors.

Two tree builders are available:
- RepairingTreeBuilder: BeautifulSoup (lxml backend) repairs the markup first,
  the repaired markup is then parsed into an lxml tree
- TolerantTreeBuilder: lxml's recovering HTML parser only

The builder is chosen when the loader is constructed.
"""

import logging
import re
import warnings
from abc import ABC, abstractmethod

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning
from lxml import etree
from lxml import html as lxml_html

from orsr_parser.constants import SOURCE_ENCODING
from orsr_parser.exceptions import MarkupError

logger = logging.getLogger(__name__)

_CHARSET_RE = re.compile(re.escape(SOURCE_ENCODING), re.IGNORECASE)
_XML_DECLARATION_RE = re.compile(r"^\s*<\?xml[^>]*\?>", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")


def decode_markup(raw: bytes | str, encoding: str = SOURCE_ENCODING) -> str:
    """
    Re-encode a register page to a UTF-8 text.

    Bytes are decoded from the legacy codepage; characters that cannot be
    decoded are replaced instead of failing. The charset declaration is
    rewritten and non-breaking spaces become plain spaces.

    Args:
        raw: Page as returned by the register (bytes) or already decoded text
        encoding: Source codepage of byte input

    Returns:
        Decoded page text
    """
    if raw is None:
        return ""
    if isinstance(raw, bytes):
        text = raw.decode(encoding, errors="replace")
    else:
        text = raw
    text = _CHARSET_RE.sub("utf-8", text)
    text = text.replace("&nbsp;", " ").replace("&#160;", " ").replace("\xa0", " ")
    return _XML_DECLARATION_RE.sub("", text)


class TreeBuilder(ABC):
    """
    Strategy turning decoded markup into an lxml element tree.

    Implementations raise MarkupError when no tree can be built at all.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in log messages."""
        pass

    @abstractmethod
    def build(self, markup: str) -> etree._Element:
        """
        Build a tree from decoded markup.

        Args:
            markup: Decoded page text

        Returns:
            Root <html> element

        Raises:
            MarkupError: If the markup does not yield any document
        """
        pass


class TolerantTreeBuilder(TreeBuilder):
    """Parse with lxml's recovering HTML parser, structural errors suppressed."""

    @property
    def name(self) -> str:
        return "tolerant"

    def build(self, markup: str) -> etree._Element:
        parser = lxml_html.HTMLParser(recover=True, encoding="utf-8", remove_comments=True)
        try:
            root = lxml_html.document_fromstring(markup.encode("utf-8"), parser=parser)
        except (etree.ParserError, etree.XMLSyntaxError, ValueError) as e:
            diagnostics = [str(entry) for entry in parser.error_log] or [str(e)]
            raise MarkupError("Failed building document tree", diagnostics) from e
        if root is None:
            raise MarkupError("Failed building document tree", ["Document is empty"])
        return root


class RepairingTreeBuilder(TreeBuilder):
    """Repair the markup with BeautifulSoup, then parse it with lxml."""

    def __init__(self, features: str = "lxml"):
        self.features = features
        self._parser = TolerantTreeBuilder()

    @property
    def name(self) -> str:
        return "repairing"

    def repair(self, markup: str) -> str:
        """Return well-formed markup for the given page."""
        # Suppress the XML-as-HTML warning (some pages carry an XHTML prolog)
        with warnings.catch_warnings():
            warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)
            try:
                soup = BeautifulSoup(markup, self.features)
            except Exception:
                soup = BeautifulSoup(markup, "html.parser")
        return str(soup)

    def build(self, markup: str) -> etree._Element:
        return self._parser.build(self.repair(markup))


class HtmlDocument:
    """
    Navigable, queryable register page.

    An empty document (root is None) answers every query with an empty list,
    which lets the extraction pipeline run unchanged in lenient mode.
    """

    def __init__(self, root: etree._Element | None = None, markup: str = ""):
        self.root = root
        self.markup = markup

    @property
    def is_empty(self) -> bool:
        return self.root is None

    def query(self, path: str, node=None) -> list:
        """
        Evaluate an XPath expression.

        Args:
            path: Absolute path or path relative to node
            node: Context node (default: document root)

        Returns:
            Ordered list of matching nodes, possibly empty
        """
        if self.root is None:
            return []
        context = self.root if node is None else node
        result = context.xpath(path)
        if isinstance(result, list):
            return result
        return [result]

    def first(self, path: str, node=None):
        """Return the first match of path or None."""
        matches = self.query(path, node)
        return matches[0] if matches else None

    @staticmethod
    def text(node) -> str:
        """String value of a node (concatenated descendant text)."""
        if node is None:
            return ""
        if isinstance(node, str):
            return str(node)
        return node.text_content()

    def __repr__(self) -> str:
        state = "empty" if self.root is None else "loaded"
        return f"HtmlDocument({state})"


class MarkupLoader:
    """
    Load register pages into HtmlDocument instances.

    Args:
        builder: Tree building strategy (default: RepairingTreeBuilder)
        strict: If True, raise MarkupError on unusable pages. If False,
            log a warning and return an empty document.
    """

    def __init__(self, builder: TreeBuilder | None = None, strict: bool = True):
        self.builder = builder or RepairingTreeBuilder()
        self.strict = strict

    @classmethod
    def from_settings(cls, settings) -> "MarkupLoader":
        """Create a loader honouring repair_markup / strict_markup settings."""
        builder = RepairingTreeBuilder() if settings.repair_markup else TolerantTreeBuilder()
        return cls(builder=builder, strict=settings.strict_markup)

    def load(self, raw: bytes | str, squash_whitespace: bool = False) -> HtmlDocument:
        """
        Decode, repair and parse a page.

        Args:
            raw: Page bytes (windows-1250) or decoded text
            squash_whitespace: Collapse every whitespace run in the markup to a
                single space before parsing (used for detail pages)

        Returns:
            HtmlDocument, empty in lenient mode when the page is unusable

        Raises:
            MarkupError: In strict mode when no tree can be built
        """
        markup = decode_markup(raw)
        if squash_whitespace:
            markup = _WHITESPACE_RE.sub(" ", markup)

        if not markup.strip():
            error = MarkupError("Failed building document tree", ["Document is empty"])
            return self._fail(error)

        try:
            root = self.builder.build(markup)
        except MarkupError as e:
            return self._fail(e)

        logger.debug(f"Loaded document with {self.builder.name} builder ({len(markup):,} chars)")
        return HtmlDocument(root, markup)

    def _fail(self, error: MarkupError) -> HtmlDocument:
        if self.strict:
            raise error
        logger.warning(f"Unusable markup, continuing with empty document: {error}")
        return HtmlDocument(None)

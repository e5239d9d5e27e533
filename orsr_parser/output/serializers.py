"""
Record serializers.

Formats:
- json: UTF-8 JSON, non-ASCII characters kept
- xml: generic mapping to XML (see to_xml)
- raw: pprint dump for humans
- "": no serialization, the record itself is returned
"""

import json
import logging
import pprint
import re
from typing import Any

from lxml import etree

from orsr_parser.constants import OUTPUT_FORMATS
from orsr_parser.exceptions import OutputFormatError, SerializationError

logger = logging.getLogger(__name__)

# Element / attribute names accepted by to_xml
_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\-]*$")

ATTRIBUTES_KEY = "@attributes"
VALUE_KEY = "@value"
CDATA_KEY = "@cdata"


def normalize_format(fmt: str | None) -> str:
    """
    Lowercase and validate an output format.

    Raises:
        OutputFormatError: For formats other than json, xml, raw and ""
    """
    fmt = (fmt or "").strip().lower()
    if fmt not in OUTPUT_FORMATS:
        raise OutputFormatError(f"Output format [{fmt}] not supported.")
    return fmt


def to_json(record: dict[str, Any], indent: int | None = None) -> str:
    """Serialize a record to JSON without escaping non-ASCII characters."""
    return json.dumps(record, ensure_ascii=False, indent=indent, default=str)


def to_raw(record: dict[str, Any]) -> str:
    """Human readable dump."""
    return pprint.pformat(record, width=120, sort_dicts=False)


def _text(value: Any) -> str:
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return ""
    return str(value)


def _check_name(name: Any, parent: str, kind: str = "tag") -> str:
    name = str(name)
    if not _NAME_RE.match(name):
        raise SerializationError(f"Illegal character in {kind} name. {kind}: {name} in node: {parent}")
    return name


def _build(name: str, value: Any) -> etree._Element:
    node = etree.Element(name)

    if isinstance(value, dict):
        value = dict(value)
        for attr, attr_value in (value.pop(ATTRIBUTES_KEY, None) or {}).items():
            node.set(_check_name(attr, name, "attribute"), _text(attr_value))

        # A node with a text value cannot have children
        if VALUE_KEY in value:
            node.text = _text(value[VALUE_KEY])
            return node
        if CDATA_KEY in value:
            node.text = etree.CDATA(_text(value[CDATA_KEY]))
            return node

        for key, child in value.items():
            tag = _check_name(key, name)
            if isinstance(child, list):
                # Items of a list repeat the parent tag
                for item in child:
                    node.append(_build(tag, item))
            else:
                node.append(_build(tag, child))
        return node

    if isinstance(value, list):
        for item in value:
            node.append(_build("item", item))
        return node

    node.text = _text(value)
    return node


def to_xml(record: dict[str, Any], root: str = "root") -> str:
    """
    Serialize a record to an XML document.

    Mapping rules:
    - dict keys become child elements, names must be valid XML names
    - list values repeat the element of their key once per item
    - "@attributes" (dict) sets attributes of the enclosing element
    - "@value" / "@cdata" set the text (or CDATA) of the enclosing element
    - booleans are written as true / false

    Example:
        {"predmet_cinnosti": ["a", "b"]}
        -> <root><predmet_cinnosti>a</predmet_cinnosti><predmet_cinnosti>b</predmet_cinnosti></root>

    Raises:
        SerializationError: If a key is not a valid element or attribute name
    """
    try:
        tree = _build(_check_name(root, ""), record)
    except ValueError as e:
        # lxml rejects control characters in text
        raise SerializationError(f"Cannot serialize record to XML: {e}") from e
    return etree.tostring(tree, pretty_print=True, xml_declaration=True, encoding="UTF-8").decode("utf-8")


def serialize(record: dict[str, Any], fmt: str | None = "") -> Any:
    """
    Render a record in the requested format.

    Args:
        record: Extracted record
        fmt: "json", "xml", "raw" or "" (return the record unchanged)

    Returns:
        Serialized text, or the record itself for ""

    Raises:
        OutputFormatError: For unknown formats
        SerializationError: If XML serialization fails
    """
    fmt = normalize_format(fmt)
    if fmt == "json":
        return to_json(record)
    if fmt == "xml":
        return to_xml(record)
    if fmt == "raw":
        return to_raw(record)
    return record

"""Rendering of extracted records as JSON, XML or a readable dump."""

from orsr_parser.output.serializers import serialize, to_json, to_raw, to_xml

__all__ = ["serialize", "to_json", "to_raw", "to_xml"]

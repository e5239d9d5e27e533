"""Typed values produced while parsing register pages."""

from orsr_parser.domain.models import (
    AddressParts,
    DetailId,
    MonetaryAmount,
    PersonRecord,
)

__all__ = [
    "AddressParts",
    "DetailId",
    "MonetaryAmount",
    "PersonRecord",
]
